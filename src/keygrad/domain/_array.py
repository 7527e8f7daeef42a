"""
Array interface definitions.

This module defines the domain-level interface for dense array objects using
structural typing. The graph layer types against `IArray` so that node
implementations stay independent of the concrete NumPy-backed `Array`.
"""

from __future__ import annotations

from typing import Any, Protocol, Union, runtime_checkable

Number = Union[int, float]


@runtime_checkable
class IArray(Protocol):
    """
    Dense n-dimensional array interface.

    An `IArray` owns a flat element buffer together with a non-empty shape
    whose entries are all positive. The buffer length always equals the
    product of the shape.

    Notes
    -----
    - Arrays are value types: binary operations return new arrays, only the
      explicit ``*_assign`` methods mutate the receiver.
    - Elements are floating-point numbers; the concrete dtype is backend
      specific.
    """

    @property
    def shape(self) -> tuple[int, ...]:
        """
        Return the shape of the array.

        Returns
        -------
        tuple[int, ...]
            Non-empty tuple of positive dimension sizes.
        """
        ...

    @property
    def data(self) -> Any:
        """Return the flat, row-major element buffer."""
        ...

    @property
    def dtype(self) -> Any:
        """Return the floating-point element type."""
        ...

    @property
    def size(self) -> int:
        """Return the number of elements (product of the shape)."""
        ...

    @property
    def ndim(self) -> int:
        """Return the rank of the array."""
        ...

    def copy(self) -> "IArray":
        """Return an independent copy with its own buffer."""
        ...

    def to_numpy(self) -> Any:
        """Return the data as a backend-native ndarray of this array's shape."""
        ...

    def add(self, other: "IArray") -> "IArray": ...

    def sub(self, other: "IArray") -> "IArray": ...

    def mul(self, other: "IArray") -> "IArray": ...

    def div(self, other: "IArray") -> "IArray": ...

    def matmul(self, other: "IArray") -> "IArray": ...

    def transpose(self) -> "IArray": ...

    def sum_to_shape(self, target_shape: tuple[int, ...]) -> "IArray": ...
