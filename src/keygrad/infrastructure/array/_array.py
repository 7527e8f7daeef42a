"""
Concrete dense array implementation (NumPy flat-buffer backend).

This module provides `Array`, the value type every graph node produces. An
`Array` owns:
- a shape: a non-empty tuple of positive ints, and
- a flat, contiguous, one-dimensional NumPy buffer whose length equals the
  product of the shape.

The invariant ``len(data) == prod(shape)`` is checked at every construction
site and after every in-place mutation.

Design notes
------------
- Elementwise arithmetic, matmul/transpose, reductions, unary maps and
  memory/shape helpers are implemented in mixins (see ``mixins/``); this file
  only holds storage, constructors, element access and dunder plumbing.
- Arrays are value types. Copies never share buffers, and every operation
  except the explicit ``*_assign`` mutators returns a new array.
- Mixins construct results via ``type(self)._from_flat`` to avoid importing
  this module (and creating import cycles).
"""

from __future__ import annotations

import operator
from typing import Any, Iterator, Optional, Sequence, Union

import numpy as np

from ...domain._array import IArray
from ...domain._errors import ShapeError
from ._config import resolve_dtype
from ._shape import Shape, check_shape_positive, shape_product
from .mixins import (
    ArrayMixinArithmetic,
    ArrayMixinLinalg,
    ArrayMixinMemory,
    ArrayMixinReduction,
    ArrayMixinUnary,
)

Number = Union[int, float]


class Array(
    ArrayMixinArithmetic,
    ArrayMixinUnary,
    ArrayMixinLinalg,
    ArrayMixinReduction,
    ArrayMixinMemory,
    IArray,
):
    """
    Dense n-dimensional floating-point array.

    Parameters
    ----------
    shape : Sequence[int]
        Array shape. Must be non-empty with all entries > 0.
    value : Number, optional
        Fill value for every element. Defaults to 0.0.
    dtype : np.dtype, optional
        Floating-point element type. Defaults to `_config.DEFAULT_DTYPE`.

    Raises
    ------
    ShapeError
        If the shape is empty or contains a non-positive dimension.
    TypeError
        If `dtype` is not a floating-point type.

    Examples
    --------
    >>> Array((2, 3), 1.0).shape
    (2, 3)
    """

    def __init__(
        self, shape: Sequence[int], value: Number = 0.0, *, dtype: Any = None
    ) -> None:
        self._shape: Shape = check_shape_positive(shape, "Array")
        dt = resolve_dtype(dtype)
        self._data: np.ndarray = np.full(shape_product(self._shape), value, dtype=dt)

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------
    @classmethod
    def new(cls, value: Number, shape: Sequence[int], *, dtype: Any = None) -> "Array":
        """Create an array of `shape` filled with `value`."""
        return cls(shape, value, dtype=dtype)

    @classmethod
    def ones(cls, shape: Sequence[int], *, dtype: Any = None) -> "Array":
        """Create an array of `shape` filled with ones."""
        return cls(shape, 1.0, dtype=dtype)

    @classmethod
    def zeros(cls, shape: Sequence[int], *, dtype: Any = None) -> "Array":
        """Create an array of `shape` filled with zeros."""
        return cls(shape, 0.0, dtype=dtype)

    @classmethod
    def from_buffer(
        cls, data: Any, shape: Sequence[int], *, dtype: Any = None
    ) -> "Array":
        """
        Create an array from flat row-major data and a shape.

        Parameters
        ----------
        data : Any
            Sequence (or ndarray) of numbers. Multi-dimensional input is
            flattened in row-major order.
        shape : Sequence[int]
            Target shape.
        dtype : np.dtype, optional
            Element type. If None, a floating ndarray keeps its own dtype and
            anything else uses the default dtype.

        Returns
        -------
        Array
            New array owning a copy of `data`.

        Raises
        ------
        ShapeError
            If the shape is invalid or ``len(data) != prod(shape)``.
        """
        shape_t = check_shape_positive(shape, "from_buffer")
        if dtype is None and isinstance(data, np.ndarray) and np.issubdtype(
            data.dtype, np.floating
        ):
            dt = np.dtype(data.dtype)
        else:
            dt = resolve_dtype(dtype)
        flat = np.array(data, dtype=dt, copy=True).reshape(-1)
        if flat.shape[0] != shape_product(shape_t):
            raise ShapeError(
                "from_buffer",
                f"Data length {flat.shape[0]} does not match shape product "
                f"{shape_product(shape_t)}.",
                shape_t,
            )
        return cls._from_flat(flat, shape_t)

    @classmethod
    def from_numpy(cls, arr: Any, *, dtype: Any = None) -> "Array":
        """
        Create an array from an ndarray (or nested lists), copying the data.

        A 0-d input becomes a ``(1,)`` array.
        """
        a = np.asarray(arr)
        shape = a.shape if a.ndim > 0 else (1,)
        return cls.from_buffer(a, shape, dtype=dtype)

    @classmethod
    def from_list(cls, values: Any, *, dtype: Any = None) -> "Array":
        """Create an array from (possibly nested) Python lists."""
        return cls.from_numpy(np.asarray(values, dtype=resolve_dtype(dtype)))

    @classmethod
    def _from_flat(cls, flat: np.ndarray, shape: Shape) -> "Array":
        """
        Wrap an already-validated flat buffer without copying.

        Raises
        ------
        ShapeError
            If the buffer length does not match the shape (internal invariant).
        """
        if flat.ndim != 1 or flat.shape[0] != shape_product(shape):
            raise ShapeError(
                "Array",
                f"Output buffer has wrong length. Got: {flat.size}, "
                f"expected: {shape_product(shape)}.",
                shape,
            )
        obj = cls.__new__(cls)
        obj._shape = tuple(int(d) for d in shape)
        obj._data = flat
        return obj

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------
    @property
    def shape(self) -> Shape:
        return self._shape

    @property
    def data(self) -> np.ndarray:
        """
        Return the flat backing buffer.

        Notes
        -----
        This is the live buffer, not a copy. Writing into it mutates the
        array; use `copy()` or `to_numpy()` for an independent snapshot.
        """
        return self._data

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def size(self) -> int:
        return self._data.shape[0]

    @property
    def ndim(self) -> int:
        return len(self._shape)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def _flat_index(self, index: Sequence[int]) -> int:
        if isinstance(index, (int, np.integer)):
            index = (index,)
        index = tuple(index)
        if len(index) != len(self._shape):
            raise ShapeError(
                "index",
                f"Index {list(index)} has {len(index)} entries for a "
                f"{len(self._shape)}-dimensional array.",
                self._shape,
            )
        flat = 0
        for i, d in zip(index, self._shape):
            i = operator.index(i)
            if i < 0 or i >= d:
                raise ShapeError(
                    "index", f"Index {list(index)} is out of range.", self._shape
                )
            flat = flat * d + i
        return flat

    def i(self, index: Sequence[int]) -> float:
        """
        Return the element at a full multi-dimensional index.

        Raises
        ------
        ShapeError
            If the index length differs from the rank or any entry is out of
            range.
        """
        return self._data[self._flat_index(index)]

    def __getitem__(self, index: Sequence[int]) -> float:
        return self.i(index)

    def __setitem__(self, index: Sequence[int], value: Number) -> None:
        self._data[self._flat_index(index)] = value

    def __iter__(self) -> Iterator[float]:
        """Iterate over the elements in flat row-major order."""
        return iter(self._data)

    # ------------------------------------------------------------------
    # Comparison / display
    # ------------------------------------------------------------------
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Array):
            return NotImplemented
        return self._shape == other._shape and bool(
            np.array_equal(self._data, other._data)
        )

    def __ne__(self, other: object) -> bool:
        eq = self.__eq__(other)
        return eq if eq is NotImplemented else not eq

    __hash__ = None  # mutable value type

    # Keep NumPy scalars from swallowing mixed expressions like np.float64(2) * a.
    __array_ufunc__ = None

    def allclose(
        self, other: "Array", rtol: float = 1e-5, atol: float = 1e-8
    ) -> bool:
        """Return True if shapes match and all elements are close."""
        return self._shape == other.shape and bool(
            np.allclose(self._data, other.data, rtol=rtol, atol=atol)
        )

    def __repr__(self) -> str:
        return (
            f"Array(shape={list(self._shape)}, dtype={self._data.dtype}, "
            f"data={np.array2string(self._data, separator=', ', threshold=20)})"
        )

    def __str__(self) -> str:
        return np.array2string(self.to_numpy(), separator=", ")

    def __array__(self, dtype: Optional[Any] = None, copy: Optional[bool] = None):
        out = self.to_numpy()
        return out if dtype is None else out.astype(dtype, copy=False)
