"""
Memory and shape-manipulation mixin for arrays.

Includes copying, NumPy export, reshaping, filling and `sum_to_shape`, the
inverse of broadcasting used by the gradient engine to fold a broadcast
gradient back onto an operand's shape.
"""

from __future__ import annotations

from abc import ABC
from typing import Sequence

import numpy as np

from ....domain._array import IArray
from ....domain._errors import ShapeError
from .._shape import check_shape_positive, shape_product


def _sum_to_shape_reduce_axes(
    src_shape: tuple[int, ...], target_shape: tuple[int, ...]
) -> tuple[tuple[int, ...], tuple[int, ...]]:
    """
    Compute the padded target shape and the axes to sum for `sum_to_shape`.

    The target is left-padded with ones to the source rank. Every axis where
    the padded target has size 1 and the source does not is a reduction axis.

    Raises
    ------
    ShapeError
        If the target has a higher rank than the source, or a target
        dimension is neither 1 nor equal to the source dimension.
    """
    src = tuple(int(d) for d in src_shape)
    tgt = tuple(int(d) for d in target_shape)
    if len(tgt) > len(src):
        raise ShapeError(
            "sum_to_shape",
            f"Target rank {len(tgt)} exceeds source rank {len(src)}.",
            src,
            tgt,
        )
    padded = (1,) * (len(src) - len(tgt)) + tgt
    for sd, td in zip(src, padded):
        if td not in (1, sd):
            raise ShapeError(
                "sum_to_shape",
                "Target shape could not have been broadcast to source shape.",
                src,
                tgt,
            )
    axes = tuple(
        i for i, (sd, td) in enumerate(zip(src, padded)) if td == 1 and sd != 1
    )
    return padded, axes


class ArrayMixinMemory(ABC):
    """
    Copy, export and reshape helpers for arrays.
    """

    def copy(self: IArray) -> IArray:
        """Return an independent copy with its own buffer."""
        return type(self)._from_flat(self.data.copy(), self.shape)

    def to_numpy(self: IArray) -> np.ndarray:
        """Return a copy of the data as an ndarray of this array's shape."""
        return self.data.reshape(self.shape).copy()

    def tolist(self: IArray) -> list:
        return self.to_numpy().tolist()

    def astype(self: IArray, dtype) -> IArray:
        """
        Return a copy converted to another floating dtype.

        Raises
        ------
        TypeError
            If `dtype` is not floating-point.
        """
        from .._config import resolve_dtype

        dt = resolve_dtype(dtype)
        return type(self)._from_flat(self.data.astype(dt, copy=True), self.shape)

    def reshape(self: IArray, shape: Sequence[int]) -> IArray:
        """
        Return a copy with a new shape of the same element count.

        Raises
        ------
        ShapeError
            If the new shape is invalid or has a different element count.
        """
        new_shape = check_shape_positive(shape, "reshape")
        if shape_product(new_shape) != self.size:
            raise ShapeError(
                "reshape",
                "Element count differs between shapes.",
                self.shape,
                new_shape,
            )
        return type(self)._from_flat(self.data.copy(), new_shape)

    def fill(self: IArray, value) -> None:
        """Set every element to `value` in place."""
        self.data.fill(value)

    def sum_to_shape(self: IArray, target_shape: Sequence[int]) -> IArray:
        """
        Sum-reduce this array onto `target_shape` (inverse broadcasting).

        If `target_shape` was broadcast to ``self.shape`` by some forward
        operation, this sums over every broadcast axis and drops the leading
        padding so the result has exactly `target_shape`.

        Returns
        -------
        Array
            A new array of shape `target_shape` (a copy when the shapes are
            already equal).

        Raises
        ------
        ShapeError
            If `target_shape` is not broadcast-compatible with ``self.shape``.
        """
        target = tuple(int(d) for d in target_shape)
        if target == tuple(self.shape):
            return self.copy()
        _, axes = _sum_to_shape_reduce_axes(self.shape, target)
        arr = self.data.reshape(self.shape)
        if axes:
            arr = np.sum(arr, axis=axes, keepdims=True)
        flat = np.ascontiguousarray(arr, dtype=self.dtype).reshape(-1)
        return type(self)._from_flat(flat.copy(), target)
