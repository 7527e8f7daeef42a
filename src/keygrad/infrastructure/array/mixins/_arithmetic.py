"""
Arithmetic mixin implementing broadcasting elementwise Array operators.

This module defines :class:`ArrayMixinArithmetic`, which provides addition,
subtraction, multiplication and division between two arrays (broadcasting)
and between an array and a scalar, together with their in-place
(``*_assign``) variants and the matching Python operators.

Array-array algorithm
---------------------
1. Compute the broadcast result shape (fails with `ShapeError` if the shapes
   are incompatible).
2. Count the trailing dimensions that are literally equal in both shapes.
   The product of those dimensions is a contiguous run that can be combined
   without re-striding.
3. Walk a `BroadcastIterator` over the remaining leading dimensions and apply
   the scalar binary ufunc to each pair of equal-length runs, writing them
   consecutively into a pre-allocated output buffer.
"""

from __future__ import annotations

from abc import ABC
from typing import Union

import numpy as np

from ....domain._array import IArray
from ....domain._errors import ShapeError
from .._broadcast import BroadcastIterator
from .._shape import broadcast_shape, matching_trailing_dims, shape_product

Number = Union[int, float]


def _is_number(x: object) -> bool:
    return isinstance(x, (int, float, np.floating, np.integer)) and not isinstance(
        x, bool
    )


class ArrayMixinArithmetic(ABC):
    """
    Elementwise arithmetic for arrays.

    Notes
    -----
    - Array-array operations broadcast with the trailing-dimension rule.
    - Array-scalar operations need no broadcasting; the scalar is cast to
      the array's dtype first.
    - The result dtype of an array-array operation is
      ``np.result_type(a.dtype, b.dtype)``.
    """

    # ----------------------------
    # Engine
    # ----------------------------
    def _binary_op(self: IArray, other: IArray, ufunc: np.ufunc, op: str) -> IArray:
        if not isinstance(other, type(self)):
            raise TypeError(
                f"{op} expects an Array operand, got {type(other).__name__}"
            )
        out_shape = broadcast_shape(self.shape, other.shape, op=op)
        dtype = np.result_type(self.dtype, other.dtype)
        out = np.empty(shape_product(out_shape), dtype=dtype)

        trailing = matching_trailing_dims(self.shape, other.shape)
        pos = 0
        for s1, s2 in BroadcastIterator(self, other, trailing):
            n = s1.shape[0]
            ufunc(s1, s2, out=out[pos : pos + n])
            pos += n

        if pos != out.shape[0]:
            raise ShapeError(
                op,
                f"Output buffer has wrong length. Got: {pos}, "
                f"expected: {out.shape[0]}.",
            )
        return type(self)._from_flat(out, out_shape)

    def _scalar_op(self: IArray, scalar: Number, ufunc: np.ufunc, op: str) -> IArray:
        if not _is_number(scalar):
            raise TypeError(f"{op} expects a scalar, got {type(scalar).__name__}")
        s = self.dtype.type(scalar)
        return type(self)._from_flat(ufunc(self.data, s), self.shape)

    def _assign_from(self: IArray, result: IArray, op: str) -> None:
        # In-place ops may not change the receiver's shape.
        if result.shape != self.shape:
            raise ShapeError(
                op,
                "In-place result shape differs from the receiver's shape.",
                self.shape,
                result.shape,
            )
        self.data[...] = result.data

    # ----------------------------
    # Array-array
    # ----------------------------
    def add(self: IArray, other: IArray) -> IArray:
        """
        Elementwise (broadcasting) addition.

        Parameters
        ----------
        other : Array
            Right-hand operand.

        Returns
        -------
        Array
            New array of the broadcast shape.

        Raises
        ------
        ShapeError
            If the shapes cannot be broadcast together.
        """
        return self._binary_op(other, np.add, "add")

    def sub(self: IArray, other: IArray) -> IArray:
        """Elementwise (broadcasting) subtraction ``self - other``."""
        return self._binary_op(other, np.subtract, "sub")

    def mul(self: IArray, other: IArray) -> IArray:
        """Elementwise (broadcasting) multiplication."""
        return self._binary_op(other, np.multiply, "mul")

    def div(self: IArray, other: IArray) -> IArray:
        """Elementwise (broadcasting) true division ``self / other``."""
        return self._binary_op(other, np.true_divide, "div")

    # ----------------------------
    # Array-scalar
    # ----------------------------
    def add_scalar(self: IArray, other: Number) -> IArray:
        return self._scalar_op(other, np.add, "add_scalar")

    def sub_scalar(self: IArray, other: Number) -> IArray:
        return self._scalar_op(other, np.subtract, "sub_scalar")

    def mul_scalar(self: IArray, other: Number) -> IArray:
        return self._scalar_op(other, np.multiply, "mul_scalar")

    def div_scalar(self: IArray, other: Number) -> IArray:
        return self._scalar_op(other, np.true_divide, "div_scalar")

    # ----------------------------
    # In-place
    # ----------------------------
    def add_assign(self: IArray, other: IArray) -> None:
        """
        In-place broadcasting addition.

        Raises
        ------
        ShapeError
            If the shapes are incompatible or the broadcast result shape
            differs from this array's shape.
        """
        self._assign_from(self.add(other), "add_assign")

    def sub_assign(self: IArray, other: IArray) -> None:
        self._assign_from(self.sub(other), "sub_assign")

    def mul_assign(self: IArray, other: IArray) -> None:
        self._assign_from(self.mul(other), "mul_assign")

    def div_assign(self: IArray, other: IArray) -> None:
        self._assign_from(self.div(other), "div_assign")

    def add_assign_scalar(self: IArray, other: Number) -> None:
        self.data[...] = self.add_scalar(other).data

    def sub_assign_scalar(self: IArray, other: Number) -> None:
        self.data[...] = self.sub_scalar(other).data

    def mul_assign_scalar(self: IArray, other: Number) -> None:
        self.data[...] = self.mul_scalar(other).data

    def div_assign_scalar(self: IArray, other: Number) -> None:
        self.data[...] = self.div_scalar(other).data

    # ----------------------------
    # Operators
    # ----------------------------
    def __add__(self, other):
        if isinstance(other, type(self)):
            return self.add(other)
        if _is_number(other):
            return self.add_scalar(other)
        return NotImplemented

    def __radd__(self, other):
        if _is_number(other):
            return self.add_scalar(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, type(self)):
            return self.sub(other)
        if _is_number(other):
            return self.sub_scalar(other)
        return NotImplemented

    def __rsub__(self, other):
        # scalar - array
        if _is_number(other):
            return self.neg().add_scalar(other)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, type(self)):
            return self.mul(other)
        if _is_number(other):
            return self.mul_scalar(other)
        return NotImplemented

    def __rmul__(self, other):
        if _is_number(other):
            return self.mul_scalar(other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, type(self)):
            return self.div(other)
        if _is_number(other):
            return self.div_scalar(other)
        return NotImplemented

    def __rtruediv__(self, other):
        # scalar / array
        if _is_number(other):
            s = self.dtype.type(other)
            return type(self)._from_flat(np.true_divide(s, self.data), self.shape)
        return NotImplemented

    def __iadd__(self, other):
        if isinstance(other, type(self)):
            self.add_assign(other)
        elif _is_number(other):
            self.add_assign_scalar(other)
        else:
            return NotImplemented
        return self

    def __isub__(self, other):
        if isinstance(other, type(self)):
            self.sub_assign(other)
        elif _is_number(other):
            self.sub_assign_scalar(other)
        else:
            return NotImplemented
        return self

    def __imul__(self, other):
        if isinstance(other, type(self)):
            self.mul_assign(other)
        elif _is_number(other):
            self.mul_assign_scalar(other)
        else:
            return NotImplemented
        return self

    def __itruediv__(self, other):
        if isinstance(other, type(self)):
            self.div_assign(other)
        elif _is_number(other):
            self.div_assign_scalar(other)
        else:
            return NotImplemented
        return self
