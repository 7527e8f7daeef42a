"""
Linear-algebra mixin: batched matrix product and batched transpose.

Both operations treat the last two dimensions of an array as a row-major
matrix and every leading dimension as a batch dimension.

- ``matmul`` broadcasts the batch dimensions of the two operands and walks
  them with a `BroadcastIterator` (``trailing_dims=2``); each step hands one
  pair of matrices to the 2D CPU kernel, which writes into the next
  ``rows1 * cols2`` run of the output buffer.
- ``transpose`` swaps the last two dimensions of every trailing matrix.

Kernels are imported inside the methods to keep the ``ops`` package out of
the array package's import graph.
"""

from __future__ import annotations

from abc import ABC

import numpy as np

from ....domain._array import IArray
from ....domain._errors import ShapeError
from .._broadcast import BroadcastIterator
from .._shape import matmul_shape, shape_product, transpose_shape


class ArrayMixinLinalg(ABC):
    """
    Matrix operations over the trailing two dimensions of an array.
    """

    def matmul(self: IArray, other: IArray) -> IArray:
        """
        Batched matrix product.

        Parameters
        ----------
        other : Array
            Right operand. Both operands must be at least 2-dimensional.

        Returns
        -------
        Array
            Array of shape ``broadcast(batch1, batch2) + (rows1, cols2)``.

        Raises
        ------
        ShapeError
            If either rank is below 2, the inner dimensions differ, or the
            batch dimensions cannot be broadcast.

        Examples
        --------
        >>> a = Array.ones((2, 3, 2))
        >>> b = Array.new(2.0, (2, 2, 4))
        >>> a.matmul(b).shape
        (2, 3, 4)
        """
        from ...ops.matmul_cpu import matmul_2d_matrix_slices

        out_shape = matmul_shape(self.shape, other.shape)
        rows1, cols1 = self.shape[-2:]
        rows2, cols2 = other.shape[-2:]
        step = rows1 * cols2

        dtype = np.result_type(self.dtype, other.dtype)
        out = np.empty(shape_product(out_shape), dtype=dtype)

        pos = 0
        for m1, m2 in BroadcastIterator(self, other, 2):
            matmul_2d_matrix_slices(
                m1, rows1, cols1, m2, rows2, cols2, out[pos : pos + step]
            )
            pos += step

        if pos != out.shape[0]:
            raise ShapeError(
                "matmul",
                f"Output buffer has wrong length. Got: {pos}, "
                f"expected: {out.shape[0]}.",
            )
        return type(self)._from_flat(out, out_shape)

    def __matmul__(self, other):
        if isinstance(other, type(self)):
            return self.matmul(other)
        return NotImplemented

    def transpose(self: IArray) -> IArray:
        """
        Swap the last two dimensions of every trailing matrix.

        Raises
        ------
        ShapeError
            If the array has rank below 2.
        """
        from ...ops.transpose_cpu import transpose_2d_matrix_slices

        out_shape = transpose_shape(self.shape)
        rows, cols = self.shape[-2:]
        step = rows * cols
        out = np.empty_like(self.data)
        for start in range(0, self.data.shape[0], step):
            transpose_2d_matrix_slices(
                self.data[start : start + step],
                rows,
                cols,
                out[start : start + step],
            )
        return type(self)._from_flat(out, out_shape)

    @property
    def T(self) -> IArray:
        return self.transpose()

    def transpose_assign(self: IArray) -> None:
        """
        Transpose in place, updating both the buffer and the shape.

        Raises
        ------
        ShapeError
            If the array has rank below 2.
        """
        t = self.transpose()
        self.data[...] = t.data
        self._shape = t.shape
