"""
Reduction mixin for arrays.

`reduce` folds the elements of an array with an associative binary reducer,
either along one axis or over every element. The named reductions
(`reduce_sum`, `reduce_mean`, `reduce_min`, `reduce_max`, `reduce_prod`) are
thin wrappers choosing the reducer.

Shape rules
-----------
- ``axis=None`` folds every element; the result is ``(1,)``, or all ones of
  the same rank with ``keep_dims=True``.
- ``axis=k`` removes dimension ``k`` (or sets it to 1 with ``keep_dims``);
  a rank-1 input reduces to ``(1,)``.
- Negative axes are rejected.
"""

from __future__ import annotations

from abc import ABC
from typing import Optional

import numpy as np

from ....domain._array import IArray
from .._shape import reduce_shape, reduced_count


class ArrayMixinReduction(ABC):
    """
    Axis and full reductions for arrays.
    """

    def reduce(
        self: IArray, reducer, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        """
        Fold elements with `reducer` over `axis` (or over all elements).

        Parameters
        ----------
        reducer : np.ufunc or Callable
            Associative binary reducer. NumPy ufuncs are applied with
            ``ufunc.reduce``; other callables are folded left to right and
            must accept NumPy arrays.
        axis : Optional[int], optional
            Axis to reduce. None reduces every element.
        keep_dims : bool, optional
            Keep the reduced axis (or every axis) as size 1.

        Returns
        -------
        Array
            Reduced array.

        Raises
        ------
        ShapeError
            If `axis` is negative or not smaller than the rank.
        """
        from ...ops.reduce_cpu import reduce_forward_cpu

        out_shape = reduce_shape(self.shape, axis, keep_dims)
        out = reduce_forward_cpu(self.data, self.shape, reducer, axis)
        return type(self)._from_flat(out, out_shape)

    def reduce_sum(
        self: IArray, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        return self.reduce(np.add, axis, keep_dims)

    def reduce_mean(
        self: IArray, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        """
        Arithmetic mean over `axis` (or over all elements).

        The divisor is the total element count for ``axis=None`` and the
        length of the reduced axis otherwise.
        """
        total = self.reduce_sum(axis, keep_dims)
        return total.div_scalar(reduced_count(self.shape, axis))

    def reduce_min(
        self: IArray, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        return self.reduce(np.minimum, axis, keep_dims)

    def reduce_max(
        self: IArray, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        return self.reduce(np.maximum, axis, keep_dims)

    def reduce_prod(
        self: IArray, axis: Optional[int] = None, keep_dims: bool = False
    ) -> IArray:
        return self.reduce(np.multiply, axis, keep_dims)
