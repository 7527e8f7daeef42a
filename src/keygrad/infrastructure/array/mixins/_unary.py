"""
Unary mixin for elementwise Array maps.

`ArrayMixinUnary.map` applies a scalar function to every element and returns
a new array of the same shape; `map_assign` does the same in place. Graph
nodes use these with NumPy ufuncs (``np.sin``, ``np.log``, ...), which are
applied to the whole buffer at once.
"""

from __future__ import annotations

from abc import ABC
from typing import Callable

import numpy as np

from ....domain._array import IArray


class ArrayMixinUnary(ABC):
    """
    Elementwise unary operations for arrays.

    Notes
    -----
    `map` accepts either a vectorized function (one that takes and returns a
    NumPy array, such as a ufunc) or a plain scalar function. Plain functions
    are wrapped with ``np.vectorize`` and are correspondingly slower.
    """

    def _apply(self: IArray, f: Callable, vectorized: bool) -> np.ndarray:
        if vectorized:
            out = np.asarray(f(self.data))
        else:
            out = np.vectorize(f, otypes=[self.dtype])(self.data)
        if out.shape != self.data.shape:
            raise ValueError(
                f"map function changed the element count: "
                f"{self.data.shape[0]} -> {out.size}"
            )
        return out.astype(self.dtype, copy=False)

    def map(self: IArray, f: Callable, vectorized: bool = False) -> IArray:
        """
        Apply `f` to every element.

        Parameters
        ----------
        f : Callable
            Scalar function, or a function over whole NumPy arrays when
            `vectorized` is True.
        vectorized : bool, optional
            Whether `f` already operates elementwise on arrays.

        Returns
        -------
        Array
            New array of the same shape and dtype.
        """
        out = self._apply(f, vectorized)
        if out is self.data:
            out = out.copy()
        return type(self)._from_flat(out, self.shape)

    def map_assign(self: IArray, f: Callable, vectorized: bool = False) -> None:
        """In-place variant of `map`."""
        self.data[...] = self._apply(f, vectorized)

    def neg(self: IArray) -> IArray:
        """Return the elementwise negation."""
        return type(self)._from_flat(np.negative(self.data), self.shape)

    def neg_assign(self: IArray) -> None:
        np.negative(self.data, out=self.data)

    def __neg__(self):
        return self.neg()

    def __pos__(self):
        return self.copy()
