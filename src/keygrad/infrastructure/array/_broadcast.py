"""
Broadcast iteration over pairs of flat array buffers.

`BroadcastIterator` walks two arrays in lockstep under the trailing-dimension
broadcasting rule without materializing any replicated data. The caller
chooses how many trailing dimensions are *kept* intact per produced slice:

- ``trailing_dims=0`` yields one pair of single-element slices per output
  element (plain elementwise broadcasting);
- ``trailing_dims=k`` yields one pair of contiguous slices per combination of
  the leading (broadcast) dimensions, each slice covering the product of the
  array's last `k` dimensions. Matmul uses ``k=2`` so every step produces a
  pair of matrices; elementwise ops use the number of literally equal
  trailing dimensions so each step combines two equal-length runs.

Slices are NumPy views into the source buffers; nothing is copied.
"""

from __future__ import annotations

from typing import Iterator, Tuple

import numpy as np

from ...domain._array import IArray
from ...domain._errors import ShapeError
from ._shape import Shape, broadcast_shape, pad_shapes, shape_product


class BroadcastIterator:
    """
    Iterator producing corresponding data slices from two arrays.

    Parameters
    ----------
    array1, array2 : IArray
        Source arrays. Only their shapes and flat buffers are read.
    trailing_dims : int
        Number of trailing dimensions excluded from broadcasting. Must not
        exceed the rank of either array.

    Attributes
    ----------
    broadcast_shape1, broadcast_shape2 : tuple[int, ...]
        Leading (non-trailing) dimensions of each array, left-padded with ones
        to a common rank.
    broadcast_result_shape : tuple[int, ...]
        Broadcast result over the leading dimensions. Empty when every
        dimension is trailing, in which case a single pair covering both
        whole buffers is produced.
    slice1_len, slice2_len : int
        Length of each produced slice (product of the trailing dimensions).

    Raises
    ------
    ShapeError
        If `trailing_dims` exceeds an array's rank or the leading dimensions
        are not broadcast-compatible.

    Notes
    -----
    Steps are produced in row-major order over `broadcast_result_shape`. A
    size-1 source dimension is never advanced while the result dimension
    advances, which is what replicates the data.
    """

    def __init__(self, array1: IArray, array2: IArray, trailing_dims: int) -> None:
        shape1 = tuple(array1.shape)
        shape2 = tuple(array2.shape)
        if trailing_dims < 0 or trailing_dims > min(len(shape1), len(shape2)):
            raise ShapeError(
                "broadcast",
                f"Invalid trailing_dims={trailing_dims}; it should be in "
                f"[0, {min(len(shape1), len(shape2))}] for the given shapes.",
                shape1,
                shape2,
            )

        lead1 = shape1[: len(shape1) - trailing_dims]
        lead2 = shape2[: len(shape2) - trailing_dims]

        # Validates compatibility of the leading dimensions.
        self.broadcast_result_shape: Shape = broadcast_shape(lead1, lead2)
        self.broadcast_shape1, self.broadcast_shape2 = pad_shapes(lead1, lead2)

        self.slice1_len = shape_product(shape1[len(shape1) - trailing_dims :])
        self.slice2_len = shape_product(shape2[len(shape2) - trailing_dims :])

        self._data1: np.ndarray = array1.data
        self._data2: np.ndarray = array2.data
        self._strides1 = self._slice_strides(self.broadcast_shape1, self.slice1_len)
        self._strides2 = self._slice_strides(self.broadcast_shape2, self.slice2_len)
        self._current_index = [0] * len(self.broadcast_result_shape)
        self._done = False

    @staticmethod
    def _slice_strides(shape: Shape, slice_len: int) -> Tuple[int, ...]:
        # Broadcast (size-1) dimensions get stride 0 so they never advance.
        strides = []
        prod = slice_len
        for d in reversed(shape):
            strides.append(0 if d == 1 else prod)
            prod *= d
        return tuple(reversed(strides))

    def __len__(self) -> int:
        return shape_product(self.broadcast_result_shape)

    def __iter__(self) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        return self

    def _increment(self) -> None:
        idx = self._current_index
        shape = self.broadcast_result_shape
        for i in range(len(shape) - 1, -1, -1):
            idx[i] += 1
            if idx[i] < shape[i]:
                return
            idx[i] = 0
        self._done = True

    def __next__(self) -> Tuple[np.ndarray, np.ndarray]:
        if self._done:
            raise StopIteration

        if not self._current_index:
            self._done = True
            return self._data1, self._data2

        start1 = sum(i * s for i, s in zip(self._current_index, self._strides1))
        start2 = sum(i * s for i, s in zip(self._current_index, self._strides2))
        self._increment()
        return (
            self._data1[start1 : start1 + self.slice1_len],
            self._data2[start2 : start2 + self.slice2_len],
        )
