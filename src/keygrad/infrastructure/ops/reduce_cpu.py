"""
CPU reduction kernels for keygrad.

A reduction folds the elements along one axis (or along every axis) with an
associative binary reducer. Reducers may be NumPy ufuncs (``np.add``,
``np.maximum``, ...), which are applied with ``ufunc.reduce``, or any Python
callable ``f(acc, x)`` that works elementwise on NumPy arrays, which is folded
explicitly.

Data layout
-----------
For an axis reduction the flat buffer is viewed as ``(outer, dim, inner)``
where ``outer`` is the product of the dimensions before the axis, ``dim`` the
reduced dimension and ``inner`` the product of the dimensions after it. The
output buffer is ``(outer, inner)`` in row-major order, which is exactly the
flat layout of the reduced array with or without ``keep_dims``.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Union

import numpy as np

from ..array._shape import check_reduce_axis, shape_product

Reducer = Union[np.ufunc, Callable[[np.ndarray, np.ndarray], np.ndarray]]


def _fold(reducer: Reducer, view: np.ndarray) -> np.ndarray:
    # Fold along axis 1 of an (outer, dim, inner) view.
    if isinstance(reducer, np.ufunc):
        return reducer.reduce(view, axis=1)
    acc = np.array(view[:, 0, :], copy=True)
    for j in range(1, view.shape[1]):
        acc = np.asarray(reducer(acc, view[:, j, :]))
    return acc


def reduce_forward_cpu(
    data: np.ndarray,
    shape: Sequence[int],
    reducer: Reducer,
    axis: Optional[int],
) -> np.ndarray:
    """
    Reduce a flat buffer over `axis` (or over all elements).

    Parameters
    ----------
    data : np.ndarray
        Flat buffer of length ``prod(shape)``.
    shape : Sequence[int]
        Logical shape of `data`.
    reducer : Reducer
        Associative binary reducer.
    axis : Optional[int]
        Axis to reduce; None reduces every element into a single value.

    Returns
    -------
    np.ndarray
        Flat buffer holding the reduced values (length 1 for ``axis=None``),
        in the dtype of `data`.
    """
    check_reduce_axis(shape, axis)

    if axis is None:
        view = data.reshape(1, data.shape[0], 1)
    else:
        outer = shape_product(shape[:axis])
        inner = shape_product(shape[axis + 1 :])
        view = data.reshape(outer, int(shape[axis]), inner)

    out = _fold(reducer, view)
    return np.ascontiguousarray(out, dtype=data.dtype).reshape(-1)
