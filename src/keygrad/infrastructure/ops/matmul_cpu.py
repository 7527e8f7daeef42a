"""
CPU 2D matrix multiplication kernels for keygrad.

This module multiplies a single pair of row-major matrices stored as flat
NumPy slices and writes the product into a caller-provided output slice.
Batched matmul is built on top of it by the array engine, which walks the
batch dimensions with a `BroadcastIterator` (``trailing_dims=2``) and calls
`matmul_2d_matrix_slices` once per batch step.

Kernels
-------
- BLAS path: ``np.matmul`` on reshaped views, used for float32/float64.
- Reference path: explicit triple-loop accumulation, used for any other
  floating dtype, or for every dtype when ``KEYGRAD_DISABLE_BLAS`` is set.

Both kernels produce identical results up to floating-point rounding.
"""

from __future__ import annotations

import warnings

import numpy as np

from ...domain._errors import ShapeError
from ..array import _config

_warned_dtypes: set = set()


def check_matrix_product_shapes(
    data1: np.ndarray,
    n_rows1: int,
    n_cols1: int,
    data2: np.ndarray,
    n_rows2: int,
    n_cols2: int,
    output_buffer: np.ndarray,
) -> None:
    """
    Validate the operands and output buffer of a 2D matrix product.

    Raises
    ------
    ShapeError
        If the inner dimensions differ, or if any buffer length disagrees with
        the matrix dimensions it is supposed to hold.
    """
    if n_cols1 != n_rows2:
        raise ShapeError(
            "matmul",
            "Inner dimensions of the matrices doesn't match.",
            (n_rows1, n_cols1),
            (n_rows2, n_cols2),
        )
    if output_buffer.shape[0] != n_rows1 * n_cols2:
        raise ShapeError(
            "matmul",
            f"Output buffer has wrong length. Got: {output_buffer.shape[0]}, "
            f"expected: {n_rows1 * n_cols2}.",
        )
    if data1.shape[0] != n_rows1 * n_cols1:
        raise ShapeError(
            "matmul",
            f"First data slice has wrong length. Got: {data1.shape[0]}, "
            f"expected: {n_rows1 * n_cols1}.",
        )
    if data2.shape[0] != n_rows2 * n_cols2:
        raise ShapeError(
            "matmul",
            f"Second data slice has wrong length. Got: {data2.shape[0]}, "
            f"expected: {n_rows2 * n_cols2}.",
        )


def general_matmul_2d_matrix_slices(
    data1: np.ndarray,
    n_rows1: int,
    n_cols1: int,
    data2: np.ndarray,
    n_cols2: int,
    output_buffer: np.ndarray,
) -> None:
    """
    Reference triple-loop matrix product (any floating dtype).

    Accumulates in the output dtype, element by element, in the same
    ``i, j, k`` order as a textbook matmul.
    """
    zero = output_buffer.dtype.type(0)
    for i in range(n_rows1):
        row = i * n_cols1
        for j in range(n_cols2):
            acc = zero
            for k in range(n_cols1):
                acc = acc + data1[row + k] * data2[k * n_cols2 + j]
            output_buffer[i * n_cols2 + j] = acc


def matmul_2d_matrix_slices(
    data1: np.ndarray,
    n_rows1: int,
    n_cols1: int,
    data2: np.ndarray,
    n_rows2: int,
    n_cols2: int,
    output_buffer: np.ndarray,
) -> None:
    """
    Multiply two flat row-major matrices into `output_buffer`.

    Parameters
    ----------
    data1 : np.ndarray
        Flat slice holding an ``(n_rows1, n_cols1)`` matrix.
    n_rows1, n_cols1 : int
        Dimensions of the left matrix.
    data2 : np.ndarray
        Flat slice holding an ``(n_rows2, n_cols2)`` matrix.
    n_rows2, n_cols2 : int
        Dimensions of the right matrix.
    output_buffer : np.ndarray
        Flat, writable slice of length ``n_rows1 * n_cols2`` receiving the
        product. Its dtype selects the kernel.

    Raises
    ------
    ShapeError
        If the dimensions or buffer lengths are inconsistent.

    Notes
    -----
    A `RuntimeWarning` is emitted once per dtype when the reference kernel is
    used because the dtype has no BLAS routine.
    """
    check_matrix_product_shapes(
        data1, n_rows1, n_cols1, data2, n_rows2, n_cols2, output_buffer
    )

    dt = np.dtype(output_buffer.dtype)
    if _config.BLAS_ENABLED and dt in _config.BLAS_DTYPES:
        np.matmul(
            data1.reshape(n_rows1, n_cols1).astype(dt, copy=False),
            data2.reshape(n_rows2, n_cols2).astype(dt, copy=False),
            out=output_buffer.reshape(n_rows1, n_cols2),
        )
        return

    if _config.BLAS_ENABLED and dt not in _warned_dtypes:
        _warned_dtypes.add(dt)
        warnings.warn(
            f"keygrad has no BLAS matmul kernel for dtype={dt}; "
            "falling back to the reference loop implementation.",
            RuntimeWarning,
            stacklevel=2,
        )

    general_matmul_2d_matrix_slices(
        data1, n_rows1, n_cols1, data2, n_cols2, output_buffer
    )
