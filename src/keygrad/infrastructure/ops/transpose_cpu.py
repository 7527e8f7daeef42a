"""
CPU transpose kernel for flat row-major matrix slices.

Batched transpose is implemented by the array engine, which calls
`transpose_2d_matrix_slices` once for every trailing 2D matrix.
"""

from __future__ import annotations

import numpy as np

from ...domain._errors import ShapeError


def transpose_2d_matrix_slices(
    data: np.ndarray, n_rows: int, n_cols: int, output_buffer: np.ndarray
) -> None:
    """
    Write the transpose of an ``(n_rows, n_cols)`` matrix into `output_buffer`.

    Parameters
    ----------
    data : np.ndarray
        Flat slice holding the source matrix in row-major order.
    n_rows, n_cols : int
        Source matrix dimensions.
    output_buffer : np.ndarray
        Flat writable slice of the same length; receives the
        ``(n_cols, n_rows)`` result in row-major order.

    Raises
    ------
    ShapeError
        If either slice length differs from ``n_rows * n_cols``.
    """
    if output_buffer.shape[0] != n_rows * n_cols:
        raise ShapeError(
            "transpose",
            f"Output buffer has wrong length. Got: {output_buffer.shape[0]}, "
            f"expected: {n_rows * n_cols}.",
        )
    if data.shape[0] != n_rows * n_cols:
        raise ShapeError(
            "transpose",
            f"Input data slice has wrong length. Got: {data.shape[0]}, "
            f"expected: {n_rows * n_cols}.",
        )

    output_buffer.reshape(n_cols, n_rows)[...] = data.reshape(n_rows, n_cols).T
