"""
Element-type and kernel configuration for the array engine.

Only floating-point element types are supported. `DEFAULT_DTYPE` is used when
an array is constructed without an explicit dtype.

The BLAS-backed matmul path (NumPy's ``np.matmul``) is used for the dtypes in
`BLAS_DTYPES`; every other floating dtype goes through the reference loop
kernel. Setting ``KEYGRAD_DISABLE_BLAS=1`` in the environment forces the
reference kernel for all dtypes.
"""

import os

import numpy as np

DEFAULT_DTYPE = np.dtype(np.float64)

BLAS_DTYPES = frozenset({np.dtype(np.float32), np.dtype(np.float64)})

BLAS_ENABLED = os.environ.get("KEYGRAD_DISABLE_BLAS", "0") in (
    "",
    "0",
    "false",
    "False",
    "no",
    "off",
)


def resolve_dtype(dtype=None) -> np.dtype:
    """
    Normalize a user-supplied dtype and check that it is floating-point.

    Parameters
    ----------
    dtype : Any, optional
        Anything accepted by ``np.dtype``. None selects `DEFAULT_DTYPE`.

    Returns
    -------
    np.dtype
        Normalized floating-point dtype.

    Raises
    ------
    TypeError
        If the dtype is not a floating-point type.
    """
    dt = DEFAULT_DTYPE if dtype is None else np.dtype(dtype)
    if not np.issubdtype(dt, np.floating):
        raise TypeError(f"keygrad arrays require a floating dtype, got dtype={dt}")
    return dt
