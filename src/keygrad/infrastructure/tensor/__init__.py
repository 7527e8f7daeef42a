"""
Public tensor handle, factories and functional graph builders.
"""

from ._tensor import Tensor
from ._functional import (
    get_variable,
    get_placeholder,
    matmul,
    sin,
    cos,
    ln,
    exp,
    sigmoid,
    tanh,
    relu,
    pow,
    log,
    reduce_sum,
    reduce_mean,
)

__all__ = [
    Tensor.__name__,
    "get_variable",
    "get_placeholder",
    "matmul",
    "sin",
    "cos",
    "ln",
    "exp",
    "sigmoid",
    "tanh",
    "relu",
    "pow",
    "log",
    "reduce_sum",
    "reduce_mean",
]
