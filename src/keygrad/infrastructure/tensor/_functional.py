"""
Tensor factories and functional graph builders.

Factories
---------
- `get_variable`    : wrap a new `Variable` holding a copy of the given data
- `get_placeholder` : wrap a new `Placeholder` with an id and a fixed shape

Builders
--------
Every builder takes tensors (and scalar parameters) and returns a tensor
wrapping a newly constructed node; nothing is evaluated.
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

from ..graph import (
    CosOp,
    ExpOp,
    LnOp,
    LogOp,
    MatMulOp,
    Placeholder,
    PowOp,
    ReduceMeanOp,
    ReduceSumOp,
    ReLUOp,
    SigmoidOp,
    SinOp,
    TanhOp,
    Variable,
)
from ._tensor import Tensor, _wrap_array


def _check(x: Any, fn: str) -> Tensor:
    if not isinstance(x, Tensor):
        raise TypeError(f"{fn} expects a Tensor, got {type(x).__name__}")
    return x


def get_variable(value: Any, shape: Optional[Sequence[int]] = None) -> Tensor:
    """
    Create a variable tensor.

    Parameters
    ----------
    value : Array, np.ndarray, nested list or number
        Initial contents. A number fills an array of `shape` (default
        ``(1,)``).
    shape : Optional[Sequence[int]], optional
        Shape used when `value` is a number.

    Returns
    -------
    Tensor
        Handle to the new `Variable`.
    """
    return Tensor(Variable(_wrap_array(value, shape)))


def get_placeholder(placeholder_id: str, shape: Sequence[int]) -> Tensor:
    """
    Create a placeholder tensor resolved from the feed mapping.

    Raises
    ------
    ShapeError
        If `shape` is empty or has a non-positive dimension.
    """
    return Tensor(Placeholder(placeholder_id, shape))


def matmul(a: Tensor, b: Tensor) -> Tensor:
    return Tensor(MatMulOp(_check(a, "matmul").op, _check(b, "matmul").op))


def sin(x: Tensor) -> Tensor:
    return Tensor(SinOp(_check(x, "sin").op))


def cos(x: Tensor) -> Tensor:
    return Tensor(CosOp(_check(x, "cos").op))


def ln(x: Tensor) -> Tensor:
    """Natural logarithm."""
    return Tensor(LnOp(_check(x, "ln").op))


def exp(x: Tensor) -> Tensor:
    return Tensor(ExpOp(_check(x, "exp").op))


def sigmoid(x: Tensor) -> Tensor:
    return Tensor(SigmoidOp(_check(x, "sigmoid").op))


def tanh(x: Tensor) -> Tensor:
    return Tensor(TanhOp(_check(x, "tanh").op))


def relu(x: Tensor) -> Tensor:
    return Tensor(ReLUOp(_check(x, "relu").op))


def pow(x: Tensor, exponent: float) -> Tensor:
    """Raise every element to a constant power."""
    return Tensor(PowOp(_check(x, "pow").op, exponent))


def log(x: Tensor, base: float) -> Tensor:
    """
    Logarithm with a constant base.

    Raises
    ------
    ValueError
        If `base` is not positive or equals 1.
    """
    return Tensor(LogOp(_check(x, "log").op, base))


def reduce_sum(
    x: Tensor, axis: Optional[int] = None, keep_dims: bool = False
) -> Tensor:
    """
    Sum over `axis` (or over all elements).

    Raises
    ------
    ShapeError
        If `axis` is out of range for the input shape.
    """
    return Tensor(ReduceSumOp(_check(x, "reduce_sum").op, axis, keep_dims))


def reduce_mean(
    x: Tensor, axis: Optional[int] = None, keep_dims: bool = False
) -> Tensor:
    return Tensor(ReduceMeanOp(_check(x, "reduce_mean").op, axis, keep_dims))
