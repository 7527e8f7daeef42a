"""
keygrad: a dense n-dimensional array engine with a differentiable
computation graph.

Typical use::

    import keygrad as kg

    w = kg.get_variable(kg.Array.ones((3, 2)))
    x = kg.get_placeholder("x", (4, 3))
    loss = kg.reduce_mean(kg.sigmoid(x @ w))

    feed = {"x": kg.Array.new(0.5, (4, 3))}
    loss.eval(feed)
    w.assign_add(loss.grad(w, feed) * -0.1)
"""

from .domain import (
    ShapeError,
    MissingPlaceholderError,
    PlaceholderShapeError,
    InvalidMutationError,
    GraphOp,
)
from .infrastructure.array import Array
from .infrastructure.graph import evaluate, gradient
from .infrastructure.tensor import (
    Tensor,
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
from . import linalg

__version__ = "0.1.0"

__all__ = [
    "Array",
    "Tensor",
    "GraphOp",
    "ShapeError",
    "MissingPlaceholderError",
    "PlaceholderShapeError",
    "InvalidMutationError",
    "evaluate",
    "gradient",
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
    "linalg",
]
