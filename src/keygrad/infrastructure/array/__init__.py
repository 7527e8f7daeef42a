"""
Dense array engine.

Public entry points:

- ``Array``            : the flat-buffer n-dimensional array value type
- ``BroadcastIterator`` : lockstep slice iteration under broadcasting
- free functions mirroring the Array methods (``matmul``, ``reduce_sum``, ...)
"""

from ._array import Array
from ._broadcast import BroadcastIterator
from ._functional import (
    add,
    divide,
    matmul,
    multiply,
    reduce,
    reduce_max,
    reduce_mean,
    reduce_min,
    reduce_prod,
    reduce_sum,
    sub,
    transpose,
)
from ._shape import (
    are_broadcastable,
    broadcast_shape,
    matmul_shape,
    reduce_shape,
    transpose_shape,
)

__all__ = [
    Array.__name__,
    BroadcastIterator.__name__,
    "add",
    "sub",
    "multiply",
    "divide",
    "matmul",
    "transpose",
    "reduce",
    "reduce_sum",
    "reduce_mean",
    "reduce_min",
    "reduce_max",
    "reduce_prod",
    "are_broadcastable",
    "broadcast_shape",
    "matmul_shape",
    "reduce_shape",
    "transpose_shape",
]
