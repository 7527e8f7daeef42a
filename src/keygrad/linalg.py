"""
Array-level operations.

These work directly on `Array` values and build no graph nodes. For
differentiable counterparts use the tensor builders exported by
``keygrad``.
"""

from .infrastructure.array import (
    Array,
    BroadcastIterator,
    add,
    are_broadcastable,
    broadcast_shape,
    divide,
    matmul,
    matmul_shape,
    multiply,
    reduce,
    reduce_max,
    reduce_mean,
    reduce_min,
    reduce_prod,
    reduce_shape,
    reduce_sum,
    sub,
    transpose,
    transpose_shape,
)

__all__ = [
    "Array",
    "BroadcastIterator",
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
