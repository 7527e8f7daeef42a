"""
Free-function forms of the Array operations.

These mirror the Array methods so callers can write ``matmul(a, b)`` or
``reduce_sum(a, axis=0)``; each one simply delegates to the method of the
first operand.
"""

from __future__ import annotations

from typing import Optional

from ._array import Array


def add(a: Array, b: Array) -> Array:
    return a.add(b)


def sub(a: Array, b: Array) -> Array:
    return a.sub(b)


def multiply(a: Array, b: Array) -> Array:
    return a.mul(b)


def divide(a: Array, b: Array) -> Array:
    return a.div(b)


def matmul(a: Array, b: Array) -> Array:
    """
    Batched matrix product of `a` and `b`.

    See Also
    --------
    Array.matmul
    """
    return a.matmul(b)


def transpose(a: Array) -> Array:
    return a.transpose()


def reduce(
    a: Array, reducer, axis: Optional[int] = None, keep_dims: bool = False
) -> Array:
    """
    Fold `a` with `reducer` over `axis` (or over all elements).

    See Also
    --------
    Array.reduce
    """
    return a.reduce(reducer, axis, keep_dims)


def reduce_sum(a: Array, axis: Optional[int] = None, keep_dims: bool = False) -> Array:
    return a.reduce_sum(axis, keep_dims)


def reduce_mean(
    a: Array, axis: Optional[int] = None, keep_dims: bool = False
) -> Array:
    return a.reduce_mean(axis, keep_dims)


def reduce_min(a: Array, axis: Optional[int] = None, keep_dims: bool = False) -> Array:
    return a.reduce_min(axis, keep_dims)


def reduce_max(a: Array, axis: Optional[int] = None, keep_dims: bool = False) -> Array:
    return a.reduce_max(axis, keep_dims)


def reduce_prod(
    a: Array, axis: Optional[int] = None, keep_dims: bool = False
) -> Array:
    return a.reduce_prod(axis, keep_dims)
