"""
Reduction nodes: `ReduceSumOp` and `ReduceMeanOp`.

Backward
--------
The upstream gradient has the reduced shape. It is first viewed with the
reduced axis kept as size 1 (re-inserting the axis when ``keep_dims=False``),
then multiplied against an all-ones (sum) or all-``1/count`` (mean) array of
the input shape, which broadcasts it back over the reduced axis.
"""

from __future__ import annotations

from typing import Optional

from ...domain._graph_op import ComputeCache, FeedDict, GraphOp
from ..array import Array
from ..array._shape import keep_dims_shape, reduce_shape, reduced_count
from ._engine import Node


class ReduceOp(Node):
    """
    Base class of the reduction nodes.

    Parameters
    ----------
    x : GraphOp
        Input node.
    axis : Optional[int], optional
        Axis to reduce; None reduces every element.
    keep_dims : bool, optional
        Keep the reduced axis as size 1.

    Raises
    ------
    ShapeError
        If `axis` is negative or not smaller than the input rank.
    """

    def __init__(
        self, x: GraphOp, axis: Optional[int] = None, keep_dims: bool = False
    ) -> None:
        self.axis = axis
        self.keep_dims = bool(keep_dims)
        super().__init__(x)

    def _infer_shape(self) -> tuple[int, ...]:
        return reduce_shape(self._inputs[0].shape, self.axis, self.keep_dims)

    def _fill_value(self) -> float:
        raise NotImplementedError

    def local_grad(self, feed_dict, compute_cache, index, grad):
        in_shape = self._inputs[0].shape
        g = grad.reshape(keep_dims_shape(in_shape, self.axis))
        spread = Array.new(self._fill_value(), in_shape, dtype=grad.dtype)
        return spread.mul(g)

    def __repr__(self) -> str:
        return f"{super().__repr__()}, axis: {self.axis}, keep_dims: {self.keep_dims}"


class ReduceSumOp(ReduceOp):
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x = self._inputs[0].value(feed_dict, compute_cache)
        return x.reduce_sum(self.axis, self.keep_dims)

    def _fill_value(self) -> float:
        return 1.0


class ReduceMeanOp(ReduceOp):
    """Mean reduction; divides by the total count for ``axis=None``."""

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x = self._inputs[0].value(feed_dict, compute_cache)
        return x.reduce_mean(self.axis, self.keep_dims)

    def _fill_value(self) -> float:
        return 1.0 / reduced_count(self._inputs[0].shape, self.axis)
