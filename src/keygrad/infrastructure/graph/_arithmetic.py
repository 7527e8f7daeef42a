"""
Arithmetic graph nodes: broadcasting binary ops, matmul and scalar ops.

Local gradient rules (upstream gradient ``g``, input values ``x, y``, scalar
constant ``s``):

=========  ===================  =====================
Node       d/dx                 d/dy
=========  ===================  =====================
AddOp      g                    g
SubOp      g                    -g
MulOp      g * y                g * x
DivOp      g / y                -g * x / y**2
MatMulOp   g @ y^T              x^T @ g
AddScalar  g
SubScalar  g
MulScalar  g * s
DivScalar  g / s
=========  ===================  =====================

For broadcasting nodes the product has the output shape; it is summed back
onto the input's own shape with `Array.sum_to_shape`.
"""

from __future__ import annotations

import numbers
from typing import Union

from ...domain._graph_op import ComputeCache, FeedDict, GraphOp
from ..array import Array
from ..array._shape import broadcast_shape, matmul_shape
from ._engine import Node

Number = Union[int, float]


class BinaryOp(Node):
    """
    Base class of the broadcasting elementwise binary nodes.
    """

    _op_name = "binary"

    def __init__(self, x: GraphOp, y: GraphOp) -> None:
        super().__init__(x, y)

    def _infer_shape(self) -> tuple[int, ...]:
        x, y = self._inputs
        return broadcast_shape(x.shape, y.shape, op=self._op_name)


class AddOp(BinaryOp):
    _op_name = "add"

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x, y = self.input_values(feed_dict, compute_cache)
        return x.add(y)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        return grad.sum_to_shape(self._inputs[index].shape)


class SubOp(BinaryOp):
    _op_name = "sub"

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x, y = self.input_values(feed_dict, compute_cache)
        return x.sub(y)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        g = grad if index == 0 else grad.neg()
        return g.sum_to_shape(self._inputs[index].shape)


class MulOp(BinaryOp):
    _op_name = "mul"

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x, y = self.input_values(feed_dict, compute_cache)
        return x.mul(y)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        x, y = self.input_values(feed_dict, compute_cache)
        other = y if index == 0 else x
        return grad.mul(other).sum_to_shape(self._inputs[index].shape)


class DivOp(BinaryOp):
    _op_name = "div"

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x, y = self.input_values(feed_dict, compute_cache)
        return x.div(y)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        x, y = self.input_values(feed_dict, compute_cache)
        if index == 0:
            g = grad.div(y)
        else:
            g = grad.mul(x).div(y.mul(y)).neg()
        return g.sum_to_shape(self._inputs[index].shape)


class MatMulOp(Node):
    """
    Batched matrix product node.

    The trailing two dimensions of each input are matrices; leading batch
    dimensions broadcast. Gradients are summed back over broadcast batch
    dimensions.
    """

    def __init__(self, x: GraphOp, y: GraphOp) -> None:
        super().__init__(x, y)

    def _infer_shape(self) -> tuple[int, ...]:
        x, y = self._inputs
        return matmul_shape(x.shape, y.shape)

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x, y = self.input_values(feed_dict, compute_cache)
        return x.matmul(y)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        x, y = self.input_values(feed_dict, compute_cache)
        if index == 0:
            g = grad.matmul(y.transpose())
        else:
            g = x.transpose().matmul(grad)
        return g.sum_to_shape(self._inputs[index].shape)


class ScalarOp(Node):
    """
    Base class of the nodes combining one input with a scalar constant.

    Parameters
    ----------
    x : GraphOp
        Input node.
    scalar : Number
        Constant right-hand operand.
    """

    def __init__(self, x: GraphOp, scalar: Number) -> None:
        if isinstance(scalar, bool) or not isinstance(scalar, numbers.Real):
            raise TypeError(
                f"{type(self).__name__} expects a numeric scalar, "
                f"got {type(scalar).__name__}"
            )
        self.scalar = scalar
        super().__init__(x)

    def _infer_shape(self) -> tuple[int, ...]:
        return self._inputs[0].shape

    def __repr__(self) -> str:
        return f"{super().__repr__()}, scalar: {self.scalar}"


class AddScalarOp(ScalarOp):
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._inputs[0].value(feed_dict, compute_cache).add_scalar(self.scalar)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        return grad.copy()


class SubScalarOp(ScalarOp):
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._inputs[0].value(feed_dict, compute_cache).sub_scalar(self.scalar)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        return grad.copy()


class MulScalarOp(ScalarOp):
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._inputs[0].value(feed_dict, compute_cache).mul_scalar(self.scalar)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        return grad.mul_scalar(self.scalar)


class DivScalarOp(ScalarOp):
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._inputs[0].value(feed_dict, compute_cache).div_scalar(self.scalar)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        return grad.div_scalar(self.scalar)
