"""
Elementwise map nodes.

Each `ElementwiseMapOp` subclass pairs a vectorized function ``fn`` with its
derivative ``derivative``; the gradient routed to the input is
``g * derivative(x)``. Parametrized maps (`PowOp`, `LogOp`) carry one scalar
parameter.

=========  =========================  ===============================
Node       f(x)                       f'(x)
=========  =========================  ===============================
SinOp      sin x                      cos x
CosOp      cos x                      -sin x
LnOp       ln x                       1 / x
ExpOp      exp x                      exp x
SigmoidOp  1 / (1 + exp(-x))          s(x) * (1 - s(x))
TanhOp     tanh x                     1 - tanh(x)**2
ReLUOp     max(x, 0)                  1 if x > 0 else 0
PowOp      x**p                       p * x**(p - 1)
LogOp      ln x / ln b                1 / (x * ln b)
=========  =========================  ===============================
"""

from __future__ import annotations

import math
import numbers

import numpy as np

from ...domain._graph_op import ComputeCache, FeedDict, GraphOp
from ..array import Array
from ._engine import Node


class ElementwiseMapOp(Node):
    """
    Base class of single-input elementwise map nodes.

    Subclasses provide ``fn`` and ``derivative`` as static methods operating
    on whole NumPy buffers.
    """

    def __init__(self, x: GraphOp) -> None:
        super().__init__(x)

    @staticmethod
    def fn(x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    @staticmethod
    def derivative(x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _infer_shape(self) -> tuple[int, ...]:
        return self._inputs[0].shape

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        x = self._inputs[0].value(feed_dict, compute_cache)
        return x.map(self.fn, vectorized=True)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        x = self._inputs[0].value(feed_dict, compute_cache)
        return grad.mul(x.map(self.derivative, vectorized=True))


class SinOp(ElementwiseMapOp):
    fn = staticmethod(np.sin)
    derivative = staticmethod(np.cos)


class CosOp(ElementwiseMapOp):
    fn = staticmethod(np.cos)

    @staticmethod
    def derivative(x):
        return -np.sin(x)


class LnOp(ElementwiseMapOp):
    fn = staticmethod(np.log)

    @staticmethod
    def derivative(x):
        return 1.0 / x


class ExpOp(ElementwiseMapOp):
    fn = staticmethod(np.exp)
    derivative = staticmethod(np.exp)


class SigmoidOp(ElementwiseMapOp):
    @staticmethod
    def fn(x):
        return 1.0 / (1.0 + np.exp(-x))

    @staticmethod
    def derivative(x):
        s = 1.0 / (1.0 + np.exp(-x))
        return s * (1.0 - s)


class TanhOp(ElementwiseMapOp):
    fn = staticmethod(np.tanh)

    @staticmethod
    def derivative(x):
        t = np.tanh(x)
        return 1.0 - t * t


class ReLUOp(ElementwiseMapOp):
    @staticmethod
    def fn(x):
        return np.maximum(x, 0)

    @staticmethod
    def derivative(x):
        return (x > 0).astype(x.dtype)


class ParametrizedMapOp(Node):
    """
    Base class of elementwise maps with one scalar parameter.

    Parameters
    ----------
    x : GraphOp
        Input node.
    param : Number
        Map parameter (exponent for `PowOp`, base for `LogOp`).
    """

    def __init__(self, x: GraphOp, param) -> None:
        if isinstance(param, bool) or not isinstance(param, numbers.Real):
            raise TypeError(
                f"{type(self).__name__} expects a numeric parameter, "
                f"got {type(param).__name__}"
            )
        self.param = param
        super().__init__(x)

    def _infer_shape(self) -> tuple[int, ...]:
        return self._inputs[0].shape

    def __repr__(self) -> str:
        return f"{super().__repr__()}, param: {self.param}"


class PowOp(ParametrizedMapOp):
    """``x ** p`` for a constant exponent `p`."""

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        p = self.param
        x = self._inputs[0].value(feed_dict, compute_cache)
        return x.map(lambda a: np.power(a, p), vectorized=True)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        p = self.param
        x = self._inputs[0].value(feed_dict, compute_cache)
        return grad.mul(x.map(lambda a: p * np.power(a, p - 1), vectorized=True))


class LogOp(ParametrizedMapOp):
    """
    Logarithm with a constant base.

    Raises
    ------
    ValueError
        If the base is not positive or equals 1.
    """

    def __init__(self, x: GraphOp, base) -> None:
        super().__init__(x, base)
        if self.param <= 0 or self.param == 1:
            raise ValueError(f"log base must be positive and != 1, got {base}")

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        ln_b = math.log(self.param)
        x = self._inputs[0].value(feed_dict, compute_cache)
        return x.map(lambda a: np.log(a) / ln_b, vectorized=True)

    def local_grad(self, feed_dict, compute_cache, index, grad):
        ln_b = math.log(self.param)
        x = self._inputs[0].value(feed_dict, compute_cache)
        return grad.mul(x.map(lambda a: 1.0 / (a * ln_b), vectorized=True))
