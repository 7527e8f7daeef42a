"""
User-facing `Tensor` handle over a graph node.

A `Tensor` wraps exactly one graph node and exposes the public evaluation API
(`eval`, `grad`, `shape`, `assign`, `assign_add`) plus operator sugar that
builds new nodes (``a + b`` constructs an `AddOp`). Several tensors may wrap
the same node; the node, not the handle, carries identity.

Nothing is computed when an expression is built. Each `eval` / `grad` call
re-evaluates the graph with a fresh cache, so in-place variable updates are
visible on the next call.
"""

from __future__ import annotations

import numbers
from typing import Any, Optional, Sequence, Union

from ...domain._errors import InvalidMutationError
from ...domain._graph_op import FeedDict, GraphOp
from ..array import Array
from ..graph import (
    AddOp,
    AddScalarOp,
    DivOp,
    DivScalarOp,
    MatMulOp,
    MulOp,
    MulScalarOp,
    PowOp,
    SubOp,
    SubScalarOp,
    Variable,
    evaluate,
    gradient,
)

Number = Union[int, float]


def _is_scalar(x: Any) -> bool:
    return isinstance(x, numbers.Real) and not isinstance(x, bool)


class Tensor:
    """
    Handle to a node of the computation graph.

    Parameters
    ----------
    op : GraphOp
        The wrapped node.

    Examples
    --------
    >>> a = get_variable(Array.ones((2, 2)))
    >>> b = a * 3.0 + a
    >>> b.eval().tolist()
    [[4.0, 4.0], [4.0, 4.0]]
    >>> b.grad(a).tolist()
    [[4.0, 4.0], [4.0, 4.0]]
    """

    def __init__(self, op: GraphOp) -> None:
        if not isinstance(op, GraphOp):
            raise TypeError(f"Tensor expects a graph node, got {type(op).__name__}")
        self._op = op

    # ----------------------------
    # Structure
    # ----------------------------
    @property
    def op(self) -> GraphOp:
        """Return the wrapped node."""
        return self._op

    @property
    def shape(self) -> tuple[int, ...]:
        """Return the output shape, known without evaluating the graph."""
        return self._op.shape

    @property
    def inputs(self) -> tuple["Tensor", ...]:
        """Return handles to the wrapped node's direct inputs."""
        return tuple(Tensor(node) for node in self._op.get_inputs())

    def get_name(self) -> str:
        return self._op.get_name()

    def __repr__(self) -> str:
        return (
            f"Tensor(op={self._op.get_name()}#{self._op.node_id}, "
            f"shape={list(self.shape)})"
        )

    # ----------------------------
    # Evaluation
    # ----------------------------
    def eval(self, feed_dict: Optional[FeedDict] = None) -> Array:
        """
        Evaluate the wrapped node.

        Parameters
        ----------
        feed_dict : Optional[FeedDict], optional
            Placeholder id -> Array.

        Returns
        -------
        Array
            A fresh copy of the node's value.

        Raises
        ------
        MissingPlaceholderError
            If a placeholder has no value in `feed_dict`.
        PlaceholderShapeError
            If a fed value has the wrong shape.
        """
        return evaluate(self._op, feed_dict)

    def grad(
        self, other: "Tensor", feed_dict: Optional[FeedDict] = None
    ) -> Optional[Array]:
        """
        Compute the gradient of this tensor with respect to `other`.

        Parameters
        ----------
        other : Tensor
            Tensor to differentiate with respect to.
        feed_dict : Optional[FeedDict], optional
            Placeholder id -> Array.

        Returns
        -------
        Optional[Array]
            Gradient with the shape of `other`, or None if `other` does not
            feed into this tensor.
        """
        if not isinstance(other, Tensor):
            raise TypeError(f"grad expects a Tensor, got {type(other).__name__}")
        return gradient(self._op, other._op, feed_dict)

    # ----------------------------
    # Variable mutation
    # ----------------------------
    def _variable(self, op_name: str) -> Variable:
        if not isinstance(self._op, Variable):
            raise InvalidMutationError(op_name, self._op.get_name())
        return self._op

    def assign(self, value: Any) -> None:
        """
        Overwrite the wrapped variable's contents in place.

        Raises
        ------
        InvalidMutationError
            If the wrapped node is not a `Variable`.
        ShapeError
            If `value` does not have the variable's shape.
        """
        self._variable("assign").assign(value)

    def assign_add(self, delta: Any) -> None:
        """
        Add `delta` to the wrapped variable's contents in place.

        Raises
        ------
        InvalidMutationError
            If the wrapped node is not a `Variable`.
        """
        self._variable("assign_add").assign_add(delta)

    # ----------------------------
    # Graph construction
    # ----------------------------
    def matmul(self, other: "Tensor") -> "Tensor":
        if not isinstance(other, Tensor):
            raise TypeError(f"matmul expects a Tensor, got {type(other).__name__}")
        return Tensor(MatMulOp(self._op, other._op))

    def __matmul__(self, other):
        if isinstance(other, Tensor):
            return self.matmul(other)
        return NotImplemented

    def __add__(self, other):
        if isinstance(other, Tensor):
            return Tensor(AddOp(self._op, other._op))
        if _is_scalar(other):
            return Tensor(AddScalarOp(self._op, other))
        return NotImplemented

    def __radd__(self, other):
        if _is_scalar(other):
            return Tensor(AddScalarOp(self._op, other))
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Tensor):
            return Tensor(SubOp(self._op, other._op))
        if _is_scalar(other):
            return Tensor(SubScalarOp(self._op, other))
        return NotImplemented

    def __rsub__(self, other):
        # s - x == (-x) + s
        if _is_scalar(other):
            return Tensor(AddScalarOp(MulScalarOp(self._op, -1), other))
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Tensor):
            return Tensor(MulOp(self._op, other._op))
        if _is_scalar(other):
            return Tensor(MulScalarOp(self._op, other))
        return NotImplemented

    def __rmul__(self, other):
        if _is_scalar(other):
            return Tensor(MulScalarOp(self._op, other))
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Tensor):
            return Tensor(DivOp(self._op, other._op))
        if _is_scalar(other):
            return Tensor(DivScalarOp(self._op, other))
        return NotImplemented

    def __rtruediv__(self, other):
        # s / x == x**-1 * s
        if _is_scalar(other):
            return Tensor(MulScalarOp(PowOp(self._op, -1), other))
        return NotImplemented

    def __neg__(self) -> "Tensor":
        return Tensor(MulScalarOp(self._op, -1))

    def __pow__(self, exponent):
        if _is_scalar(exponent):
            return Tensor(PowOp(self._op, exponent))
        return NotImplemented

    # Graph handles are compared by node identity.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._op is other._op

    def __hash__(self) -> int:
        return hash(self._op.node_id)


def _wrap_array(value: Any, shape: Optional[Sequence[int]] = None) -> Array:
    if isinstance(value, Array):
        return value
    if _is_scalar(value):
        return Array.new(float(value), (1,) if shape is None else shape)
    return Array.from_numpy(value)
