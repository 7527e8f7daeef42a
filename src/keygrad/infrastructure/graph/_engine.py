"""
Forward evaluation and reverse-mode differentiation over the node graph.

This module provides:

- `Node`: the concrete base class of every graph vertex. It adds memoized
  value lookup (`value`), a generic `compute_accum_grad` that dispatches to a
  per-input local gradient rule, and the `eval` / `grad` entry points.
- `WrapperOp`: a non-owning adapter around the differentiation root, used to
  seed the gradient map. It is never part of a user-built graph.
- `evaluate` / `gradient`: the two call-scoped graph algorithms.

Call scope
----------
Every top-level call allocates a fresh compute cache (node id -> value) and,
for `gradient`, a fresh accumulation map (node id -> gradient). Neither map
outlives the call, so results always reflect the current variable contents.

Traversal
---------
Both algorithms walk the graph with an explicit stack (no recursion), so graph
depth is not limited by the interpreter's recursion limit.

Gradient accumulation
---------------------
The gradient of a node is complete only once every parent on a path to the
root has contributed. `gradient` therefore visits nodes in reverse
topological order (parents before children) and restricts the walk to nodes
from which the target is reachable. Each node propagates its fully
accumulated gradient exactly once, so shared sub-expressions are never
counted twice.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ...domain._errors import ShapeError
from ...domain._graph_op import ComputeCache, FeedDict, GraphOp
from ..array import Array


class Node(GraphOp):
    """
    Base class for concrete graph nodes.

    Parameters
    ----------
    *inputs : GraphOp
        Input nodes, in positional order. The node keeps plain references to
        them; several parents may share the same input.

    Notes
    -----
    Subclasses implement:

    - ``_infer_shape()``: output shape from the input shapes (called once at
      construction, so shape errors surface when the graph is built);
    - ``compute(feed_dict, compute_cache)``;
    - ``local_grad(feed_dict, compute_cache, index, grad)``: the gradient
      routed to the input at position `index`, with that input's shape.
    """

    def __init__(self, *inputs: GraphOp) -> None:
        super().__init__()
        for node in inputs:
            if not isinstance(node, GraphOp):
                raise TypeError(
                    f"{type(self).__name__} inputs must be graph nodes, "
                    f"got {type(node).__name__}"
                )
        self._inputs: tuple = tuple(inputs)
        self._shape: tuple[int, ...] = tuple(self._infer_shape())

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------
    def _infer_shape(self) -> tuple[int, ...]:
        raise NotImplementedError

    @property
    def shape(self) -> tuple[int, ...]:
        return self._shape

    def get_inputs(self) -> Sequence[GraphOp]:
        return self._inputs

    def get_name(self) -> str:
        return type(self).__name__

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def value(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        """
        Return this node's value, computing and caching it on first use.

        The returned array is owned by the cache and must not be mutated.
        """
        cached = compute_cache.get(self.node_id)
        if cached is None:
            cached = self.compute(feed_dict, compute_cache)
            if tuple(cached.shape) != self._shape:
                raise ShapeError(
                    self.get_name(),
                    "Computed value does not match the inferred node shape.",
                    self._shape,
                    cached.shape,
                )
            compute_cache[self.node_id] = cached
        return cached

    def input_values(
        self, feed_dict: FeedDict, compute_cache: ComputeCache
    ) -> List[Array]:
        return [node.value(feed_dict, compute_cache) for node in self._inputs]

    # ------------------------------------------------------------------
    # Differentiation
    # ------------------------------------------------------------------
    def local_grad(
        self,
        feed_dict: FeedDict,
        compute_cache: ComputeCache,
        index: int,
        grad: Array,
    ) -> Array:
        raise NotImplementedError

    def compute_accum_grad(
        self,
        feed_dict: FeedDict,
        compute_cache: ComputeCache,
        dependant_node: GraphOp,
        grad: Array,
    ) -> Optional[Array]:
        total = None
        for i, node in enumerate(self._inputs):
            if node is not dependant_node:
                continue
            contrib = self.local_grad(feed_dict, compute_cache, i, grad)
            total = contrib if total is None else total.add(contrib)
        return total

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------
    def eval(self, feed_dict: Optional[FeedDict] = None) -> Array:
        return evaluate(self, feed_dict)

    def grad(
        self, target: GraphOp, feed_dict: Optional[FeedDict] = None
    ) -> Optional[Array]:
        return gradient(self, target, feed_dict)


class WrapperOp(GraphOp):
    """
    Non-owning adapter that feeds the seed gradient into the root.

    Parameters
    ----------
    root : GraphOp
        The node being differentiated.
    """

    def __init__(self, root: GraphOp) -> None:
        super().__init__()
        self._root = root

    @property
    def shape(self) -> tuple[int, ...]:
        return self._root.shape

    def get_inputs(self) -> Sequence[GraphOp]:
        return (self._root,)

    def get_name(self) -> str:
        return "WrapperOp"

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._root.value(feed_dict, compute_cache)

    def compute_accum_grad(
        self,
        feed_dict: FeedDict,
        compute_cache: ComputeCache,
        dependant_node: GraphOp,
        grad: Array,
    ) -> Optional[Array]:
        if dependant_node is not self._root:
            return None
        return grad


def _post_order(root: GraphOp, stop_at: Optional[GraphOp] = None) -> List[GraphOp]:
    """
    List the nodes reachable from `root`, every node after all of its inputs.

    Each node appears once, however many parents reference it. The inputs of
    `stop_at` are not expanded.
    """
    order: List[GraphOp] = []
    visited = set()
    stack = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        if node.node_id in visited:
            continue
        visited.add(node.node_id)
        stack.append((node, True))
        if node is stop_at:
            continue
        for child in reversed(tuple(node.get_inputs())):
            if child.node_id not in visited:
                stack.append((child, False))
    return order


def _fill_cache(
    root: GraphOp, feed_dict: FeedDict, compute_cache: ComputeCache
) -> Array:
    for node in _post_order(root):
        node.value(feed_dict, compute_cache)
    return compute_cache[root.node_id]


def evaluate(root: GraphOp, feed_dict: Optional[FeedDict] = None) -> Array:
    """
    Evaluate `root` with a fresh call-scoped cache.

    Parameters
    ----------
    root : GraphOp
        Node to evaluate.
    feed_dict : Optional[FeedDict], optional
        Placeholder id -> value. May be omitted when the graph holds no
        placeholders.

    Returns
    -------
    Array
        An independent copy of the root's value.

    Raises
    ------
    MissingPlaceholderError
        If a placeholder in the graph has no value in `feed_dict`.
    PlaceholderShapeError
        If a fed value has the wrong shape.
    ShapeError
        On any shape inconsistency during computation.
    """
    feed = {} if feed_dict is None else feed_dict
    return _fill_cache(root, feed, {}).copy()


def gradient(
    root: GraphOp, target: GraphOp, feed_dict: Optional[FeedDict] = None
) -> Optional[Array]:
    """
    Compute d(root)/d(target) by reverse-mode accumulation.

    The seed gradient is an all-ones array of the root's evaluated shape, so
    for a non-scalar root the result is the gradient of the sum of the
    root's elements.

    Parameters
    ----------
    root : GraphOp
        Node being differentiated.
    target : GraphOp
        Node to differentiate with respect to.
    feed_dict : Optional[FeedDict], optional
        Placeholder id -> value.

    Returns
    -------
    Optional[Array]
        Gradient with the shape of `target`; all ones of the root's shape if
        `root` is `target`; None if `target` is not reachable from `root`.

    Raises
    ------
    MissingPlaceholderError, PlaceholderShapeError, ShapeError
        As for `evaluate`. Errors abort the whole call.
    """
    feed = {} if feed_dict is None else feed_dict
    compute_cache: ComputeCache = {}
    root_value = _fill_cache(root, feed, compute_cache)
    seed = Array.ones(root_value.shape, dtype=root_value.dtype)

    if root is target:
        return seed

    order = _post_order(root, stop_at=target)

    # Nodes with a path to the target; children precede parents in `order`.
    reaches = {target.node_id}
    for node in order:
        if node is target:
            continue
        if any(c.node_id in reaches for c in node.get_inputs()):
            reaches.add(node.node_id)
    if root.node_id not in reaches:
        return None

    wrapper = WrapperOp(root)
    reaches.add(wrapper.node_id)
    grads: Dict[int, Array] = {wrapper.node_id: seed}

    for node in [wrapper] + order[::-1]:
        if node is target or node.node_id not in reaches:
            continue
        g = grads.get(node.node_id)
        if g is None:
            continue
        seen = set()
        for child in node.get_inputs():
            if child.node_id in seen or child.node_id not in reaches:
                continue
            seen.add(child.node_id)
            contrib = node.compute_accum_grad(feed, compute_cache, child, g)
            if contrib is None:
                continue
            if tuple(contrib.shape) != tuple(child.shape):
                raise ShapeError(
                    node.get_name(),
                    "Gradient shape mismatch for input.",
                    child.shape,
                    contrib.shape,
                )
            acc = grads.get(child.node_id)
            grads[child.node_id] = contrib if acc is None else acc.add(contrib)

    return grads.get(target.node_id)
