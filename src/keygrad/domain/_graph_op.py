"""
Computation graph node interface definitions.

This module defines the abstract base class for vertices of the computation
DAG. Concrete subclasses implement both the forward computation of the node's
value and the local (one-edge) gradient rule used by reverse-mode automatic
differentiation.

Node identity
-------------
Every node receives a unique, never-reused integer handle (`node_id`) at
construction. The handle, not structural or value equality, is what the
evaluation cache and the gradient accumulation map are keyed by, so the same
node shared by several parents (fan-out) is tracked as one vertex.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from typing import Dict, Mapping, Optional, Sequence

from ._array import IArray

FeedDict = Mapping[str, IArray]
"""Placeholder id -> value supplied for a single evaluation/gradient call."""

ComputeCache = Dict[int, IArray]
"""Call-scoped memoization map: node id -> already computed value."""

_NODE_IDS = itertools.count(1)


class GraphOp(ABC):
    """
    Abstract base class for computation graph nodes.

    A `GraphOp` represents a single vertex in the computation graph and
    encapsulates:
    - the forward computation from the values of its inputs (`compute`), and
    - the gradient it routes to one specific input given the gradient already
      accumulated at this node (`compute_accum_grad`).

    Subclasses must also report their output shape without evaluation, so the
    engine can reason about gradients before any value exists.

    Notes
    -----
    - Derived nodes hold plain Python references to their input nodes; several
      parents may reference the same child.
    - Memoized evaluation and gradient traversal are provided by the concrete
      `Node` base class in the infrastructure layer.
    """

    def __init__(self) -> None:
        self._node_id = next(_NODE_IDS)

    @property
    def node_id(self) -> int:
        """
        Return the identity handle of this node.

        Returns
        -------
        int
            Unique positive integer assigned at construction.
        """
        return self._node_id

    @abstractmethod
    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> IArray:
        """
        Compute the value of this node from the values of its inputs.

        Parameters
        ----------
        feed_dict : FeedDict
            Values for placeholder nodes.
        compute_cache : ComputeCache
            Call-scoped cache used when reading input values.

        Returns
        -------
        IArray
            Freshly computed value.
        """
        ...

    @abstractmethod
    def compute_accum_grad(
        self,
        feed_dict: FeedDict,
        compute_cache: ComputeCache,
        dependant_node: "GraphOp",
        grad: IArray,
    ) -> Optional[IArray]:
        """
        Compute the gradient contribution routed to `dependant_node`.

        Given the gradient of some root w.r.t. this node (`grad`), apply the
        chain rule across the single edge this node -> `dependant_node`.

        Parameters
        ----------
        feed_dict : FeedDict
            Values for placeholder nodes.
        compute_cache : ComputeCache
            Call-scoped cache used when reading input values.
        dependant_node : GraphOp
            One of this node's inputs.
        grad : IArray
            Gradient accumulated at this node.

        Returns
        -------
        Optional[IArray]
            Contribution with the shape of `dependant_node`, or None if
            `dependant_node` is not an input of this node. If the node uses
            the same input more than once, the contributions of every
            occurrence are summed.
        """
        ...

    @property
    @abstractmethod
    def shape(self) -> tuple[int, ...]:
        """
        Return the output shape of this node, known without evaluation.

        Returns
        -------
        tuple[int, ...]
            Output shape.
        """
        ...

    def get_inputs(self) -> Sequence["GraphOp"]:
        """
        Return the direct inputs (children) of this node.

        Returns
        -------
        Sequence[GraphOp]
            Input nodes in positional order; empty for source nodes.
        """
        return ()

    def get_name(self) -> str:
        """Return the operation name of this node."""
        return "UnnamedOp"

    def __repr__(self) -> str:
        inputs = ", ".join(
            f"{c.get_name()}#{c.node_id}" for c in self.get_inputs()
        )
        return f"Op: <{self.get_name()}#{self.node_id}>, inputs: [{inputs}]"
