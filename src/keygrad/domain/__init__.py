"""
Backend-agnostic contracts for keygrad.

This package exposes the error taxonomy, the `IArray` structural protocol and
the abstract `GraphOp` node contract. Concrete implementations live in
``keygrad.infrastructure``.
"""

from ._errors import (
    ShapeError,
    MissingPlaceholderError,
    PlaceholderShapeError,
    InvalidMutationError,
)
from ._array import IArray
from ._graph_op import GraphOp, FeedDict, ComputeCache

__all__ = [
    ShapeError.__name__,
    MissingPlaceholderError.__name__,
    PlaceholderShapeError.__name__,
    InvalidMutationError.__name__,
    IArray.__name__,
    GraphOp.__name__,
    "FeedDict",
    "ComputeCache",
]
