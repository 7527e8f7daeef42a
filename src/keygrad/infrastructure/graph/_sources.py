"""
Source nodes: `Variable` and `Placeholder`.

Source nodes have no inputs and therefore receive gradients but never
propagate them.

- A `Variable` owns a persistent `Array`. Its contents may be replaced in
  place between evaluations (`assign`, `assign_add`); the next evaluation of
  any graph containing the variable sees the new contents.
- A `Placeholder` owns no data. Each evaluation resolves it by id in the
  feed mapping and validates the supplied value against the declared shape.
"""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from ...domain._errors import (
    MissingPlaceholderError,
    PlaceholderShapeError,
    ShapeError,
)
from ...domain._graph_op import ComputeCache, FeedDict
from ..array import Array
from ..array._shape import check_shape_positive
from ._engine import Node


def _as_array(value: Any) -> Array:
    if isinstance(value, Array):
        return value
    if isinstance(value, np.ndarray):
        return Array.from_numpy(value)
    raise TypeError(f"Expected an Array, got {type(value).__name__}")


class Variable(Node):
    """
    Graph leaf holding mutable persistent data.

    Parameters
    ----------
    value : Array or np.ndarray
        Initial contents. The variable keeps its own copy.

    Notes
    -----
    The shape is fixed at construction; `assign` and `assign_add` keep it.
    """

    def __init__(self, value: Any) -> None:
        self._value = _as_array(value).copy()
        super().__init__()

    def _infer_shape(self) -> tuple[int, ...]:
        return self._value.shape

    @property
    def data(self) -> Array:
        """Return the live stored array (not a copy)."""
        return self._value

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        return self._value.copy()

    def assign(self, new_value: Any) -> None:
        """
        Replace the stored contents in place.

        Raises
        ------
        ShapeError
            If `new_value` does not have the variable's shape.
        """
        new_value = _as_array(new_value)
        if new_value.shape != self._value.shape:
            raise ShapeError(
                "assign",
                "Assigned value must keep the variable's shape.",
                self._value.shape,
                new_value.shape,
            )
        self._value.data[...] = new_value.data

    def assign_add(self, delta: Any) -> None:
        """
        Add `delta` to the stored contents in place (broadcasting).

        Raises
        ------
        ShapeError
            If `delta` cannot be broadcast onto the variable's shape.
        """
        self._value.add_assign(_as_array(delta))

    def __repr__(self) -> str:
        return f"Op: <Variable#{self.node_id}>, shape: {list(self.shape)}"


class Placeholder(Node):
    """
    Graph leaf resolved from the feed mapping at evaluation time.

    Parameters
    ----------
    placeholder_id : str
        Key looked up in the feed mapping.
    shape : Sequence[int]
        Declared shape every fed value must have.
    """

    def __init__(self, placeholder_id: str, shape: Sequence[int]) -> None:
        if not isinstance(placeholder_id, str):
            raise TypeError(
                f"placeholder id must be a str, got {type(placeholder_id).__name__}"
            )
        self._id = placeholder_id
        self._declared_shape = check_shape_positive(shape, "placeholder")
        super().__init__()

    def _infer_shape(self) -> tuple[int, ...]:
        return self._declared_shape

    @property
    def placeholder_id(self) -> str:
        return self._id

    def compute(self, feed_dict: FeedDict, compute_cache: ComputeCache) -> Array:
        if feed_dict is None or self._id not in feed_dict:
            raise MissingPlaceholderError(self._id)
        fed = feed_dict[self._id]
        if fed is None:
            raise MissingPlaceholderError(self._id)
        fed = _as_array(fed)
        if tuple(fed.shape) != self._declared_shape:
            raise PlaceholderShapeError(self._id, self._declared_shape, fed.shape)
        return fed.copy()

    def __repr__(self) -> str:
        return (
            f"Op: <Placeholder#{self.node_id} '{self._id}'>, "
            f"shape: {list(self.shape)}"
        )
