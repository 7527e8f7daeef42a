"""
Shape-, feed- and mutation-related exceptions for keygrad.

This module defines the error taxonomy used by the array engine and the
computation graph. Every error is raised eagerly at the point where the
offending operation is detected and terminates the current call; the library
never retries or silently recovers.

The classes subclass the closest builtin exception so that callers which only
care about the broad category (e.g., ``ValueError`` for bad shapes, ``KeyError``
for missing feed entries) can catch them without importing keygrad types.
"""

from typing import Optional, Sequence


def _fmt_shape(shape: Optional[Sequence[int]]) -> str:
    if shape is None:
        return "None"
    return "[" + ", ".join(str(int(d)) for d in shape) + "]"


class ShapeError(ValueError):
    """
    Raised when array shapes are invalid or incompatible for an operation.

    Covered cases include a zero (or negative) dimension, a buffer length that
    does not match the shape product, shapes that cannot be broadcast together,
    mismatched matmul inner dimensions, an out-of-range reduction axis, and an
    out-of-range element index.

    Attributes
    ----------
    op : str
        Name of the operation that detected the problem (e.g., "add", "matmul").
    shape_a : Optional[tuple[int, ...]]
        Shape of the first (or only) operand, if relevant.
    shape_b : Optional[tuple[int, ...]]
        Shape of the second operand, if relevant.
    """

    def __init__(
        self,
        op: str,
        detail: str,
        shape_a: Optional[Sequence[int]] = None,
        shape_b: Optional[Sequence[int]] = None,
    ) -> None:
        """
        Initialize the ShapeError.

        Parameters
        ----------
        op : str
            Operation name.
        detail : str
            Human-readable description of the violated constraint.
        shape_a : Optional[Sequence[int]], optional
            First operand shape.
        shape_b : Optional[Sequence[int]], optional
            Second operand shape.
        """
        msg = f"{op}: {detail}"
        if shape_a is not None and shape_b is not None:
            msg += f" Got shapes: {_fmt_shape(shape_a)} and {_fmt_shape(shape_b)}."
        elif shape_a is not None:
            msg += f" Got shape: {_fmt_shape(shape_a)}."
        super().__init__(msg)
        self.op = op
        self.shape_a = None if shape_a is None else tuple(shape_a)
        self.shape_b = None if shape_b is None else tuple(shape_b)


class MissingPlaceholderError(KeyError):
    """
    Raised when a placeholder is evaluated without a value in the feed mapping.

    This covers both a feed mapping that lacks the placeholder id and an
    absent feed mapping while the graph contains placeholders.

    Attributes
    ----------
    placeholder_id : str
        Id of the placeholder whose value could not be resolved.
    """

    def __init__(self, placeholder_id: str) -> None:
        super().__init__(f"Value not found in feed mapping: '{placeholder_id}'.")
        self.placeholder_id = placeholder_id

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message and add quotes
        return str(self.args[0])


class PlaceholderShapeError(ShapeError):
    """
    Raised when a fed value does not match the placeholder's declared shape.

    Attributes
    ----------
    placeholder_id : str
        Id of the placeholder being fed.
    expected : tuple[int, ...]
        Declared placeholder shape.
    got : tuple[int, ...]
        Shape of the supplied array.
    """

    def __init__(
        self, placeholder_id: str, expected: Sequence[int], got: Sequence[int]
    ) -> None:
        super().__init__(
            "placeholder",
            f"value fed for '{placeholder_id}' has shape {_fmt_shape(got)}, "
            f"expected {_fmt_shape(expected)}.",
        )
        self.placeholder_id = placeholder_id
        self.expected = tuple(expected)
        self.got = tuple(got)


class InvalidMutationError(TypeError):
    """
    Raised when `assign` / `assign_add` is invoked on a non-Variable node.

    Only variables own persistent data; every other node derives its value
    from its inputs and therefore cannot be written to.

    Attributes
    ----------
    op : str
        The attempted mutation ("assign" or "assign_add").
    node_name : str
        Name of the node the mutation was attempted on (e.g., "AddOp").
    """

    def __init__(self, op: str, node_name: str) -> None:
        super().__init__(
            f"{op} is only supported on variables; got node of type '{node_name}'."
        )
        self.op = op
        self.node_name = node_name
