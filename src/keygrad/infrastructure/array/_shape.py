"""
Pure shape and broadcasting utilities.

All helpers in this module operate on shape tuples only; none of them touch
element data or hold state. They are shared by the array engine (to validate
and size outputs) and by graph nodes (to infer output shapes without
evaluating anything).

Broadcasting rule
-----------------
Two shapes are aligned at their trailing dimension; the shorter one is
implicitly left-padded with ones. An aligned pair is compatible iff the sizes
are equal or one of them is 1, and the result takes the maximum of the pair.
"""

from __future__ import annotations

import operator
from typing import Optional, Sequence, Tuple

from ...domain._errors import ShapeError

Shape = Tuple[int, ...]


def shape_product(shape: Sequence[int]) -> int:
    """Return the number of elements described by `shape` (1 for ``()``)."""
    n = 1
    for d in shape:
        n *= int(d)
    return n


def check_shape_positive(shape: Sequence[int], op: str = "shape") -> Shape:
    """
    Validate that `shape` is non-empty and contains only positive integers.

    Parameters
    ----------
    shape : Sequence[int]
        Candidate shape.
    op : str, optional
        Operation name used in the error message.

    Returns
    -------
    tuple[int, ...]
        The shape normalized to a tuple of Python ints.

    Raises
    ------
    ShapeError
        If the shape is empty or contains a zero or negative dimension.
    TypeError
        If a dimension is not an integer.
    """
    out = []
    for d in shape:
        if isinstance(d, bool):
            raise TypeError(f"{op}: shape entries must be integers, got {d!r}")
        try:
            out.append(operator.index(d))
        except TypeError:
            raise TypeError(f"{op}: shape entries must be integers, got {d!r}")
    if not out:
        raise ShapeError(op, "Shape should not be empty.", ())
    if any(d <= 0 for d in out):
        raise ShapeError(op, "Shape should only contain positive numbers.", out)
    return tuple(out)


def check_shapes_the_same(
    shape1: Sequence[int], shape2: Sequence[int], op: str = "shape"
) -> None:
    """Raise `ShapeError` if the two shapes differ."""
    if tuple(shape1) != tuple(shape2):
        raise ShapeError(op, "Arrays' shapes differ.", shape1, shape2)


def pad_shapes(shape1: Sequence[int], shape2: Sequence[int]) -> Tuple[Shape, Shape]:
    """
    Left-pad the shorter of two shapes with ones so both have equal rank.

    Returns
    -------
    tuple[tuple[int, ...], tuple[int, ...]]
        The padded shapes, in the original argument order.
    """
    s1 = tuple(int(d) for d in shape1)
    s2 = tuple(int(d) for d in shape2)
    if len(s1) < len(s2):
        s1 = (1,) * (len(s2) - len(s1)) + s1
    elif len(s2) < len(s1):
        s2 = (1,) * (len(s1) - len(s2)) + s2
    return s1, s2


def are_broadcastable(shape1: Sequence[int], shape2: Sequence[int]) -> bool:
    """Return True if the two shapes satisfy the trailing-dimension rule."""
    p1, p2 = pad_shapes(shape1, shape2)
    return all(a == b or a == 1 or b == 1 for a, b in zip(p1, p2))


def broadcast_shape(
    shape1: Sequence[int], shape2: Sequence[int], op: str = "broadcast"
) -> Shape:
    """
    Compute the broadcast result shape of two shapes.

    Parameters
    ----------
    shape1, shape2 : Sequence[int]
        Operand shapes. Either may be empty (treated as all-ones).
    op : str, optional
        Operation name used in the error message.

    Returns
    -------
    tuple[int, ...]
        Per aligned dimension, the maximum of the two sizes.

    Raises
    ------
    ShapeError
        If any aligned pair is neither equal nor contains a 1.
    """
    p1, p2 = pad_shapes(shape1, shape2)
    out = []
    for a, b in zip(p1, p2):
        if a != b and a != 1 and b != 1:
            raise ShapeError(
                op, "Shapes cannot be broadcast together.", shape1, shape2
            )
        out.append(max(a, b))
    return tuple(out)


def matching_trailing_dims(shape1: Sequence[int], shape2: Sequence[int]) -> int:
    """
    Count trailing dimensions that are literally equal in both shapes.

    The scan starts at the rightmost dimension and stops at the first pair
    that differs (or when the shorter shape is exhausted). The product of the
    matched dimensions is the length of a contiguous slice that can be
    combined without re-striding.

    Examples
    --------
    >>> matching_trailing_dims((2, 3, 4), (5, 3, 4))
    2
    >>> matching_trailing_dims((2, 3, 1), (3, 4))
    0
    """
    n = 0
    for a, b in zip(reversed(tuple(shape1)), reversed(tuple(shape2))):
        if a != b:
            break
        n += 1
    return n


def matmul_shape(shape1: Sequence[int], shape2: Sequence[int]) -> Shape:
    """
    Compute the result shape of a (batched) matrix product.

    The trailing two dimensions of each operand are the matrices; all leading
    dimensions are batch dimensions and must be broadcast-compatible.

    Returns
    -------
    tuple[int, ...]
        ``broadcast(batch1, batch2) + (rows1, cols2)``.

    Raises
    ------
    ShapeError
        If either operand has rank < 2, the inner dimensions differ, or the
        batch dimensions cannot be broadcast.
    """
    s1 = tuple(shape1)
    s2 = tuple(shape2)
    if len(s1) < 2 or len(s2) < 2:
        raise ShapeError(
            "matmul", "Both arrays should be at least 2-dimensional.", s1, s2
        )
    rows1, cols1 = s1[-2:]
    rows2, cols2 = s2[-2:]
    if cols1 != rows2:
        raise ShapeError(
            "matmul", "Inner dimensions of the matrices doesn't match.", s1, s2
        )
    if not are_broadcastable(s1[:-2], s2[:-2]):
        raise ShapeError(
            "matmul", "Batch dimensions cannot be broadcast together.", s1, s2
        )
    return broadcast_shape(s1[:-2], s2[:-2], op="matmul") + (rows1, cols2)


def transpose_shape(shape: Sequence[int]) -> Shape:
    """Return `shape` with its last two dimensions swapped (rank >= 2)."""
    s = tuple(shape)
    if len(s) < 2:
        raise ShapeError(
            "transpose", "Array should be at least 2-dimensional.", s
        )
    return s[:-2] + (s[-1], s[-2])


def check_reduce_axis(shape: Sequence[int], axis: Optional[int]) -> None:
    """
    Validate a reduction axis against `shape`.

    Raises
    ------
    TypeError
        If `axis` is neither None nor an int.
    ShapeError
        If `axis` is negative or not smaller than the rank.
    """
    if axis is None:
        return
    if isinstance(axis, bool) or not isinstance(axis, int):
        raise TypeError(f"axis must be int or None, got {type(axis).__name__}")
    if axis < 0 or axis >= len(shape):
        raise ShapeError(
            "reduce", f"Invalid reduction dimension {axis}.", tuple(shape)
        )


def reduce_shape(
    shape: Sequence[int], axis: Optional[int], keep_dims: bool
) -> Shape:
    """
    Compute the shape produced by reducing `shape` over `axis`.

    - ``axis=None, keep_dims=False`` -> ``(1,)``
    - ``axis=None, keep_dims=True``  -> all ones, same rank
    - ``axis=k, keep_dims=True``     -> dimension k set to 1
    - ``axis=k, keep_dims=False``    -> dimension k removed; a rank-1 input
      reduces to ``(1,)`` so the result is never empty
    """
    check_reduce_axis(shape, axis)
    s = list(shape)
    if axis is None:
        return tuple([1] * len(s)) if keep_dims else (1,)
    if keep_dims:
        s[axis] = 1
    else:
        del s[axis]
    return tuple(s) if s else (1,)


def reduced_count(shape: Sequence[int], axis: Optional[int]) -> int:
    """
    Number of input elements folded into each reduced output element.

    This is the divisor of a mean reduction: the total element count when
    `axis` is None, otherwise the length of that axis.
    """
    check_reduce_axis(shape, axis)
    if axis is None:
        return shape_product(shape)
    return int(shape[axis])


def keep_dims_shape(shape: Sequence[int], axis: Optional[int]) -> Shape:
    """Shape of a reduction of `shape` over `axis` with ``keep_dims=True``."""
    return reduce_shape(shape, axis, True)
