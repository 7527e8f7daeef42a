"""
Mixins assembling the behavior of :class:`keygrad.infrastructure.array.Array`.

Each mixin groups one concern:

- ``ArrayMixinArithmetic`` : broadcasting elementwise and scalar arithmetic
- ``ArrayMixinUnary``      : elementwise maps and negation
- ``ArrayMixinLinalg``     : batched matmul and transpose
- ``ArrayMixinReduction``  : axis and full reductions
- ``ArrayMixinMemory``     : copy, export, reshape and ``sum_to_shape``

Mixins never import the concrete `Array`; they build results through
``type(self)._from_flat``.
"""

from ._arithmetic import ArrayMixinArithmetic
from ._linalg import ArrayMixinLinalg
from ._memory import ArrayMixinMemory
from ._reduction import ArrayMixinReduction
from ._unary import ArrayMixinUnary

__all__ = [
    ArrayMixinArithmetic.__name__,
    ArrayMixinUnary.__name__,
    ArrayMixinLinalg.__name__,
    ArrayMixinReduction.__name__,
    ArrayMixinMemory.__name__,
]
