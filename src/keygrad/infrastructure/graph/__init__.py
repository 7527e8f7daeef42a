"""
Computation graph nodes and the evaluation / differentiation engine.
"""

from ._engine import Node, WrapperOp, evaluate, gradient
from ._sources import Variable, Placeholder
from ._arithmetic import (
    AddOp,
    SubOp,
    MulOp,
    DivOp,
    MatMulOp,
    AddScalarOp,
    SubScalarOp,
    MulScalarOp,
    DivScalarOp,
)
from ._math import (
    ElementwiseMapOp,
    ParametrizedMapOp,
    SinOp,
    CosOp,
    LnOp,
    ExpOp,
    SigmoidOp,
    TanhOp,
    ReLUOp,
    PowOp,
    LogOp,
)
from ._reduce import ReduceSumOp, ReduceMeanOp

__all__ = [
    Node.__name__,
    WrapperOp.__name__,
    "evaluate",
    "gradient",
    Variable.__name__,
    Placeholder.__name__,
    AddOp.__name__,
    SubOp.__name__,
    MulOp.__name__,
    DivOp.__name__,
    MatMulOp.__name__,
    AddScalarOp.__name__,
    SubScalarOp.__name__,
    MulScalarOp.__name__,
    DivScalarOp.__name__,
    ElementwiseMapOp.__name__,
    ParametrizedMapOp.__name__,
    SinOp.__name__,
    CosOp.__name__,
    LnOp.__name__,
    ExpOp.__name__,
    SigmoidOp.__name__,
    TanhOp.__name__,
    ReLUOp.__name__,
    PowOp.__name__,
    LogOp.__name__,
    ReduceSumOp.__name__,
    ReduceMeanOp.__name__,
]
