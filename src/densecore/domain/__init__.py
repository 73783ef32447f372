from ._errors import (
    PreconditionViolationError,
    ShapeMismatchError,
    StaleCacheError,
    NotCompiledError,
    WeightIOError,
)
from ._kinds import ActivationType, LossType
from ._layer import ILayer
from ._optimizers import IOptimizer
from ._parameter import IParameter

__all__ = [
    PreconditionViolationError.__name__,
    ShapeMismatchError.__name__,
    StaleCacheError.__name__,
    NotCompiledError.__name__,
    WeightIOError.__name__,
    ActivationType.__name__,
    LossType.__name__,
    ILayer.__name__,
    IOptimizer.__name__,
    IParameter.__name__,
]
