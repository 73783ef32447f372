"""
densecore: a small CPU engine for fully connected networks.

Dense layers with fused activations, four losses, three optimizers, a
sequential model with single-example training, and raw float32 weight files.
"""

from .domain import (
    ActivationType,
    LossType,
    PreconditionViolationError,
    ShapeMismatchError,
    StaleCacheError,
    NotCompiledError,
    WeightIOError,
)
from .infrastructure import (
    Tensor,
    matmul,
    transpose,
    add_bias,
    argmax,
    argmax_rows,
    Parameter,
    Activation,
    Loss,
    DenseLayer,
    SGD,
    RMSProp,
    Adam,
    build_optimizer,
    History,
    Model,
    WeightInitializer,
)
from .infrastructure.io import (
    save_weights_bin,
    load_weights_bin,
    load_input_txt,
    load_label_txt,
)

__version__ = "0.1.0"

__all__ = [
    "ActivationType",
    "LossType",
    "PreconditionViolationError",
    "ShapeMismatchError",
    "StaleCacheError",
    "NotCompiledError",
    "WeightIOError",
    "Tensor",
    "matmul",
    "transpose",
    "add_bias",
    "argmax",
    "argmax_rows",
    "Parameter",
    "Activation",
    "Loss",
    "DenseLayer",
    "SGD",
    "RMSProp",
    "Adam",
    "build_optimizer",
    "History",
    "Model",
    "WeightInitializer",
    "save_weights_bin",
    "load_weights_bin",
    "load_input_txt",
    "load_label_txt",
]
