from .tensor import Tensor, matmul, transpose, add_bias, argmax, argmax_rows
from ._parameter import Parameter
from ._activations import Activation
from ._losses import Loss
from .fully_connected import DenseLayer
from .optimizers import SGD, RMSProp, Adam, build_optimizer
from .models import History, Model
from .utils.weight_initializer import WeightInitializer

__all__ = [
    Tensor.__name__,
    matmul.__name__,
    transpose.__name__,
    add_bias.__name__,
    argmax.__name__,
    argmax_rows.__name__,
    Parameter.__name__,
    Activation.__name__,
    Loss.__name__,
    DenseLayer.__name__,
    SGD.__name__,
    RMSProp.__name__,
    Adam.__name__,
    build_optimizer.__name__,
    History.__name__,
    Model.__name__,
    WeightInitializer.__name__,
]
