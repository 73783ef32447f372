from ._tensor import Tensor, DEFAULT_DTYPE
from ._algebra import (
    matmul,
    transpose,
    add_bias,
    argmax,
    argmax_rows,
    column_sum,
    one_hot,
)

__all__ = [
    Tensor.__name__,
    "DEFAULT_DTYPE",
    matmul.__name__,
    transpose.__name__,
    add_bias.__name__,
    argmax.__name__,
    argmax_rows.__name__,
    column_sum.__name__,
    one_hot.__name__,
]
