"""
Constant initializers.

``zeros`` is the default for dense layers whose weights are loaded from
files afterwards.
"""

from typing import Optional

import numpy as np

from ._base import WeightInitializer
from ...tensor._tensor import Tensor


@WeightInitializer.register_initializer("zeros")
def zeros(tensor: Tensor, *, rng: Optional[np.random.Generator] = None) -> Tensor:
    tensor.fill(0.0)
    return tensor


@WeightInitializer.register_initializer("ones")
def ones(tensor: Tensor, *, rng: Optional[np.random.Generator] = None) -> Tensor:
    tensor.fill(1.0)
    return tensor
