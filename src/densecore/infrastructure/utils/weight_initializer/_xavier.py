"""
Xavier (Glorot) weight initializers.

Implemented variants
--------------------
- ``xavier_uniform``: ``U(-a, a)`` with ``a = sqrt(6 / (fan_in + fan_out))``
- ``xavier_normal``:  ``N(0, std^2)`` with ``std = sqrt(2 / (fan_in + fan_out))``

Fan-in and fan-out are taken from the ``(input_dim, output_dim)`` weight
shape. These suit sigmoid / tanh / softmax layers.
"""

import math
from typing import Optional

import numpy as np

from ._base import WeightInitializer, _resolve_rng
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in_and_fan_out


@WeightInitializer.register_initializer("xavier_uniform")
def xavier_uniform(
    tensor: Tensor, *, rng: Optional[np.random.Generator] = None
) -> Tensor:
    """
    Apply Xavier uniform initialization in place.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tensor.shape)
    limit = math.sqrt(6.0 / float(max(1, fan_in + fan_out)))

    w = _resolve_rng(rng).uniform(-limit, limit, size=tensor.shape)
    tensor.copy_from_numpy(w.astype(tensor.dtype, copy=False))
    return tensor


@WeightInitializer.register_initializer("xavier_normal")
def xavier_normal(
    tensor: Tensor, *, rng: Optional[np.random.Generator] = None
) -> Tensor:
    """
    Apply Xavier normal initialization in place.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    fan_in, fan_out = _calculate_fan_in_and_fan_out(tensor.shape)
    std = math.sqrt(2.0 / float(max(1, fan_in + fan_out)))

    w = _resolve_rng(rng).standard_normal(size=tensor.shape) * std
    tensor.copy_from_numpy(w.astype(tensor.dtype, copy=False))
    return tensor
