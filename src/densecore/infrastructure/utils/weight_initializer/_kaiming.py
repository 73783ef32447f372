"""
Kaiming (He) weight initializers.

Implemented variants
--------------------
- ``kaiming``:
    Standard Kaiming normal initialization using ``std = sqrt(2 / fan_in)``.
- ``kaiming_relu``:
    Alias registered for readability in ReLU layers.
- ``kaiming_leaky_relu_*``:
    Kaiming initialization adjusted for leaky ReLU slopes, registered via a
    helper.
"""

import math
from typing import Optional

import numpy as np

from ._base import WeightInitializer, _resolve_rng
from ...tensor._tensor import Tensor
from ....domain.utils._weight_initialization import _calculate_fan_in


def _kaiming_normal(
    tensor: Tensor, *, gain: float, rng: Optional[np.random.Generator]
) -> Tensor:
    fan_in = max(1, int(_calculate_fan_in(tensor.shape)))
    std = math.sqrt(gain / float(fan_in))

    w = _resolve_rng(rng).standard_normal(size=tensor.shape) * std
    tensor.copy_from_numpy(w.astype(tensor.dtype, copy=False))
    return tensor


@WeightInitializer.register_initializer("kaiming")
def kaiming(tensor: Tensor, *, rng: Optional[np.random.Generator] = None) -> Tensor:
    """
    Apply standard Kaiming (He) normal initialization in place.

    Returns
    -------
    Tensor
        The initialized tensor (same object).
    """
    return _kaiming_normal(tensor, gain=2.0, rng=rng)


WeightInitializer.register_initializer("kaiming_relu")(kaiming)


def register_kaiming_leaky_relu(name: str, *, negative_slope: float) -> None:
    """
    Register a Kaiming initializer configured for leaky ReLU.

    For negative slope ``a`` the variance becomes:

        std = sqrt(2 / ((1 + a^2) * fan_in))
    """

    @WeightInitializer.register_initializer(name)
    def _init(tensor: Tensor, *, rng: Optional[np.random.Generator] = None) -> Tensor:
        gain = 2.0 / (1.0 + negative_slope * negative_slope)
        return _kaiming_normal(tensor, gain=gain, rng=rng)


register_kaiming_leaky_relu("kaiming_leaky_relu_0.2", negative_slope=0.2)
register_kaiming_leaky_relu("kaiming_leaky_relu_0.01", negative_slope=0.01)
