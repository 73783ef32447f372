"""
RMSProp optimizer implementation.

Update rule
-----------
For a parameter ``p`` with gradient ``g`` (elementwise):

    v <- beta * v + (1 - beta) * g^2
    p <- p - lr * g / (sqrt(v) + eps)
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .._parameter import Parameter
from ._base import _StatefulOptimizer


@dataclass(eq=False)
class RMSProp(_StatefulOptimizer):
    """
    Gradient descent scaled by a running RMS of past gradients.

    Parameters
    ----------
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-3.
    beta : float, optional
        Decay of the squared-gradient average, in ``(0, 1)``. Defaults to 0.9.
    eps : float, optional
        Denominator stabilizer. Must be positive. Defaults to 1e-8.
    """

    lr: float = 1e-3
    beta: float = 0.9
    eps: float = 1e-8

    _SLOTS = ("sq_avg",)

    def __init__(self, lr: float = 1e-3, beta: float = 0.9, eps: float = 1e-8) -> None:
        """
        Construct an RMSProp optimizer.

        Raises
        ------
        ValueError
            If any hyperparameter is outside its valid range.
        """
        super().__init__()
        self.lr = float(lr)
        self.beta = float(beta)
        self.eps = float(eps)

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if not (0.0 < self.beta < 1.0):
            raise ValueError(f"beta must be in (0,1), got {self.beta}")
        if self.eps <= 0.0:
            raise ValueError(f"eps must be > 0, got {self.eps}")

    def step(self, parameter: Parameter) -> None:
        """
        Apply one RMSProp update to `parameter` in place.
        """
        g = self._grad_of(parameter)
        v = self._ensure_state(parameter)["sq_avg"]

        v *= self.beta
        v += (1.0 - self.beta) * (g * g)

        data = parameter.data.data
        data -= self.lr * g / (np.sqrt(v) + self.eps)
