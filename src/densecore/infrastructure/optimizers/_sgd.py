"""
Stochastic Gradient Descent (SGD) optimizer implementation.

Update rule
-----------
For a parameter ``p`` with gradient ``g``:

- ``momentum == 0``:   ``p <- p - lr * g``
- ``momentum > 0``:    ``v <- momentum * v - lr * g``;  ``p <- p + v``

Velocity ``v`` is kept per parameter (keyed by handle) and only allocated
when momentum is enabled.
"""

from __future__ import annotations

from dataclasses import dataclass

from .._parameter import Parameter
from ._base import _StatefulOptimizer


@dataclass(eq=False)
class SGD(_StatefulOptimizer):
    """
    Stochastic Gradient Descent with optional classical momentum.

    Parameters
    ----------
    lr : float, optional
        Learning rate. Must be positive. Defaults to 1e-2.
    momentum : float, optional
        Momentum factor in ``[0, 1)``. Defaults to 0.0 (plain SGD).

    Notes
    -----
    - Updates are applied in place on ``p.data``.
    - A parameter without a gradient raises `StaleCacheError`.
    """

    lr: float = 1e-2
    momentum: float = 0.0

    _SLOTS = ("velocity",)

    def __init__(self, lr: float = 1e-2, momentum: float = 0.0) -> None:
        """
        Construct an SGD optimizer.

        Raises
        ------
        ValueError
            If ``lr <= 0`` or ``momentum`` is outside ``[0, 1)``.
        """
        super().__init__()
        self.lr = float(lr)
        self.momentum = float(momentum)

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if not (0.0 <= self.momentum < 1.0):
            raise ValueError(f"momentum must be in [0, 1), got {self.momentum}")

    def step(self, parameter: Parameter) -> None:
        """
        Apply one SGD update to `parameter` in place.
        """
        g = self._grad_of(parameter)
        data = parameter.data.data

        if self.momentum > 0.0:
            v = self._ensure_state(parameter)["velocity"]
            v *= self.momentum
            v -= self.lr * g
            data += v
        else:
            data -= self.lr * g
