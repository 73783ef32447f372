"""
Adam optimizer implementation.

Update rule
-----------
For a parameter ``p`` with gradient ``g``:

    t <- t + 1
    m <- beta1 * m + (1 - beta1) * g
    v <- beta2 * v + (1 - beta2) * g^2
    m_hat = m / (1 - beta1^t)
    v_hat = v / (1 - beta2^t)
    p <- p - lr * m_hat / (sqrt(v_hat) + eps)

Shared step counter
-------------------
``t`` is a single counter owned by the optimizer instance and incremented on
*every* `step` call, whichever parameter it services; it is not tracked per
parameter. Bias correction therefore stays meaningful only when the caller
steps each trainable buffer exactly once per training iteration (so a model
with two layers advances ``t`` by four per iteration: W1, b1, W2, b2).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .._parameter import Parameter
from ._base import _StatefulOptimizer


@dataclass(eq=False)
class Adam(_StatefulOptimizer):
    """
    Adam optimizer with one shared step counter.

    Parameters
    ----------
    lr : float, optional
        Learning rate. Must be > 0. Defaults to 1e-3.
    beta1, beta2 : float, optional
        Exponential decay rates of the moment estimates, each in (0, 1).
        Defaults to 0.9 and 0.999.
    eps : float, optional
        Numerical stability epsilon. Must be > 0. Defaults to 1e-8.

    Attributes
    ----------
    t : int
        Number of `step` calls made so far, across all parameters.
    """

    lr: float = 1e-3
    beta1: float = 0.9
    beta2: float = 0.999
    eps: float = 1e-8
    t: int = 0

    _SLOTS = ("m", "v")

    def __init__(
        self,
        lr: float = 1e-3,
        beta1: float = 0.9,
        beta2: float = 0.999,
        eps: float = 1e-8,
    ) -> None:
        """
        Construct an Adam optimizer.

        Raises
        ------
        ValueError
            If any hyperparameter is outside its valid range.
        """
        super().__init__()
        self.lr = float(lr)
        self.beta1 = float(beta1)
        self.beta2 = float(beta2)
        self.eps = float(eps)
        self.t = 0

        if self.lr <= 0.0:
            raise ValueError(f"lr must be > 0, got {self.lr}")
        if not (0.0 < self.beta1 < 1.0) or not (0.0 < self.beta2 < 1.0):
            raise ValueError(f"betas must be in (0,1), got {self.betas}")
        if self.eps <= 0.0:
            raise ValueError(f"eps must be > 0, got {self.eps}")

    @property
    def betas(self) -> Tuple[float, float]:
        return (self.beta1, self.beta2)

    def bias_corrections(self, t: Optional[int] = None) -> Tuple[float, float]:
        """
        Return ``(1 - beta1^t, 1 - beta2^t)`` for step `t` (defaults to the
        current counter).
        """
        t = self.t if t is None else int(t)
        return (1.0 - self.beta1**t, 1.0 - self.beta2**t)

    def step(self, parameter: Parameter) -> None:
        """
        Apply one Adam update to `parameter` in place and advance `t`.
        """
        g = self._grad_of(parameter)
        st = self._ensure_state(parameter)
        m, v = st["m"], st["v"]

        self.t += 1
        c1, c2 = self.bias_corrections()

        m *= self.beta1
        m += (1.0 - self.beta1) * g
        v *= self.beta2
        v += (1.0 - self.beta2) * (g * g)

        m_hat = m / c1
        v_hat = v / c2
        data = parameter.data.data
        data -= self.lr * m_hat / (np.sqrt(v_hat) + self.eps)
