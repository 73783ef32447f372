"""
Activation layer with cached forward state.

`Activation` wraps one of the registered activation function classes (see
`._function`) and remembers the input and output of its most recent forward
call so that the following backward call can evaluate the derivative.

Softmax pass-through
--------------------
For `ActivationType.SOFTMAX`, `backward` returns the incoming gradient
unchanged. This is only correct when softmax is immediately followed by a
cross-entropy loss whose backward already yields the combined gradient
``prediction - target`` (the categorical and sparse categorical losses in
`._losses` do). Feeding any other upstream gradient through a softmax
activation produces an incorrect result.

Notes
-----
- Caches are overwritten on every forward call and hold copies, so mutating
  the caller's input or the returned output does not corrupt backward.
- Activation state is neither thread-safe nor re-entrant.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from ..domain._errors import StaleCacheError
from ..domain._kinds import ActivationType
from ._function import ACTIVATION_FUNCTIONS
from .tensor._tensor import Tensor


class Activation:
    """
    Elementwise (or, for softmax, row-wise) nonlinearity.

    Parameters
    ----------
    kind : ActivationType | str, default="linear"
        Which nonlinearity to apply.
    alpha : float, default=0.01
        Negative-side coefficient for leaky ReLU, PReLU and ELU.
    beta : float, default=1.0
        Sigmoid scale for Swish.

    Attributes
    ----------
    input_cache : Optional[Tensor]
        Copy of the last forward input.
    output_cache : Optional[Tensor]
        Copy of the last forward output.
    """

    def __init__(
        self,
        kind: Union[ActivationType, str] = ActivationType.LINEAR,
        alpha: float = 0.01,
        beta: float = 1.0,
    ) -> None:
        self.kind = ActivationType.parse(kind)
        self.alpha = float(alpha)
        self.beta = float(beta)
        self._fn = ACTIVATION_FUNCTIONS[self.kind]

        self.input_cache: Optional[Tensor] = None
        self.output_cache: Optional[Tensor] = None

    def forward(self, x: Tensor) -> Tensor:
        """
        Apply the activation to `x` and cache input and output.

        Parameters
        ----------
        x : Tensor
            Pre-activation values of shape ``(batch, features)``.

        Returns
        -------
        Tensor
            Activated values, same shape and dtype as `x`.
        """
        y = self._fn.forward(x.data, self.alpha, self.beta).astype(x.dtype, copy=False)
        out = Tensor._wrap(y)

        self.input_cache = x.clone()
        self.output_cache = out.clone()
        return out

    def backward(self, grad_out: Tensor) -> Tensor:
        """
        Propagate `grad_out` through the activation.

        Parameters
        ----------
        grad_out : Tensor
            Gradient of the objective with respect to the last forward output.

        Returns
        -------
        Tensor
            ``grad_out * f'(x)`` elementwise, or `grad_out` itself for softmax.

        Raises
        ------
        StaleCacheError
            If no forward call has been made, or if `grad_out` does not match
            the cached output's shape.
        """
        if self.output_cache is None or self.input_cache is None:
            raise StaleCacheError(
                f"Activation[{self.kind.value}]", "called before any forward pass"
            )
        if grad_out.shape != self.output_cache.shape:
            raise StaleCacheError(
                f"Activation[{self.kind.value}]",
                f"gradient shape {grad_out.shape} does not match "
                f"cached output {self.output_cache.shape}",
            )

        if self.kind is ActivationType.SOFTMAX:
            return grad_out

        d = self._fn.derivative(
            self.input_cache.data, self.output_cache.data, self.alpha, self.beta
        )
        dx = grad_out.data * d
        return Tensor._wrap(dx.astype(grad_out.dtype, copy=False))

    def get_config(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "alpha": self.alpha, "beta": self.beta}

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Activation":
        return cls(
            kind=cfg.get("kind", ActivationType.LINEAR.value),
            alpha=float(cfg.get("alpha", 0.01)),
            beta=float(cfg.get("beta", 1.0)),
        )

    def __repr__(self) -> str:
        return f"Activation({self.kind.value!r}, alpha={self.alpha}, beta={self.beta})"


__all__ = [Activation.__name__]
