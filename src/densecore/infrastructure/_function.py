"""
Elementwise activation functions and their derivatives.

Each supported `ActivationType` is implemented by a small function class
with two static methods operating on NumPy arrays:

- ``forward(x, alpha, beta)`` returns the activated values.
- ``derivative(x, y, alpha, beta)`` returns ``d f / d x`` evaluated from the
  pre-activation input ``x`` and the post-activation output ``y``.

Classes are registered against their kind with `register_activation`, and
`Activation` (see `._activations`) dispatches through `ACTIVATION_FUNCTIONS`.

Numerical notes
---------------
- Exponentials are only ever evaluated on the branch that uses them
  (``exp(min(x, 0))`` for ELU/SELU, ``exp(-|x|)`` for sigmoid), so large
  magnitude inputs do not overflow.
- `SoftmaxFn` normalizes row-wise after subtracting each row's maximum. Its
  derivative is defined as 1 but is never consulted: softmax backward is a
  pass-through (see `Activation.backward`).
- `GELUFn.derivative` is the documented approximation
  ``0.5 * (1 + tanh(sqrt(2/pi) * (x + 0.044715 x^3)))``; it omits the
  ``0.5 x sech^2(...)`` term of the exact derivative.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Type, TypeVar

import numpy as np

from ..domain._kinds import ActivationType

SELU_LAMBDA = 1.050700987
SELU_ALPHA = 1.673263242
GELU_COEF = 0.044715
_SQRT_2_OVER_PI = math.sqrt(2.0 / math.pi)


class ActivationFn:
    """
    Base class for an activation's forward/derivative pair.
    """

    @staticmethod
    def forward(x: np.ndarray, alpha: float, beta: float) -> np.ndarray:
        raise NotImplementedError

    @staticmethod
    def derivative(x: np.ndarray, y: np.ndarray, alpha: float, beta: float) -> np.ndarray:
        raise NotImplementedError


F = TypeVar("F", bound=Type[ActivationFn])

ACTIVATION_FUNCTIONS: Dict[ActivationType, Type[ActivationFn]] = {}


def register_activation(kind: ActivationType) -> Callable[[F], F]:
    """
    Class decorator registering an `ActivationFn` subclass for `kind`.

    Raises
    ------
    ValueError
        If `kind` already has a registered implementation.
    """

    def decorator(cls: F) -> F:
        if kind in ACTIVATION_FUNCTIONS:
            raise ValueError(f"Activation already registered: {kind.value!r}")
        ACTIVATION_FUNCTIONS[kind] = cls
        return cls

    return decorator


def _sigmoid(x: np.ndarray) -> np.ndarray:
    z = np.exp(-np.abs(x))
    return np.where(x >= 0, 1.0 / (1.0 + z), z / (1.0 + z))


@register_activation(ActivationType.STEP)
class StepFn(ActivationFn):
    """Heaviside step: 1 if x > 0 else 0. Its derivative is 0 everywhere."""

    @staticmethod
    def forward(x, alpha, beta):
        return (x > 0).astype(x.dtype)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return np.zeros_like(x)


@register_activation(ActivationType.LINEAR)
class LinearFn(ActivationFn):
    """Identity."""

    @staticmethod
    def forward(x, alpha, beta):
        return x.copy()

    @staticmethod
    def derivative(x, y, alpha, beta):
        return np.ones_like(x)


@register_activation(ActivationType.RELU)
class ReLUFn(ActivationFn):
    """Rectified linear unit: max(0, x)."""

    @staticmethod
    def forward(x, alpha, beta):
        return np.maximum(x, 0)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return (x > 0).astype(x.dtype)


@register_activation(ActivationType.LEAKY_RELU)
class LeakyReLUFn(ActivationFn):
    """
    Leaky ReLU:

        f(x) = x          if x > 0
             = alpha * x  otherwise
    """

    @staticmethod
    def forward(x, alpha, beta):
        return np.where(x > 0, x, alpha * x)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return np.where(x > 0, 1.0, alpha)


@register_activation(ActivationType.PRELU)
class PReLUFn(LeakyReLUFn):
    """
    Parametric ReLU. Same formula as leaky ReLU; `alpha` is a fixed
    hyperparameter here, not a trained parameter.
    """


@register_activation(ActivationType.SIGMOID)
class SigmoidFn(ActivationFn):
    """Logistic sigmoid: 1 / (1 + exp(-x)). Derivative y * (1 - y)."""

    @staticmethod
    def forward(x, alpha, beta):
        return _sigmoid(x)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return y * (1.0 - y)


@register_activation(ActivationType.TANH)
class TanhFn(ActivationFn):
    """Hyperbolic tangent. Derivative 1 - y^2."""

    @staticmethod
    def forward(x, alpha, beta):
        return np.tanh(x)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return 1.0 - y * y


@register_activation(ActivationType.ELU)
class ELUFn(ActivationFn):
    """
    Exponential linear unit:

        f(x) = x                      if x >= 0
             = alpha * (exp(x) - 1)   otherwise
    """

    @staticmethod
    def forward(x, alpha, beta):
        return np.where(x >= 0, x, alpha * np.expm1(np.minimum(x, 0)))

    @staticmethod
    def derivative(x, y, alpha, beta):
        return np.where(x >= 0, 1.0, alpha * np.exp(np.minimum(x, 0)))


@register_activation(ActivationType.SELU)
class SELUFn(ActivationFn):
    """
    Scaled ELU with the fixed self-normalizing constants
    ``lambda = 1.0507...`` and ``alpha = 1.6733...`` (the `alpha`
    hyperparameter is ignored).
    """

    @staticmethod
    def forward(x, alpha, beta):
        neg = SELU_ALPHA * np.expm1(np.minimum(x, 0))
        return SELU_LAMBDA * np.where(x > 0, x, neg)

    @staticmethod
    def derivative(x, y, alpha, beta):
        neg = SELU_LAMBDA * SELU_ALPHA * np.exp(np.minimum(x, 0))
        return np.where(x > 0, SELU_LAMBDA, neg)


@register_activation(ActivationType.GELU)
class GELUFn(ActivationFn):
    """
    GELU, tanh approximation:

        f(x) = 0.5 x (1 + tanh(sqrt(2/pi) (x + 0.044715 x^3)))

    The derivative is approximated by ``0.5 (1 + tanh(...))``.
    """

    @staticmethod
    def _gate(x: np.ndarray) -> np.ndarray:
        return 0.5 * (1.0 + np.tanh(_SQRT_2_OVER_PI * (x + GELU_COEF * x * x * x)))

    @staticmethod
    def forward(x, alpha, beta):
        return x * GELUFn._gate(x)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return GELUFn._gate(x)


@register_activation(ActivationType.SWISH)
class SwishFn(ActivationFn):
    """
    Swish: x * sigmoid(beta * x).

    Derivative: sig + beta * x * sig * (1 - sig), with sig = sigmoid(beta x).
    """

    @staticmethod
    def forward(x, alpha, beta):
        return x * _sigmoid(beta * x)

    @staticmethod
    def derivative(x, y, alpha, beta):
        sig = _sigmoid(beta * x)
        return sig + beta * x * sig * (1.0 - sig)


@register_activation(ActivationType.SOFTMAX)
class SoftmaxFn(ActivationFn):
    """
    Row-wise softmax, numerically stabilized by subtracting each row's
    maximum before exponentiating.
    """

    @staticmethod
    def forward(x, alpha, beta):
        shifted = x - np.max(x, axis=1, keepdims=True)
        e = np.exp(shifted)
        return e / np.sum(e, axis=1, keepdims=True)

    @staticmethod
    def derivative(x, y, alpha, beta):
        return np.ones_like(x)


__all__ = [
    ActivationFn.__name__,
    "ACTIVATION_FUNCTIONS",
    register_activation.__name__,
    "SELU_LAMBDA",
    "SELU_ALPHA",
]
