"""
Fully connected (dense) layer with a fused activation.

Forward
-------
    Z = X @ W + b
    Y = activation(Z)

Backward
--------
Given ``dY`` (gradient with respect to ``Y``):

    dZ = activation.backward(dY)
    dW = X^T @ dZ
    db = column sums of dZ
    dX = dZ @ W^T          (returned)

Design notes
------------
- ``W`` has shape ``(input_dim, output_dim)`` and ``b`` is a single row of
  length ``output_dim``. Both are `Parameter`s: the layer reads their `data`
  directly and optimizers update that same buffer, so no synchronization
  step exists between the layer and the optimizer.
- Gradients overwrite (never accumulate into) the parameters' grad buffers.
- The input of the most recent forward call is cached by value, so the next
  backward sees exactly that input even if the caller mutates its tensor.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import numpy as np

from ...domain._errors import ShapeMismatchError, StaleCacheError
from ...domain._kinds import ActivationType
from .._activations import Activation
from .._parameter import Parameter
from ..tensor._algebra import add_bias, column_sum, matmul, transpose
from ..tensor._tensor import DEFAULT_DTYPE, Tensor
from ..utils.weight_initializer import WeightInitializer


class DenseLayer:
    """
    Affine transform followed by an activation.

    Parameters
    ----------
    input_dim : int
        Number of input features.
    output_dim : int
        Number of output features.
    activation : ActivationType | str, optional
        Activation applied to the affine output. Defaults to linear.
    alpha, beta : float, optional
        Activation hyperparameters (see `Activation`).
    initializer : str, optional
        Registered weight initializer name. Defaults to ``"zeros"``. Biases
        always start at zero.
    rng : numpy.random.Generator, optional
        Random generator handed to the initializer.
    name : str, optional
        Layer label; parameter names derive from it.
    dtype : numpy dtype, optional
        Parameter dtype. Defaults to float32.

    Raises
    ------
    ValueError
        If a dimension is not a positive integer or the initializer name is
        unknown.
    """

    def __init__(
        self,
        input_dim: int,
        output_dim: int,
        activation: Union[ActivationType, str] = ActivationType.LINEAR,
        *,
        alpha: float = 0.01,
        beta: float = 1.0,
        initializer: str = "zeros",
        rng: Optional[np.random.Generator] = None,
        name: Optional[str] = None,
        dtype: Any = DEFAULT_DTYPE,
    ) -> None:
        if int(input_dim) <= 0 or int(output_dim) <= 0:
            raise ValueError(
                f"input_dim and output_dim must be positive, got "
                f"({input_dim}, {output_dim})"
            )

        self.input_dim = int(input_dim)
        self.output_dim = int(output_dim)
        self.name = name if name is not None else "dense"
        self.initializer = initializer

        self.weight = Parameter(
            self.input_dim, self.output_dim, name=f"{self.name}.W", dtype=dtype
        )
        self.bias = Parameter(1, self.output_dim, name=f"{self.name}.b", dtype=dtype)
        WeightInitializer(initializer)(self.weight.data, rng=rng)

        self.activation = Activation(activation, alpha=alpha, beta=beta)
        self.input_cache: Optional[Tensor] = None

    # ------------------------------------------------------------------
    # Buffer accessors
    # ------------------------------------------------------------------
    @property
    def W(self) -> Tensor:
        return self.weight.data

    @property
    def b(self) -> Tensor:
        return self.bias.data

    @property
    def grad_W(self) -> Optional[Tensor]:
        return self.weight.grad

    @property
    def grad_b(self) -> Optional[Tensor]:
        return self.bias.grad

    def parameters(self) -> List[Parameter]:
        """Return the trainable parameters in update order: weight, bias."""
        return [self.weight, self.bias]

    def zero_grad(self) -> None:
        for p in self.parameters():
            p.zero_grad()

    # ------------------------------------------------------------------
    # Forward / backward
    # ------------------------------------------------------------------
    def forward(self, x: Tensor) -> Tensor:
        """
        Compute ``activation(x @ W + b)``.

        Parameters
        ----------
        x : Tensor
            Input of shape ``(batch, input_dim)``.

        Returns
        -------
        Tensor
            Output of shape ``(batch, output_dim)``.

        Raises
        ------
        ShapeMismatchError
            If ``x.cols != input_dim``.
        """
        if x.cols != self.input_dim:
            raise ShapeMismatchError(
                f"{self.name}.forward",
                f"input has {x.cols} features, layer expects {self.input_dim}",
            )

        self.input_cache = x.clone()

        z = matmul(x, self.W)
        add_bias(z, self.b)
        return self.activation.forward(z)

    def backward(self, grad_out: Tensor) -> Tensor:
        """
        Backpropagate `grad_out` through the layer.

        Stores ``dW`` and ``db`` in the parameters' gradient buffers and
        returns ``dX``.

        Parameters
        ----------
        grad_out : Tensor
            Gradient with respect to the last forward output, shape
            ``(batch, output_dim)``.

        Returns
        -------
        Tensor
            Gradient with respect to the last forward input, shape
            ``(batch, input_dim)``.

        Raises
        ------
        StaleCacheError
            If called before any forward pass.
        ShapeMismatchError
            If `grad_out` does not match ``(batch, output_dim)``.
        """
        if self.input_cache is None:
            raise StaleCacheError(self.name, "called before any forward pass")
        if grad_out.cols != self.output_dim or grad_out.rows != self.input_cache.rows:
            raise ShapeMismatchError(
                f"{self.name}.backward",
                f"gradient {grad_out.shape} vs expected "
                f"({self.input_cache.rows}, {self.output_dim})",
            )

        d_act = self.activation.backward(grad_out)

        self.weight.set_grad(matmul(transpose(self.input_cache), d_act))
        self.bias.set_grad(column_sum(d_act))

        return matmul(d_act, transpose(self.W))

    def __call__(self, x: Tensor) -> Tensor:
        return self.forward(x)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def get_config(self) -> Dict[str, Any]:
        """
        Return the constructor configuration as a plain dict.
        """
        act = self.activation.get_config()
        return {
            "input_dim": self.input_dim,
            "output_dim": self.output_dim,
            "activation": act["kind"],
            "alpha": act["alpha"],
            "beta": act["beta"],
            "initializer": self.initializer,
            "name": self.name,
        }

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "DenseLayer":
        return cls(
            int(cfg["input_dim"]),
            int(cfg["output_dim"]),
            cfg.get("activation", ActivationType.LINEAR.value),
            alpha=float(cfg.get("alpha", 0.01)),
            beta=float(cfg.get("beta", 1.0)),
            initializer=cfg.get("initializer", "zeros"),
            name=cfg.get("name"),
        )

    def __repr__(self) -> str:
        return (
            f"DenseLayer({self.input_dim} -> {self.output_dim}, "
            f"activation={self.activation.kind.value!r}, name={self.name!r})"
        )


__all__ = [DenseLayer.__name__]
