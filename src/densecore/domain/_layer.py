"""
Domain-level layer contract.

A layer is a forward/backward pair over 2-D tensors that owns zero or more
trainable parameters. Backward must be called with the gradient of the
objective with respect to the layer's most recent forward output and returns
the gradient with respect to that forward call's input.
"""

from __future__ import annotations

from typing import Any, List, Protocol, runtime_checkable


@runtime_checkable
class ILayer(Protocol):
    """Structural contract shared by trainable layers."""

    def forward(self, x: Any) -> Any:
        ...

    def backward(self, grad_out: Any) -> Any:
        ...

    def parameters(self) -> List[Any]:
        ...
