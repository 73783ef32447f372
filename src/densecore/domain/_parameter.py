"""
Trainable parameter interface definitions.

This module defines the domain-level interface for trainable buffers used by
optimization algorithms. A parameter couples a data buffer with a gradient
buffer of identical shape and carries an explicit integer handle that
optimizers use to key their auxiliary state.
"""

from __future__ import annotations

from typing import Optional, Protocol, Tuple, runtime_checkable


@runtime_checkable
class IParameter(Protocol):
    """
    Domain-level interface for trainable parameters.

    Notes
    -----
    - `data` is mutated in place by optimizers; layers read it directly, so
      there is exactly one canonical buffer per trainable tensor.
    - `grad` is overwritten (not accumulated) by the owning layer's backward
      pass and is None until the first backward.
    - `handle` is stable for the lifetime of the parameter and unique within
      the process. Copies (`clone`) receive a new handle.
    """

    @property
    def handle(self) -> int:
        """Return the parameter's optimizer-state key."""
        ...

    @property
    def shape(self) -> Tuple[int, int]:
        """Return the `(rows, cols)` shape of the data buffer."""
        ...

    @property
    def grad(self) -> Optional[object]:
        """Return the gradient buffer, or None before the first backward."""
        ...

    def zero_grad(self) -> None:
        """Clear the stored gradient."""
        ...
