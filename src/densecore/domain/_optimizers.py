"""
Domain-level optimizer contracts.

Optimizers in this engine are *per-buffer* update rules: the caller hands one
trainable parameter at a time to `step`, and the optimizer mutates that
parameter's data in place using its gradient and the auxiliary state it keeps
for that parameter.

Notes
-----
- Domain contracts are backend-agnostic and must not depend on NumPy or
  infrastructure implementations.
- Auxiliary state is keyed by the parameter's explicit handle, created lazily
  (zero-filled) the first time a parameter is stepped or registered.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IOptimizer(Protocol):
    """
    Optimizer interface contract.

    Required methods
    ----------------
    - `step(parameter)` applies one update to a single parameter.
    - `register(parameter)` creates the parameter's state ahead of time and
      returns the handle it is stored under.
    """

    def step(self, parameter: object) -> None:
        """
        Apply one optimization update to `parameter` in place.
        """
        ...

    def register(self, parameter: object) -> int:
        """
        Ensure state exists for `parameter` and return its handle.
        """
        ...
