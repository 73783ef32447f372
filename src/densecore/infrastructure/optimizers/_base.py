"""
Shared per-parameter state handling for optimizers.

Every optimizer in this package is a per-buffer update rule: `step(p)`
updates one `Parameter` in place from its gradient. Optimizers that need
auxiliary accumulators (velocity, squared-gradient averages, moment
estimates) keep them in a table keyed by `Parameter.handle`. Entries are
created zero-filled, sized to the parameter, the first time the parameter is
stepped or registered, and persist for the optimizer's lifetime.
"""

from __future__ import annotations

import logging
from typing import Dict, Tuple

import numpy as np

from ...domain._errors import ShapeMismatchError, StaleCacheError
from .._parameter import Parameter

logger = logging.getLogger(__name__)


class _StatefulOptimizer:
    """
    Base class providing the handle-keyed state table.

    Subclasses list the accumulator names they need in `_SLOTS`.
    """

    _SLOTS: Tuple[str, ...] = ()

    def __init__(self) -> None:
        # Per-parameter state: handle -> {slot name: ndarray}
        self._state: Dict[int, Dict[str, np.ndarray]] = {}

    def register(self, parameter: Parameter) -> int:
        """
        Create zero-filled state for `parameter` if it does not exist yet.

        Returns
        -------
        int
            The handle the state is stored under.

        Raises
        ------
        ShapeMismatchError
            If state already exists for this handle with a different shape.
        """
        self._ensure_state(parameter)
        return parameter.handle

    def state_for(self, parameter: Parameter) -> Dict[str, np.ndarray]:
        """
        Return the accumulator arrays for `parameter` (empty dict when the
        rule keeps no state or the parameter has never been stepped).
        """
        return self._state.get(parameter.handle, {})

    @property
    def num_tracked(self) -> int:
        """Number of parameters with allocated state."""
        return len(self._state)

    def _ensure_state(self, parameter: Parameter) -> Dict[str, np.ndarray]:
        st = self._state.get(parameter.handle)
        if st is None:
            st = {
                name: np.zeros(parameter.shape, dtype=parameter.data.dtype)
                for name in self._SLOTS
            }
            self._state[parameter.handle] = st
            logger.debug(
                "%s: allocated state for %r (%s)",
                type(self).__name__,
                parameter,
                ", ".join(self._SLOTS) or "none",
            )
            return st

        for name, arr in st.items():
            if arr.shape != parameter.shape:
                raise ShapeMismatchError(
                    f"{type(self).__name__}.step",
                    f"state '{name}' has shape {arr.shape} but parameter "
                    f"{parameter.name!r} now has shape {parameter.shape}",
                )
        return st

    @staticmethod
    def _grad_of(parameter: Parameter) -> np.ndarray:
        g = parameter.grad
        if g is None:
            raise StaleCacheError(
                "Optimizer.step",
                f"parameter {parameter.name!r} has no gradient; run backward first",
            )
        if g.shape != parameter.shape:
            raise ShapeMismatchError(
                "Optimizer.step",
                f"gradient {g.shape} vs parameter {parameter.shape}",
            )
        return g.data
