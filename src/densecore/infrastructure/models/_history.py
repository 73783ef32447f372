"""
Training history utilities.

This module defines a lightweight record of per-epoch metrics, similar to
Keras' `History` object, returned by `Model.fit()`.

Design goals
------------
- Minimal surface area: no dependency on tensors or layers
- Deterministic ordering and explicit epoch indexing
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Union


Number = Union[int, float]


@dataclass
class History:
    """
    Container for per-epoch training metrics.

    Attributes
    ----------
    history : Dict[str, List[float]]
        Mapping from metric name (``"loss"``, ``"accuracy"``) to a list of
        per-epoch values, ordered by epoch index.
    epoch : List[int]
        Epoch indices (0-based) corresponding to entries in `history`.
    """

    history: Dict[str, List[float]] = field(default_factory=dict)
    epoch: List[int] = field(default_factory=list)

    def append_epoch(self, epoch_idx: int, logs: Mapping[str, Number]) -> None:
        """
        Append aggregated metrics for a completed epoch.

        Metric values are coerced to `float` before storage.
        """
        self.epoch.append(int(epoch_idx))
        for k, v in logs.items():
            self.history.setdefault(k, []).append(float(v))

    def last(self) -> Dict[str, float]:
        """Return metrics from the most recent epoch."""
        return {k: float(vs[-1]) for k, vs in self.history.items() if vs}

    def __len__(self) -> int:
        return len(self.epoch)
