"""
Trainable parameter implementation.

A `Parameter` owns exactly one data `Tensor` and, after the first backward
pass of its layer, one gradient `Tensor` of identical shape. Layers read the
data buffer directly and optimizers update it in place, so there is no second
"optimizer-facing" copy to keep in sync.

Each parameter is issued an integer `handle` from a process-wide counter at
construction time. Optimizers key their per-parameter state by this handle
rather than by object identity, so state cannot alias between a parameter
and a copy of it.
"""

from __future__ import annotations

import itertools
from typing import Any, Optional, Tuple

import numpy as np

from ..domain._errors import ShapeMismatchError
from .tensor._tensor import DEFAULT_DTYPE, Tensor

_HANDLES = itertools.count(1)


class Parameter:
    """
    A trainable buffer paired with its gradient.

    Parameters
    ----------
    rows, cols : int
        Shape of the data buffer.
    name : str, optional
        Label used in logs and weight file names.
    dtype : numpy dtype, optional
        Element type. Defaults to float32.

    Attributes
    ----------
    data : Tensor
        Canonical data buffer.
    name : Optional[str]
        Optional label.
    """

    def __init__(
        self,
        rows: int,
        cols: int,
        *,
        name: Optional[str] = None,
        dtype: Any = DEFAULT_DTYPE,
    ) -> None:
        self.data = Tensor(rows, cols, dtype=dtype)
        self.name = name
        self._grad: Optional[Tensor] = None
        self._handle = next(_HANDLES)

    @classmethod
    def from_tensor(cls, t: Tensor, *, name: Optional[str] = None) -> "Parameter":
        """Create a parameter holding a copy of `t`."""
        p = cls(t.rows, t.cols, name=name, dtype=t.dtype)
        p.data.copy_from(t)
        return p

    @property
    def handle(self) -> int:
        return self._handle

    @property
    def shape(self) -> Tuple[int, int]:
        return self.data.shape

    @property
    def size(self) -> int:
        return self.data.size

    @property
    def grad(self) -> Optional[Tensor]:
        return self._grad

    def set_grad(self, grad: Tensor) -> None:
        """
        Overwrite the stored gradient with `grad`.

        The gradient buffer is allocated on first use and reused afterwards;
        values are copied, never accumulated.

        Raises
        ------
        ShapeMismatchError
            If `grad` does not have this parameter's shape.
        """
        if grad.shape != self.shape:
            raise ShapeMismatchError(
                "Parameter.set_grad",
                f"gradient {grad.shape} vs parameter {self.shape} ({self.name})",
            )
        if self._grad is None:
            self._grad = Tensor(self.data.rows, self.data.cols, dtype=self.data.dtype)
        self._grad.copy_from(grad)

    def zero_grad(self) -> None:
        self._grad = None

    def copy_from_numpy(self, arr: np.ndarray) -> None:
        self.data.copy_from_numpy(arr)

    def to_numpy(self) -> np.ndarray:
        return self.data.to_numpy()

    def clone(self) -> "Parameter":
        """Deep copy of data and gradient under a fresh handle."""
        p = Parameter.from_tensor(self.data, name=self.name)
        if self._grad is not None:
            p.set_grad(self._grad)
        return p

    def __repr__(self) -> str:
        return f"Parameter(name={self.name!r}, shape={self.shape}, handle={self._handle})"


__all__ = [Parameter.__name__]
