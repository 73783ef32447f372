"""
Loss function primitives.

Each supported `LossType` is implemented by a function class with explicit
``forward`` (scalar loss) and ``backward`` (gradient with respect to the
prediction) static methods, and `Loss` dispatches to them.

Currently implemented losses:
- MSEFn : Mean Squared Error
- BinaryCrossEntropyFn : Binary Cross Entropy (probability inputs, one column)
- CategoricalCrossEntropyFn : Categorical Cross Entropy (dense targets)
- SparseCategoricalCrossEntropyFn : Categorical Cross Entropy (class indices)

Design notes
------------
- Losses are stateless aside from their configuration (kind, class count,
  epsilon clamp).
- Probabilities are clamped with `eps` before every logarithm so losses stay
  finite.
- The two categorical losses return the *combined* softmax + cross-entropy
  gradient ``(pred - target) / rows``. They are meant to feed a
  softmax-terminated layer whose activation backward is a pass-through.
- Binary cross-entropy returns the per-row gradient
  ``(p - y) / (p (1 - p))`` without dividing by the row count; followed by a
  sigmoid's derivative ``p (1 - p)`` this collapses to ``p - y``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np

from ..domain._errors import ShapeMismatchError
from ..domain._kinds import LossType
from .tensor._algebra import one_hot
from .tensor._tensor import Tensor

Target = Union[Tensor, Sequence[int], np.ndarray]


def _dense_target(op: str, pred: Tensor, target: Any) -> np.ndarray:
    """Validate a dense target against `pred` and return its array."""
    if target is None:
        raise ShapeMismatchError(op, "a dense target tensor is required")
    t = target.data if isinstance(target, Tensor) else np.asarray(target)
    if t.ndim == 1 and pred.rows == 1:
        t = t.reshape(1, -1)
    if t.shape != pred.shape:
        raise ShapeMismatchError(op, f"target {t.shape} vs prediction {pred.shape}")
    return t


def _sparse_target(op: str, pred: Tensor, target: Any) -> np.ndarray:
    """Validate integer class labels (one per row) against `pred`."""
    if target is None:
        raise ShapeMismatchError(op, "class-index labels are required")
    if isinstance(target, Tensor):
        labels = target.flat
    else:
        labels = np.asarray(target).reshape(-1)
    if labels.size != pred.rows:
        raise ShapeMismatchError(
            op, f"{labels.size} labels for a prediction with {pred.rows} rows"
        )
    idx = labels.astype(np.int64)
    if np.any(idx != labels) or (idx.size and (idx.min() < 0 or idx.max() >= pred.cols)):
        raise ShapeMismatchError(
            op, f"labels {labels.tolist()} are not class indices in [0, {pred.cols})"
        )
    return idx


class MSEFn:
    """
    Mean Squared Error:

        MSE(pred, target) = mean((pred - target)^2)

    Gradient: ``2 / (rows * cols) * (pred - target)``.
    """

    @staticmethod
    def forward(pred: Tensor, target: Target, eps: float) -> float:
        t = _dense_target("mse", pred, target)
        diff = pred.data - t
        return float(np.mean(diff * diff))

    @staticmethod
    def backward(pred: Tensor, target: Target, eps: float) -> Tensor:
        t = _dense_target("mse", pred, target)
        scale = 2.0 / float(pred.size)
        return Tensor._wrap((scale * (pred.data - t)).astype(pred.dtype, copy=False))


class BinaryCrossEntropyFn:
    """
    Binary Cross Entropy over a single-column prediction:

        BCE = mean_i( -[y_i log(p_i) + (1 - y_i) log(1 - p_i)] )

    with ``p`` clamped to ``[eps, 1 - eps]``. Gradient (per row, not divided
    by the row count): ``(p - y) / (p (1 - p))`` using the same clamped ``p``.
    """

    @staticmethod
    def _check(pred: Tensor) -> None:
        if pred.cols != 1:
            raise ShapeMismatchError(
                "binary_cross_entropy",
                f"expects a single-column prediction, got {pred.shape}",
            )

    @staticmethod
    def forward(pred: Tensor, target: Target, eps: float) -> float:
        BinaryCrossEntropyFn._check(pred)
        y = _dense_target("binary_cross_entropy", pred, target)
        p = np.clip(pred.data.astype(np.float64), eps, 1.0 - eps)
        loss = -(y * np.log(p) + (1.0 - y) * np.log(1.0 - p))
        return float(np.mean(loss))

    @staticmethod
    def backward(pred: Tensor, target: Target, eps: float) -> Tensor:
        BinaryCrossEntropyFn._check(pred)
        y = _dense_target("binary_cross_entropy", pred, target)
        p = np.clip(pred.data.astype(np.float64), eps, 1.0 - eps)
        grad = (p - y) / (p * (1.0 - p))
        return Tensor._wrap(grad.astype(pred.dtype, copy=False))


class CategoricalCrossEntropyFn:
    """
    Categorical Cross Entropy with dense (one-hot style) targets:

        CCE = (1 / rows) * sum_{i,j : target_ij > 0} -log(max(p_ij, eps))

    Gradient: ``(pred - target) / rows`` (combined softmax + CCE gradient).
    """

    @staticmethod
    def forward(pred: Tensor, target: Target, eps: float) -> float:
        t = _dense_target("categorical_cross_entropy", pred, target)
        p = np.maximum(pred.data.astype(np.float64), eps)
        picked = np.where(t > 0, -np.log(p), 0.0)
        return float(np.sum(picked) / pred.rows)

    @staticmethod
    def backward(pred: Tensor, target: Target, eps: float) -> Tensor:
        t = _dense_target("categorical_cross_entropy", pred, target)
        grad = (pred.data - t) / float(pred.rows)
        return Tensor._wrap(grad.astype(pred.dtype, copy=False))


class SparseCategoricalCrossEntropyFn:
    """
    Categorical Cross Entropy with integer class-index targets:

        SCCE = mean_i( -log(max(p_{i, class_i}, eps)) )

    Gradient: ``pred / rows`` with ``1 / rows`` subtracted at each row's true
    class column, i.e. ``(pred - one_hot(target)) / rows``.
    """

    @staticmethod
    def forward(pred: Tensor, target: Target, eps: float) -> float:
        idx = _sparse_target("sparse_categorical_cross_entropy", pred, target)
        p = pred.data[np.arange(pred.rows), idx].astype(np.float64)
        return float(np.mean(-np.log(np.maximum(p, eps))))

    @staticmethod
    def backward(pred: Tensor, target: Target, eps: float) -> Tensor:
        idx = _sparse_target("sparse_categorical_cross_entropy", pred, target)
        inv = 1.0 / float(pred.rows)
        grad = pred.data * inv
        grad[np.arange(pred.rows), idx] -= inv
        return Tensor._wrap(grad.astype(pred.dtype, copy=False))


LOSS_FUNCTIONS = {
    LossType.MEAN_SQUARED_ERROR: MSEFn,
    LossType.BINARY_CROSS_ENTROPY: BinaryCrossEntropyFn,
    LossType.CATEGORICAL_CROSS_ENTROPY: CategoricalCrossEntropyFn,
    LossType.SPARSE_CATEGORICAL_CROSS_ENTROPY: SparseCategoricalCrossEntropyFn,
}


class Loss:
    """
    Scalar objective comparing a prediction with its target.

    Parameters
    ----------
    kind : LossType | str
        Which loss to compute.
    num_classes : int, default=0
        Expected class count for the categorical losses. 0 disables the
        check.
    eps : float, default=1e-7
        Probability clamp applied before logarithms.

    Raises
    ------
    ValueError
        If `kind` is unknown, `num_classes < 0` or `eps` is not in (0, 0.5).
    """

    def __init__(
        self,
        kind: Union[LossType, str],
        num_classes: int = 0,
        eps: float = 1e-7,
    ) -> None:
        self.kind = LossType.parse(kind)
        self.num_classes = int(num_classes)
        self.eps = float(eps)

        if self.num_classes < 0:
            raise ValueError(f"num_classes must be >= 0, got {self.num_classes}")
        if not (0.0 < self.eps < 0.5):
            raise ValueError(f"eps must be in (0, 0.5), got {self.eps}")

        self._fn = LOSS_FUNCTIONS[self.kind]

    @property
    def is_sparse(self) -> bool:
        return self.kind.is_sparse

    def _check_classes(self, pred: Tensor) -> None:
        if (
            self.num_classes
            and self.kind is not LossType.MEAN_SQUARED_ERROR
            and self.kind is not LossType.BINARY_CROSS_ENTROPY
            and pred.cols != self.num_classes
        ):
            raise ShapeMismatchError(
                self.kind.value,
                f"prediction has {pred.cols} columns, loss configured for "
                f"{self.num_classes} classes",
            )

    def forward(self, pred: Tensor, target: Target) -> float:
        """
        Compute the scalar loss.

        Parameters
        ----------
        pred : Tensor
            Predictions of shape ``(rows, cols)``.
        target : Tensor | Sequence[int]
            Dense target of the same shape, or (sparse kind) one integer
            class index per row.

        Raises
        ------
        ShapeMismatchError
            If the target does not fit the prediction.
        """
        self._check_classes(pred)
        return self._fn.forward(pred, target, self.eps)

    def backward(self, pred: Tensor, target: Target) -> Tensor:
        """
        Compute the gradient of the loss with respect to `pred`.

        Returns
        -------
        Tensor
            Gradient with the prediction's shape.
        """
        self._check_classes(pred)
        return self._fn.backward(pred, target, self.eps)

    def __call__(self, pred: Tensor, target: Target) -> float:
        return self.forward(pred, target)

    def target_for_label(self, label: int, cols: int, *, dtype=None) -> Optional[Tensor]:
        """
        Build the target used to train this loss from a class-index label.

        Returns
        -------
        Optional[Tensor]
            None for the sparse kind (the label itself is the target);
            ``[[label]]`` for binary cross-entropy or any single-column
            output; a one-hot row otherwise.
        """
        if self.is_sparse:
            return None
        dt = dtype if dtype is not None else np.float32
        if self.kind is LossType.BINARY_CROSS_ENTROPY or cols == 1:
            return Tensor.from_numpy([[float(label)]], dtype=dt)
        return one_hot([label], cols, dtype=dt)

    def get_config(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "num_classes": self.num_classes, "eps": self.eps}

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Loss":
        return cls(
            kind=cfg["kind"],
            num_classes=int(cfg.get("num_classes", 0)),
            eps=float(cfg.get("eps", 1e-7)),
        )

    def __repr__(self) -> str:
        return f"Loss({self.kind.value!r}, num_classes={self.num_classes}, eps={self.eps})"


__all__: List[str] = [
    MSEFn.__name__,
    BinaryCrossEntropyFn.__name__,
    CategoricalCrossEntropyFn.__name__,
    SparseCategoricalCrossEntropyFn.__name__,
    "LOSS_FUNCTIONS",
    Loss.__name__,
]
