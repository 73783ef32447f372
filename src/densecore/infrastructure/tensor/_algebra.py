"""
Tensor algebra primitives.

All higher components (layers, activations, losses) are written against
these few operations. Each one checks its operand shapes up front and raises
`ShapeMismatchError` on violation; no NaN/Inf checking is performed, so
non-finite inputs propagate into the results.
"""

from __future__ import annotations

from typing import List, Sequence, Union

import numpy as np

from ...domain._errors import ShapeMismatchError
from ._tensor import DEFAULT_DTYPE, Tensor


def matmul(a: Tensor, b: Tensor) -> Tensor:
    """
    Matrix product ``C = A @ B``.

    Parameters
    ----------
    a : Tensor
        Left operand of shape ``(m, n)``.
    b : Tensor
        Right operand of shape ``(n, p)``.

    Returns
    -------
    Tensor
        A new tensor of shape ``(m, p)``.

    Raises
    ------
    ShapeMismatchError
        If ``a.cols != b.rows``.
    """
    if a.cols != b.rows:
        raise ShapeMismatchError(
            "matmul", f"A{a.shape} @ B{b.shape}: A.cols must equal B.rows"
        )
    return Tensor._wrap(np.matmul(a.data, b.data))


def transpose(a: Tensor) -> Tensor:
    """Return a new tensor with rows and columns swapped."""
    return Tensor._wrap(np.ascontiguousarray(a.data.T))


def add_bias(a: Tensor, b: Union[Tensor, Sequence[float], np.ndarray]) -> None:
    """
    Add `b[j]` to column `j` of every row of `a`, in place.

    Parameters
    ----------
    a : Tensor
        Tensor of shape ``(batch, features)``; mutated.
    b : Tensor | array-like
        Bias with exactly ``features`` elements (a 1-row tensor or a flat
        sequence).

    Raises
    ------
    ShapeMismatchError
        If the bias length differs from ``a.cols``.
    """
    bias = b.flat if isinstance(b, Tensor) else np.asarray(b).reshape(-1)
    if bias.size != a.cols:
        raise ShapeMismatchError(
            "add_bias", f"bias length {bias.size} vs tensor cols {a.cols}"
        )
    data = a.data
    data += bias


def argmax(a: Tensor) -> int:
    """
    Column index of the maximum value of row 0.

    For the single-example case (a 1-row tensor) this is the predicted class.
    Ties resolve to the first occurrence in scan order. Multi-row tensors are
    scanned on row 0 only; callers that batch examples must use
    `argmax_rows` instead.

    Raises
    ------
    ShapeMismatchError
        If the tensor is empty.
    """
    if a.rows == 0 or a.cols == 0:
        raise ShapeMismatchError("argmax", f"empty tensor {a.shape}")
    return int(np.argmax(a.data[0]))


def argmax_rows(a: Tensor) -> List[int]:
    """Per-row column index of the maximum (first occurrence on ties)."""
    if a.cols == 0:
        raise ShapeMismatchError("argmax_rows", f"tensor has no columns {a.shape}")
    return [int(i) for i in np.argmax(a.data, axis=1)]


def column_sum(a: Tensor) -> Tensor:
    """Sum over rows, returned as a 1-row tensor of length ``a.cols``."""
    return Tensor._wrap(a.data.sum(axis=0, keepdims=True))


def one_hot(labels: Sequence[int], num_classes: int, *, dtype=DEFAULT_DTYPE) -> Tensor:
    """
    Build a ``(len(labels), num_classes)`` one-hot tensor.

    Raises
    ------
    ShapeMismatchError
        If any label lies outside ``[0, num_classes)``.
    """
    idx = np.asarray(labels, dtype=np.int64).reshape(-1)
    if idx.size and (idx.min() < 0 or idx.max() >= num_classes):
        raise ShapeMismatchError(
            "one_hot", f"labels {idx.tolist()} outside [0, {num_classes})"
        )
    out = Tensor(idx.size, num_classes, dtype=dtype)
    out.data[np.arange(idx.size), idx] = 1.0
    return out


__all__ = [
    matmul.__name__,
    transpose.__name__,
    add_bias.__name__,
    argmax.__name__,
    argmax_rows.__name__,
    column_sum.__name__,
    one_hot.__name__,
]
