"""
Dense 2-D tensor used as the numerical backbone of the engine.

A `Tensor` is a ``rows x cols`` buffer stored row-major in a C-contiguous
NumPy array. A 1-row tensor doubles as a vector: it may be indexed with a
single integer and its `size` is its column count.

Design notes
------------
- The buffer length always equals ``rows * cols``; the shape never changes
  after construction. Operations that produce a differently shaped result
  return a new tensor.
- Element indexing is bounds-implicit: NumPy raises `IndexError` for
  out-of-range indices, but no other validation is performed on the hot path.
- The default dtype is float32, which matches the 4-byte binary weight file
  format. float64 tensors are supported for numerical gradient checks;
  algebra results follow NumPy's type promotion.
"""

from __future__ import annotations

from typing import Any, Optional, Tuple, Union

import numpy as np

from ...domain._errors import ShapeMismatchError

Index = Union[int, Tuple[int, int]]

DEFAULT_DTYPE = np.float32


class Tensor:
    """
    Row-major 2-D numeric buffer.

    Parameters
    ----------
    rows : int
        Number of rows (batch dimension for activations).
    cols : int
        Number of columns (feature dimension).
    dtype : numpy dtype, optional
        Element type. Defaults to float32.

    Notes
    -----
    The buffer is zero-filled on construction.
    """

    def __init__(self, rows: int, cols: int, *, dtype: Any = DEFAULT_DTYPE) -> None:
        rows, cols = int(rows), int(cols)
        if rows < 0 or cols < 0:
            raise ValueError(f"Tensor dimensions must be >= 0, got ({rows}, {cols})")
        self._data = np.zeros((rows, cols), dtype=dtype)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def vector(cls, size: int, *, dtype: Any = DEFAULT_DTYPE) -> "Tensor":
        """Create a zero-filled 1-row tensor of length `size`."""
        return cls(1, size, dtype=dtype)

    @classmethod
    def from_numpy(cls, arr: Any, *, dtype: Optional[Any] = None) -> "Tensor":
        """
        Create a tensor holding a copy of `arr`.

        Parameters
        ----------
        arr : array-like
            0-D, 1-D (becomes a single row) or 2-D data.
        dtype : numpy dtype, optional
            Target dtype. Defaults to float32.

        Raises
        ------
        ValueError
            If `arr` has more than two dimensions.
        """
        a = np.asarray(arr, dtype=dtype if dtype is not None else DEFAULT_DTYPE)
        if a.ndim > 2:
            raise ValueError(f"Tensor.from_numpy expects at most 2-D data, got {a.shape}")
        return cls._wrap(np.array(a, copy=True))

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> "Tensor":
        """
        Adopt `arr` as the buffer of a new tensor without copying when
        possible.
        """
        if arr.ndim < 2:
            arr = arr.reshape(1, -1)
        t = cls.__new__(cls)
        t._data = np.ascontiguousarray(arr)
        return t

    # ------------------------------------------------------------------
    # Shape and storage
    # ------------------------------------------------------------------
    @property
    def rows(self) -> int:
        return int(self._data.shape[0])

    @property
    def cols(self) -> int:
        return int(self._data.shape[1])

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def size(self) -> int:
        """Number of elements (``rows * cols``)."""
        return int(self._data.size)

    @property
    def data(self) -> np.ndarray:
        """
        The underlying ``(rows, cols)`` array.

        Writes through this view mutate the tensor.
        """
        return self._data

    @property
    def flat(self) -> np.ndarray:
        """Row-major 1-D view of the buffer (writes mutate the tensor)."""
        return self._data.reshape(-1)

    # ------------------------------------------------------------------
    # Element access
    # ------------------------------------------------------------------
    def __getitem__(self, idx: Index) -> float:
        if isinstance(idx, tuple):
            r, c = idx
            return float(self._data[r, c])
        return float(self._data[0, idx])

    def __setitem__(self, idx: Index, value: float) -> None:
        if isinstance(idx, tuple):
            r, c = idx
            self._data[r, c] = value
        else:
            self._data[0, idx] = value

    def __len__(self) -> int:
        """Element count (``rows * cols``), the length of `flat`; not the row count."""
        return self.size

    # ------------------------------------------------------------------
    # Copies and fills
    # ------------------------------------------------------------------
    def copy_from_numpy(self, arr: Any) -> None:
        """
        Overwrite the buffer with `arr`.

        `arr` must either have this tensor's shape or hold exactly `size`
        elements, which are then written in row-major order.

        Raises
        ------
        ShapeMismatchError
            If `arr` cannot be written into this buffer.
        """
        a = np.asarray(arr)
        if a.shape != self.shape:
            if a.size != self.size:
                raise ShapeMismatchError(
                    "copy_from_numpy",
                    f"cannot write array of shape {a.shape} into tensor {self.shape}",
                )
            a = a.reshape(self.shape)
        self._data[...] = a

    def copy_from(self, other: "Tensor") -> None:
        """Overwrite the buffer with the contents of `other` (same shape)."""
        if other.shape != self.shape:
            raise ShapeMismatchError(
                "copy_from", f"source {other.shape} vs destination {self.shape}"
            )
        self._data[...] = other._data

    def to_numpy(self) -> np.ndarray:
        """Return a copy of the buffer as a ``(rows, cols)`` array."""
        return self._data.copy()

    def clone(self) -> "Tensor":
        """Return a deep copy of this tensor."""
        return Tensor._wrap(self._data.copy())

    def fill(self, value: float) -> None:
        """Set every element to `value`."""
        self._data.fill(value)

    def __repr__(self) -> str:
        return f"Tensor(shape={self.shape}, dtype={self.dtype.name})"


__all__ = [Tensor.__name__, "DEFAULT_DTYPE"]
