"""
File adapters for weights, inputs and labels.

Formats
-------
- Binary weight file: raw little-endian float32 values, no header. The
  element count is implied by the destination buffer the caller supplies.
- Text input file: whitespace-separated floats, at least as many as the
  expected feature-vector length; loaded into a single-row tensor.
- Text label file: a single integer class index.

Every failure is reported as `WeightIOError`, the recoverable I/O error kind.
Nothing here raises the numeric core's precondition errors.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Union

import numpy as np

from ...domain._errors import WeightIOError
from ..tensor._tensor import Tensor

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

WEIGHT_DTYPE = np.dtype("<f4")


def save_weights_bin(path: PathLike, tensor: Tensor) -> None:
    """
    Write `tensor`'s buffer to `path` as raw float32 in row-major order.

    Parent directories are created as needed.

    Raises
    ------
    WeightIOError
        If the file cannot be written.
    """
    p = Path(path)
    try:
        p.parent.mkdir(parents=True, exist_ok=True)
        tensor.flat.astype(WEIGHT_DTYPE, copy=False).tofile(p)
    except OSError as e:
        raise WeightIOError(f"Cannot write weights to {p}: {e}", path=str(p)) from e
    logger.debug("saved %d values to %s", tensor.size, p)


def load_weights_bin(path: PathLike, tensor: Tensor) -> Tensor:
    """
    Fill `tensor` in place from a raw float32 file and return it.

    Raises
    ------
    WeightIOError
        If the file cannot be read or does not hold exactly ``tensor.size``
        values.
    """
    p = Path(path)
    try:
        raw = np.fromfile(p, dtype=WEIGHT_DTYPE)
    except (OSError, ValueError) as e:
        raise WeightIOError(f"Cannot open {p}: {e}", path=str(p)) from e

    if raw.size != tensor.size:
        raise WeightIOError(
            f"{p} holds {raw.size} float32 values, expected {tensor.size}",
            path=str(p),
        )

    tensor.flat[...] = raw
    logger.debug("loaded %d values from %s", raw.size, p)
    return tensor


def load_input_txt(path: PathLike, size: int) -> Tensor:
    """
    Read `size` whitespace-separated floats from a text file into a 1-row
    tensor.

    Raises
    ------
    WeightIOError
        If the file cannot be read, contains a non-numeric token, or holds
        fewer than `size` values.
    """
    p = Path(path)
    try:
        tokens = p.read_text(encoding="utf-8").split()
    except (OSError, UnicodeDecodeError) as e:
        raise WeightIOError(f"Cannot read {p}: {e}", path=str(p)) from e

    if len(tokens) < size:
        raise WeightIOError(
            f"{p} holds {len(tokens)} values, expected {size}", path=str(p)
        )
    try:
        values = np.array([float(tok) for tok in tokens[:size]], dtype=np.float32)
    except ValueError as e:
        raise WeightIOError(f"Malformed value in {p}: {e}", path=str(p)) from e

    logger.debug("loaded %d input values from %s", size, p)
    return Tensor.from_numpy(values)


def load_label_txt(path: PathLike) -> int:
    """
    Read a single integer class index from a text file.

    Raises
    ------
    WeightIOError
        If the file cannot be read or does not start with an integer.
    """
    p = Path(path)
    try:
        tokens = p.read_text(encoding="utf-8").split()
    except (OSError, UnicodeDecodeError) as e:
        raise WeightIOError(f"Cannot read {p}: {e}", path=str(p)) from e

    if not tokens:
        raise WeightIOError(f"{p} is empty, expected a class index", path=str(p))
    try:
        return int(tokens[0])
    except ValueError as e:
        raise WeightIOError(f"Malformed label in {p}: {tokens[0]!r}", path=str(p)) from e


__all__ = [
    save_weights_bin.__name__,
    load_weights_bin.__name__,
    load_input_txt.__name__,
    load_label_txt.__name__,
]
