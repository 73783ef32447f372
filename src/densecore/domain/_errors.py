"""
Error kinds raised by densecore.

Two families are kept strictly apart:

- `PreconditionViolationError` and its subclasses signal programming errors
  inside the numeric core: mismatched operand shapes, backward calls against
  a stale or missing forward cache, or training an uncompiled model. These
  are not meant to be caught and resumed from in the middle of a training
  loop; the caller has to fix the call site.
- `WeightIOError` signals a recoverable failure at the file I/O boundary
  (missing file, short read, unparsable text). It derives from `OSError` so
  that callers handling I/O in the usual way also handle it.

Hyperparameter and name validation errors raised at construction time are
plain `ValueError`s.
"""

from __future__ import annotations

from typing import Optional


class PreconditionViolationError(RuntimeError):
    """
    Base class for unrecoverable precondition violations in the numeric core.
    """


class ShapeMismatchError(PreconditionViolationError):
    """
    Raised when operands of an algebra, layer or loss operation have
    incompatible shapes.

    Attributes
    ----------
    op : str
        Name of the operation that rejected its operands (e.g. "matmul").
    """

    def __init__(self, op: str, detail: str) -> None:
        """
        Initialize the ShapeMismatchError.

        Parameters
        ----------
        op : str
            The operation name.
        detail : str
            Human-readable description of the offending shapes.
        """
        super().__init__(f"{op}: {detail}")
        self.op = op


class StaleCacheError(PreconditionViolationError):
    """
    Raised when a backward pass is requested without a matching forward
    cache (no forward yet, or the cached output has a different shape).
    """

    def __init__(self, component: str, detail: str) -> None:
        super().__init__(f"{component}.backward: {detail}")
        self.component = component


class NotCompiledError(PreconditionViolationError):
    """
    Raised when `fit` / `evaluate` is invoked on a model that has no loss and
    optimizer bound (or no layers to run).
    """


class WeightIOError(OSError):
    """
    Raised when reading or writing a weight, input or label file fails.

    Attributes
    ----------
    path : Optional[str]
        The file path involved in the failed operation, if known.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
