"""
Abstract interfaces and utilities for weight initialization.

This module defines the abstract base class for weight initializers along
with helpers that compute fan-in and fan-out from a dense weight shape.

The concrete registry lives in the infrastructure layer. This module exists
in the domain layer to define the contract without binding to NumPy.

Shape convention
----------------
Dense weights are stored as ``(input_dim, output_dim)`` so that the forward
pass is ``X @ W``. Fan-in is therefore the row count and fan-out the column
count.
"""

from abc import ABC
from typing import Any, Callable, Dict, Tuple, TypeVar

T = TypeVar("T", bound=Callable[..., Any])


class _WeightInitializer(ABC):
    """
    Abstract base class for weight initializer dispatchers.

    Design notes
    ------------
    - Initializers are identified by string names.
    - Each initializer is a callable that mutates a tensor in place and
      returns it. It may accept a `rng` keyword for seeded construction.
    """

    INITIALIZERS: Dict[str, Callable] = {}

    def __init__(self, initializer_name: str) -> None:
        ...

    @classmethod
    def register_initializer(
        cls, name: str, *, overwrite: bool = False
    ) -> Callable[[T], T]:
        """
        Register a weight initializer under a given name.

        Returns
        -------
        Callable
            A decorator that registers the initializer function.
        """
        ...

    @classmethod
    def available(cls) -> tuple[str, ...]:
        """Return the names of all registered initializers."""
        ...

    def __call__(self, tensor: Any, *args, **kwargs) -> Any:
        """Apply the initializer to a tensor."""
        ...


def _calculate_fan_in_and_fan_out(shape: Tuple[int, int]) -> Tuple[int, int]:
    """
    Compute fan-in and fan-out for a dense weight shape.

    Parameters
    ----------
    shape:
        ``(input_dim, output_dim)``. A single-input layer ``(1, n)`` has
        fan-in 1.

    Returns
    -------
    tuple[int, int]
        A tuple of (fan_in, fan_out).
    """
    if len(shape) != 2:
        raise ValueError(f"dense parameters are 2-D, got shape {shape}")
    rows, cols = int(shape[0]), int(shape[1])
    return rows, cols


def _calculate_fan_in(shape: Tuple[int, int]) -> int:
    """Return the fan-in of a dense weight shape."""
    return _calculate_fan_in_and_fan_out(shape)[0]
