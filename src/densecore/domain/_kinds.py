"""
Closed catalogues of activation and loss kinds.

The engine supports a fixed set of nonlinearities and objectives. Both sets
are modelled as `Enum`s so that dispatch tables in the infrastructure layer
can be checked for exhaustiveness and so that string configuration values
(e.g. ``"relu"``) resolve to exactly one kind.
"""

from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar, Union

E = TypeVar("E", bound="_NamedKind")


class _NamedKind(str, Enum):
    """String-valued enum with forgiving name lookup."""

    @classmethod
    def parse(cls: Type[E], value: Union[str, E]) -> E:
        """
        Resolve an enum member from an instance or a case-insensitive name.

        Hyphens and spaces are treated as underscores, so ``"leaky-relu"``
        and ``"LEAKY_RELU"`` both resolve to the same member.

        Raises
        ------
        ValueError
            If `value` does not name a member of this enum.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"{cls.__name__} expects a str or member, got {value!r}")
        key = value.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(key)
        except ValueError as e:
            available = ", ".join(m.value for m in cls)
            raise ValueError(
                f"Unknown {cls.__name__}: {value!r}. Available: {available}"
            ) from e


class ActivationType(_NamedKind):
    """Supported activation functions."""

    STEP = "step"
    LINEAR = "linear"
    RELU = "relu"
    LEAKY_RELU = "leaky_relu"
    PRELU = "prelu"
    SIGMOID = "sigmoid"
    TANH = "tanh"
    ELU = "elu"
    SELU = "selu"
    GELU = "gelu"
    SWISH = "swish"
    SOFTMAX = "softmax"


class LossType(_NamedKind):
    """Supported loss functions."""

    MEAN_SQUARED_ERROR = "mean_squared_error"
    BINARY_CROSS_ENTROPY = "binary_cross_entropy"
    CATEGORICAL_CROSS_ENTROPY = "categorical_cross_entropy"
    SPARSE_CATEGORICAL_CROSS_ENTROPY = "sparse_categorical_cross_entropy"

    @property
    def is_sparse(self) -> bool:
        return self is LossType.SPARSE_CATEGORICAL_CROSS_ENTROPY
