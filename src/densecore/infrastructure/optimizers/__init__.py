"""
Optimizer package.

The rule set is closed: `SGD` (optionally with momentum), `RMSProp` and
`Adam`. `build_optimizer` resolves one of them by name.
"""

from typing import Any, Dict, Type, Union

from ._sgd import SGD
from ._rmsprop import RMSProp
from ._adam import Adam

Optimizer = Union[SGD, RMSProp, Adam]

OPTIMIZERS: Dict[str, Type[Any]] = {
    "sgd": SGD,
    "rmsprop": RMSProp,
    "adam": Adam,
}


def build_optimizer(name: str, **kwargs: Any) -> Optimizer:
    """
    Construct an optimizer by name (``"sgd"``, ``"rmsprop"`` or ``"adam"``).

    Raises
    ------
    ValueError
        If `name` is not a known optimizer.
    """
    try:
        cls = OPTIMIZERS[name.strip().lower()]
    except KeyError as e:
        available = ", ".join(sorted(OPTIMIZERS))
        raise ValueError(f"Unknown optimizer: {name!r}. Available: {available}") from e
    return cls(**kwargs)


__all__ = [
    SGD.__name__,
    RMSProp.__name__,
    Adam.__name__,
    "Optimizer",
    "OPTIMIZERS",
    build_optimizer.__name__,
]
