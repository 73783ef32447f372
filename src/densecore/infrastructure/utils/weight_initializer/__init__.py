"""
Weight initialization public API.

Importing this module registers the built-in initializers (zeros, ones,
Xavier and Kaiming variants) into the `WeightInitializer` registry.
"""

from ._zeros import *
from ._xavier import *
from ._kaiming import *
from ._base import WeightInitializer

__all__ = [
    WeightInitializer.__name__,
]
