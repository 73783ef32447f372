from ._dense import DenseLayer

__all__ = [DenseLayer.__name__]
