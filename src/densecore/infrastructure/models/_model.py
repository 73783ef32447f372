"""
Sequential model: layer stack, loss and optimizer.

A `Model` owns an ordered list of layer *references* (layers are built by the
caller and may be inspected or updated directly), plus one `Loss` and one
optimizer bound by `compile`.

Lifecycle
---------
    uncompiled --compile(loss, optimizer)--> compiled

`predict` works in either state. `fit`, `evaluate` and `train_on_example`
require a compiled model and raise `NotCompiledError` otherwise.

Training semantics
------------------
- Training is single-example stochastic: `fit` accepts a `batch_size` for
  API familiarity, validates it, and otherwise ignores it. Each example is
  forwarded, scored, backpropagated and (optionally) applied on its own.
- With ``apply_updates=True`` (the default) the model calls
  ``optimizer.step`` once for every trainable parameter after each example,
  in layer order (weight, then bias). This keeps `Adam`'s shared step counter
  in step with the parameter updates.
- With ``apply_updates=False`` `fit` only runs forward/backward and leaves
  the weights untouched; gradients remain available on each layer's
  parameters for the caller to apply.
- Accuracy compares the predicted class with the label: `argmax` of the
  output row, or ``output >= 0.5`` for a single-column output.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from ...domain._errors import NotCompiledError, ShapeMismatchError
from ...domain._layer import ILayer
from ...domain._optimizers import IOptimizer
from .._losses import Loss
from .._parameter import Parameter
from ..io._files import load_weights_bin, save_weights_bin
from ..tensor._algebra import argmax
from ..tensor._tensor import Tensor
from ._history import History

logger = logging.getLogger(__name__)

Examples = Union[Tensor, np.ndarray, Sequence[Any]]


def _as_tensor(x: Any) -> Tensor:
    if isinstance(x, Tensor):
        return x
    return Tensor.from_numpy(np.asarray(x))


def _split_examples(x: Examples) -> List[Tensor]:
    """
    Normalize a dataset into a list of 1-row tensors.

    Accepts a multi-row `Tensor` or 2-D array (one example per row), or a
    sequence of 1-row tensors / 1-D arrays.
    """
    if isinstance(x, Tensor):
        return [Tensor._wrap(x.data[i : i + 1].copy()) for i in range(x.rows)]
    if isinstance(x, np.ndarray):
        if x.ndim == 1:
            return [Tensor.from_numpy(x)]
        if x.ndim != 2:
            raise ShapeMismatchError("Model", f"expected 2-D examples, got {x.shape}")
        return [Tensor.from_numpy(row) for row in x]
    return [_as_tensor(item) for item in x]


class Model:
    """
    Ordered stack of layers trained one example at a time.

    Parameters
    ----------
    layers : Iterable[DenseLayer], optional
        Layers appended in order.
    """

    def __init__(self, layers: Optional[Iterable[ILayer]] = None) -> None:
        self._layers: List[ILayer] = []
        self.loss: Optional[Loss] = None
        self.optimizer: Optional[IOptimizer] = None
        for layer in layers or ():
            self.add(layer)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def add(self, layer: ILayer) -> None:
        """
        Append a layer reference to the stack.

        Raises
        ------
        TypeError
            If `layer` does not provide forward/backward/parameters.
        """
        if not isinstance(layer, ILayer):
            raise TypeError(f"Model.add expects a layer, got: {type(layer)}")
        self._layers.append(layer)

    @property
    def layers(self) -> tuple:
        return tuple(self._layers)

    def compile(self, loss: Loss, optimizer: IOptimizer) -> None:
        """
        Bind the loss and optimizer used by `fit` and `evaluate`.

        Raises
        ------
        TypeError
            If `loss` is not a `Loss` or `optimizer` does not implement the
            optimizer contract.
        """
        if not isinstance(loss, Loss):
            raise TypeError(f"compile expects a Loss, got: {type(loss)}")
        if not isinstance(optimizer, IOptimizer):
            raise TypeError(f"compile expects an optimizer, got: {type(optimizer)}")
        self.loss = loss
        self.optimizer = optimizer
        logger.debug("compiled with %r and %r", loss, optimizer)

    @property
    def is_compiled(self) -> bool:
        return self.loss is not None and self.optimizer is not None

    def parameters(self) -> List[Parameter]:
        """All trainable parameters, in layer order."""
        return [p for layer in self._layers for p in layer.parameters()]

    def _require_layers(self, op: str) -> None:
        if not self._layers:
            raise NotCompiledError(f"Model.{op}: model has no layers")

    def _require_compiled(self, op: str) -> None:
        self._require_layers(op)
        if not self.is_compiled:
            raise NotCompiledError(
                f"Model.{op}: model must be compiled with a loss and an optimizer"
            )

    # ------------------------------------------------------------------
    # Forward / backward
    # ------------------------------------------------------------------
    def forward(self, x: Any) -> Tensor:
        """Run every layer's forward in order."""
        self._require_layers("forward")
        out = _as_tensor(x)
        for layer in self._layers:
            out = layer.forward(out)
        return out

    def predict(self, x: Any) -> Tensor:
        """
        Inference forward pass.

        Parameters
        ----------
        x : Tensor | array-like
            Input of shape ``(batch, input_dim)``.

        Returns
        -------
        Tensor
            Output of the last layer.
        """
        return self.forward(x)

    __call__ = predict

    def backward(self, grad: Tensor) -> Tensor:
        """
        Backpropagate `grad` through every layer in reverse order.

        Returns
        -------
        Tensor
            Gradient with respect to the model input.
        """
        self._require_layers("backward")
        for layer in reversed(self._layers):
            grad = layer.backward(grad)
        return grad

    def apply_updates(self) -> None:
        """Step the optimizer once per trainable parameter, in layer order."""
        self._require_compiled("apply_updates")
        for p in self.parameters():
            self.optimizer.step(p)

    # ------------------------------------------------------------------
    # Training / evaluation
    # ------------------------------------------------------------------
    @staticmethod
    def _predicted_class(out: Tensor) -> int:
        if out.cols == 1:
            return int(out[0, 0] >= 0.5)
        return argmax(out)

    def _score(self, out: Tensor, label: int) -> tuple:
        target = self.loss.target_for_label(label, out.cols, dtype=out.dtype)
        if target is None:
            target = [label]
        loss_value = self.loss.forward(out, target)
        correct = self._predicted_class(out) == label
        return target, loss_value, correct

    def train_on_example(
        self, x: Any, label: int, *, apply_updates: bool = True
    ) -> Dict[str, float]:
        """
        Run forward, loss, backward and (optionally) one update on a single
        example.

        Returns
        -------
        Dict[str, float]
            ``{"loss": ..., "accuracy": 0.0 or 1.0}``
        """
        self._require_compiled("train_on_example")
        label = int(label)

        out = self.forward(x)
        target, loss_value, correct = self._score(out, label)

        self.backward(self.loss.backward(out, target))
        if apply_updates:
            self.apply_updates()

        return {"loss": float(loss_value), "accuracy": float(correct)}

    def fit(
        self,
        x: Examples,
        y: Sequence[int],
        epochs: int = 1,
        batch_size: int = 1,
        *,
        apply_updates: bool = True,
        shuffle: bool = False,
        rng: Optional[np.random.Generator] = None,
        verbose: int = 0,
    ) -> History:
        """
        Train for a fixed number of epochs, one example at a time.

        Parameters
        ----------
        x : Tensor | ndarray | Sequence
            Examples, one per row (or one 1-row tensor per item).
        y : Sequence[int]
            Integer class labels, one per example.
        epochs : int, optional
            Number of passes over the data. Default is 1.
        batch_size : int, optional
            Accepted for API compatibility; must be >= 1. Values above 1 do
            not batch (a warning is logged).
        apply_updates : bool, optional
            If True (default), apply an optimizer step to every parameter
            after each example. If False, weights are left unchanged.
        shuffle : bool, optional
            Shuffle example order each epoch. Default is False.
        rng : numpy.random.Generator, optional
            Generator used for shuffling.
        verbose : int, optional
            If non-zero, print one summary line per epoch.

        Returns
        -------
        History
            Per-epoch mean loss and accuracy.

        Raises
        ------
        ValueError
            If `epochs < 1`, `batch_size < 1` or the dataset is empty.
        NotCompiledError
            If the model has not been compiled.
        ShapeMismatchError
            If `x` and `y` have different lengths.
        """
        if epochs < 1:
            raise ValueError("epochs must be >= 1")
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._require_compiled("fit")

        examples = _split_examples(x)
        labels = [int(v) for v in y]
        if len(examples) != len(labels):
            raise ShapeMismatchError(
                "Model.fit", f"{len(examples)} examples vs {len(labels)} labels"
            )
        if not examples:
            raise ValueError("fit requires at least one example")
        if batch_size > 1:
            logger.warning(
                "batch_size=%d ignored: training is single-example", batch_size
            )

        gen = rng if rng is not None else np.random.default_rng()
        hist = History()

        for epoch_idx in range(epochs):
            order = gen.permutation(len(examples)) if shuffle else range(len(examples))
            total_loss = 0.0
            correct = 0

            for i in order:
                logs = self.train_on_example(
                    examples[i], labels[i], apply_updates=apply_updates
                )
                total_loss += logs["loss"]
                correct += int(logs["accuracy"])

            epoch_logs = {
                "loss": total_loss / len(examples),
                "accuracy": correct / len(examples),
            }
            hist.append_epoch(epoch_idx, epoch_logs)
            self._report(f"Epoch {epoch_idx + 1}/{epochs}", epoch_logs, verbose)

        return hist

    def evaluate(self, x: Examples, y: Sequence[int], *, verbose: int = 0) -> Dict[str, float]:
        """
        Mean loss and accuracy over a dataset, without backward or updates.

        Raises
        ------
        NotCompiledError
            If the model has not been compiled.
        ShapeMismatchError
            If `x` and `y` have different lengths.
        ValueError
            If the dataset is empty.
        """
        self._require_compiled("evaluate")

        examples = _split_examples(x)
        labels = [int(v) for v in y]
        if len(examples) != len(labels):
            raise ShapeMismatchError(
                "Model.evaluate", f"{len(examples)} examples vs {len(labels)} labels"
            )
        if not examples:
            raise ValueError("evaluate requires at least one example")

        total_loss = 0.0
        correct = 0
        for xi, label in zip(examples, labels):
            out = self.forward(xi)
            _, loss_value, ok = self._score(out, label)
            total_loss += loss_value
            correct += int(ok)

        logs = {"loss": total_loss / len(examples), "accuracy": correct / len(examples)}
        self._report("Evaluation", logs, verbose)
        return logs

    @staticmethod
    def _report(prefix: str, logs: Dict[str, float], verbose: int) -> None:
        line = " - ".join([prefix] + [f"{k}: {v:.6f}" for k, v in logs.items()])
        logger.debug(line)
        if verbose:
            print(line)

    # ------------------------------------------------------------------
    # Weight files
    # ------------------------------------------------------------------
    def _weight_files(self, directory: Union[str, Path]):
        root = Path(directory)
        for i, layer in enumerate(self._layers, start=1):
            yield layer, root / f"dense{i}_W.bin", root / f"dense{i}_b.bin"

    def save_weights(self, directory: Union[str, Path]) -> None:
        """
        Write ``dense{i}_W.bin`` / ``dense{i}_b.bin`` (1-based) for every
        layer into `directory`.

        Raises
        ------
        WeightIOError
            If a file cannot be written.
        """
        self._require_layers("save_weights")
        for layer, w_path, b_path in self._weight_files(directory):
            save_weights_bin(w_path, layer.weight.data)
            save_weights_bin(b_path, layer.bias.data)

    def load_weights(self, directory: Union[str, Path]) -> None:
        """
        Fill every layer's weight and bias from files written by
        `save_weights`.

        Raises
        ------
        WeightIOError
            If a file is missing or has the wrong length.
        """
        self._require_layers("load_weights")
        for layer, w_path, b_path in self._weight_files(directory):
            load_weights_bin(w_path, layer.weight.data)
            load_weights_bin(b_path, layer.bias.data)

    def __repr__(self) -> str:
        inner = ", ".join(repr(layer) for layer in self._layers)
        return f"Model([{inner}], compiled={self.is_compiled})"


__all__ = [Model.__name__]
