"""
scripts/bench_forward_backward.py

Forward and backward+update latency harness (NOT a unit test) for densecore.

What this does
--------------
- Builds the reference classifier 80 -> 256 -> 128 -> 64 -> 10
  (ReLU, ReLU, ReLU, softmax).
- Loads ``dense{i}_W.bin`` / ``dense{i}_b.bin`` from ``--weights`` (or uses
  seeded Xavier/Kaiming weights with ``--random-init``).
- Reads one example from ``--input`` / ``--label`` text files, or draws a
  seeded random example when they are not given.
- Times ``predict`` and prints the per-class output probabilities.
- Applies one correctness step (sparse categorical cross entropy,
  SGD lr=0.01 momentum=0.9) and writes ``dense{i}_{W,b}_updated.bin`` into
  ``--out``.
- Reloads the baseline weights and times forward + backward + update.
"""

from __future__ import annotations

import argparse
import logging
import os
import statistics
import sys
import time
from pathlib import Path
from typing import Callable, List

import numpy as np

# -------------------------
# Make repo_root/src importable
# -------------------------
THIS_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
SRC_DIR = os.path.join(ROOT_DIR, "src")
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from densecore import (
    SGD,
    DenseLayer,
    Loss,
    Model,
    Tensor,
    load_input_txt,
    load_label_txt,
    save_weights_bin,
)

LAYER_SIZES = (80, 256, 128, 64, 10)
ACTIVATIONS = ("relu", "relu", "relu", "softmax")


def _time_one(fn: Callable[[], None], *, warmup: int, repeats: int) -> List[float]:
    for _ in range(warmup):
        fn()
    ts: List[float] = []
    for _ in range(repeats):
        t0 = time.perf_counter()
        fn()
        t1 = time.perf_counter()
        ts.append(t1 - t0)
    return ts


def _fmt_seconds(x: float) -> str:
    if x < 1e-6:
        return f"{x*1e9:.2f} ns"
    if x < 1e-3:
        return f"{x*1e6:.2f} µs"
    if x < 1:
        return f"{x*1e3:.2f} ms"
    return f"{x:.3f} s"


def build_model(*, random_init: bool, seed: int) -> Model:
    rng = np.random.default_rng(seed)
    layers = []
    for i, act in enumerate(ACTIVATIONS, start=1):
        init = "zeros"
        if random_init:
            init = "xavier_uniform" if act == "softmax" else "kaiming_relu"
        layers.append(
            DenseLayer(
                LAYER_SIZES[i - 1],
                LAYER_SIZES[i],
                act,
                initializer=init,
                rng=rng,
                name=f"dense{i}",
            )
        )
    return Model(layers)


def _load_example(args: argparse.Namespace) -> tuple:
    if args.input is not None:
        x = load_input_txt(args.input, LAYER_SIZES[0])
    else:
        rng = np.random.default_rng(args.seed + 1)
        x = Tensor.from_numpy(rng.standard_normal(LAYER_SIZES[0]).astype(np.float32))
    y = load_label_txt(args.label) if args.label is not None else 0
    return x, y


def _save_updated(model: Model, out_dir: Path) -> None:
    for i, layer in enumerate(model.layers, start=1):
        save_weights_bin(out_dir / f"dense{i}_W_updated.bin", layer.weight.data)
        save_weights_bin(out_dir / f"dense{i}_b_updated.bin", layer.bias.data)


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--weights", type=Path, default=Path("weights"))
    ap.add_argument("--out", type=Path, default=Path("updated_weights"))
    ap.add_argument("--input", type=Path, default=None)
    ap.add_argument("--label", type=Path, default=None)
    ap.add_argument(
        "--random-init",
        action="store_true",
        help="Skip loading weights and use seeded random initialization.",
    )
    ap.add_argument("--warmup", type=int, default=1)
    ap.add_argument("--repeats", type=int, default=100)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    model = build_model(random_init=args.random_init, seed=args.seed)
    if not args.random_init:
        model.load_weights(args.weights)
    x, y = _load_example(args)

    print("\n===== densecore forward + backward =====")

    # Forward latency
    fwd_ts = _time_one(
        lambda: model.predict(x),
        warmup=args.warmup,
        repeats=args.repeats,
    )
    output = model.predict(x)

    print("\nOutput probabilities:")
    for i in range(output.cols):
        print(f"Class {i}: {output[0, i]:.3f}")
    print(
        f"\nForward latency: mean {_fmt_seconds(statistics.mean(fwd_ts))}"
        f" | median {_fmt_seconds(statistics.median(fwd_ts))}"
    )

    # One correctness step
    loss = Loss("sparse_categorical_cross_entropy", num_classes=LAYER_SIZES[-1])
    model.compile(loss, SGD(lr=0.01, momentum=0.9))
    logs = model.train_on_example(x, y)
    _save_updated(model, args.out)
    print(f"\nloss before update: {logs['loss']:.6f}")
    print(f"Updated weights saved to {args.out}")

    # Backward + update latency from the baseline weights
    if not args.random_init:
        model.load_weights(args.weights)
    else:
        model = build_model(random_init=True, seed=args.seed)
    model.compile(loss, SGD(lr=0.01, momentum=0.9))

    bwd_ts = _time_one(
        lambda: model.train_on_example(x, y),
        warmup=args.warmup,
        repeats=args.repeats,
    )
    print(
        f"\nBackward + update latency: mean {_fmt_seconds(statistics.mean(bwd_ts))}"
        f" | median {_fmt_seconds(statistics.median(bwd_ts))}"
    )
    print("\n===== complete =====")


if __name__ == "__main__":
    main()
