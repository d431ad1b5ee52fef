"""Pure in-memory synthetic datasets."""

from __future__ import annotations

import numpy as np

from .registry import Dataset, register_dataset


@register_dataset("blobs")
def make_blobs(
    n_points: int = 120,
    n_classes: int = 2,
    spread: float = 0.5,
    seed: int = 0,
    **_: object,
) -> Dataset:
    """Gaussian clusters on a circle with one-hot targets (a single column for two classes)."""

    rng = np.random.default_rng(seed)
    angles = 2 * np.pi * np.arange(n_classes) / n_classes
    centers = 2.0 * np.column_stack([np.cos(angles), np.sin(angles)])
    labels = np.arange(n_points) % n_classes
    inputs = centers[labels] + spread * rng.standard_normal((n_points, 2))
    if n_classes == 2:
        targets = labels.reshape(-1, 1).astype(float)
        task_type = "binary"
    else:
        targets = np.eye(n_classes)[labels]
        task_type = "multiclass"
    order = rng.permutation(n_points)
    return Dataset(
        name="blobs",
        inputs=inputs[order],
        targets=targets[order],
        task_type=task_type,
        provenance={
            "type": "blobs",
            "n_points": n_points,
            "n_classes": n_classes,
            "spread": spread,
            "seed": seed,
        },
    )


@register_dataset("xor")
def make_xor(repeats: int = 1, **_: object) -> Dataset:
    """The four XOR truth-table rows, optionally repeated."""

    inputs = np.tile(np.array([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]), (repeats, 1))
    targets = np.tile(np.array([[0.0], [1.0], [1.0], [0.0]]), (repeats, 1))
    return Dataset(
        name="xor",
        inputs=inputs,
        targets=targets,
        task_type="binary",
        provenance={"type": "xor", "repeats": repeats},
    )


@register_dataset("line")
def make_line(
    n_points: int = 64,
    slope: float = 2.0,
    intercept: float = -1.0,
    noise: float = 0.05,
    seed: int = 0,
    **_: object,
) -> Dataset:
    """Noisy samples of ``slope * x + intercept`` on ``[-1, 1]``."""

    rng = np.random.default_rng(seed)
    x = np.linspace(-1.0, 1.0, n_points).reshape(-1, 1)
    y = slope * x + intercept + noise * rng.standard_normal(x.shape)
    return Dataset(
        name="line",
        inputs=x,
        targets=y,
        task_type="regression",
        provenance={
            "type": "line",
            "n_points": n_points,
            "slope": slope,
            "intercept": intercept,
            "noise": noise,
            "seed": seed,
        },
    )
