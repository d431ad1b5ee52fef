"""Evaluation metrics reported after a training run."""

from __future__ import annotations

from typing import Dict, List

import numpy as np

from ..core.errors import ConfigurationError
from ..core.types import Array


def default_metrics(task_type: str) -> List[str]:
    if task_type == "regression":
        return ["mae", "rmse"]
    if task_type in {"binary", "multiclass"}:
        return ["accuracy"]
    raise ConfigurationError(
        f"Unknown task type: {task_type}", config_key="task_type", actual_value=task_type
    )


def compute_metric(name: str, predictions: Array, targets: Array, *, task_type: str) -> float:
    key = name.lower()
    if key == "mae":
        return float(np.mean(np.abs(predictions - targets)))
    if key == "rmse":
        return float(np.sqrt(np.mean((predictions - targets) ** 2)))
    if key == "accuracy":
        if task_type == "multiclass":
            hits = np.argmax(predictions, axis=1) == np.argmax(targets, axis=1)
        else:
            hits = (predictions >= 0.5) == (targets >= 0.5)
        return float(np.mean(hits))
    raise ConfigurationError(f"Unknown metric: {name}", config_key="metrics", actual_value=name)


def compute_metrics(predictions: Array, targets: Array, *, task_type: str) -> Dict[str, float]:
    predictions = predictions.reshape(targets.shape)
    return {
        name: compute_metric(name, predictions, targets, task_type=task_type)
        for name in default_metrics(task_type)
    }


__all__ = ["default_metrics", "compute_metric", "compute_metrics"]
