"""gradlearn public API."""

from .core import activations, costs  # noqa: F401
from .core.criterion import BCECriterion, Criterion, MSECriterion
from .core.errors import (
    ConfigurationError,
    DimensionError,
    GradlearnError,
    TopologyError,
    UntrainedModelError,
)
from .models import LogisticRegressor, NeuralNet
from .optim import GradientDesc, Optimizable, StochasticGD
from .training.pipelines import load_preset, presets, run_pipeline

__all__ = [
    "activations",
    "costs",
    "Criterion",
    "BCECriterion",
    "MSECriterion",
    "GradlearnError",
    "ConfigurationError",
    "DimensionError",
    "TopologyError",
    "UntrainedModelError",
    "NeuralNet",
    "LogisticRegressor",
    "Optimizable",
    "GradientDesc",
    "StochasticGD",
    "load_preset",
    "presets",
    "run_pipeline",
]
