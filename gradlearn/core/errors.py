"""Exception hierarchy for gradlearn.

Every error carries a human readable message plus an optional ``context``
mapping so callers can inspect the offending values without parsing text.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence


class GradlearnError(Exception):
    """Base exception for all gradlearn errors."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DimensionError(GradlearnError, ValueError):
    """Raised when matrix shapes disagree with a model's topology."""

    def __init__(
        self,
        message: str,
        expected: Optional[Any] = None,
        actual: Optional[Any] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(message, {"expected": expected, "actual": actual})


class TopologyError(GradlearnError, ValueError):
    """Raised when a layer topology is malformed."""

    def __init__(self, message: str, topology: Optional[Sequence[Any]] = None):
        self.topology = tuple(topology) if topology is not None else None
        super().__init__(message, {"topology": self.topology})


class UntrainedModelError(GradlearnError, RuntimeError):
    """Raised when a model is used for prediction before it was trained."""

    def __init__(self, model_type: str):
        self.model_type = model_type
        super().__init__(
            f"{model_type} has not been trained; call train() before predict()",
            {"model_type": model_type},
        )


class ConfigurationError(GradlearnError, ValueError):
    """Raised for invalid optimiser settings or pipeline configuration."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        actual_value: Optional[Any] = None,
    ):
        self.config_key = config_key
        self.actual_value = actual_value
        super().__init__(
            message, {"config_key": config_key, "actual_value": actual_value}
        )


__all__ = [
    "GradlearnError",
    "DimensionError",
    "TopologyError",
    "UntrainedModelError",
    "ConfigurationError",
]
