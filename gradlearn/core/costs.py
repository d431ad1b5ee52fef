"""Cost strategies and their registry.

A cost maps ``(outputs, targets)`` of identical shape to a scalar averaged over
rows, and supplies the element-wise gradient of the *per-row sum* with respect
to each output. Backpropagation divides by the batch size itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Protocol

import numpy as np

from .errors import ConfigurationError
from .types import Array

_EPS = 1e-12


class CostFunc(Protocol):
    """Protocol implemented by cost strategies."""

    name: str

    def cost(self, outputs: Array, targets: Array) -> float:
        """Return the scalar cost of ``outputs`` against ``targets``."""

    def grad_cost(self, outputs: Array, targets: Array) -> Array:
        """Return d(cost)/d(outputs) element-wise, before batch averaging."""


def _rows(outputs: Array) -> int:
    return outputs.shape[0] if outputs.ndim else 1


@dataclass(frozen=True)
class MeanSqError:
    """Half mean squared error ``sum((o - t)^2) / (2 N)``."""

    name: str = "mse"

    def cost(self, outputs: Array, targets: Array) -> float:
        diff = outputs - targets
        return float(np.sum(diff * diff) / (2.0 * _rows(outputs)))

    def grad_cost(self, outputs: Array, targets: Array) -> Array:
        return outputs - targets


@dataclass(frozen=True)
class CrossEntropyError:
    """Binary cross entropy for outputs in ``(0, 1)``.

    Outputs are clipped to ``[1e-12, 1 - 1e-12]`` before taking logarithms or
    dividing, so saturated sigmoids yield large but finite values.
    """

    name: str = "cross_entropy"

    def cost(self, outputs: Array, targets: Array) -> float:
        clipped = np.clip(outputs, _EPS, 1.0 - _EPS)
        total = targets * np.log(clipped) + (1.0 - targets) * np.log(1.0 - clipped)
        return float(-np.sum(total) / _rows(outputs))

    def grad_cost(self, outputs: Array, targets: Array) -> Array:
        clipped = np.clip(outputs, _EPS, 1.0 - _EPS)
        return (clipped - targets) / (clipped * (1.0 - clipped))


class CostRegistry:
    """Central registry for cost strategies."""

    def __init__(self) -> None:
        self._registry: Dict[str, CostFunc] = {}

    def register(self, cost: CostFunc, *aliases: str) -> None:
        for name in (cost.name, *aliases):
            self._registry[name] = cost

    def get(self, name: str) -> CostFunc:
        try:
            return self._registry[name]
        except KeyError as exc:
            available = ", ".join(self.names())
            raise ConfigurationError(
                f"Unknown cost {name!r}. Available costs: {available}",
                config_key="cost",
                actual_value=name,
            ) from exc

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = CostRegistry()
REGISTRY.register(MeanSqError())
# Alias for parity with the criterion naming
REGISTRY.register(CrossEntropyError(), "bce")

__all__ = ["CostFunc", "CostRegistry", "MeanSqError", "CrossEntropyError", "REGISTRY"]
