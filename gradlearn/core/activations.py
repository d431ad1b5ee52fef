"""Activation strategies for gradlearn.

An activation is any object with element-wise ``func(z)`` and its derivative
``func_grad(z)`` taken with respect to the pre-activation ``z``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Protocol

import numpy as np

from .errors import ConfigurationError
from .types import Array

# exp(500) is finite in float64; anything beyond saturates the sigmoid anyway.
_SIGMOID_CLIP = 500.0


class ActivationFunc(Protocol):
    """Protocol implemented by activation strategies."""

    name: str

    def func(self, z: Array) -> Array:
        """Apply the activation element-wise."""

    def func_grad(self, z: Array) -> Array:
        """Return the element-wise derivative at ``z``."""


@dataclass(frozen=True)
class Sigmoid:
    """Logistic sigmoid ``1 / (1 + exp(-z))``."""

    name: str = "sigmoid"

    def func(self, z: Array) -> Array:
        return 1.0 / (1.0 + np.exp(-np.clip(z, -_SIGMOID_CLIP, _SIGMOID_CLIP)))

    def func_grad(self, z: Array) -> Array:
        s = self.func(z)
        return s * (1.0 - s)


@dataclass(frozen=True)
class Linear:
    """Identity activation."""

    name: str = "linear"

    def func(self, z: Array) -> Array:
        return np.asarray(z, dtype=float)

    def func_grad(self, z: Array) -> Array:
        return np.ones_like(z, dtype=float)


@dataclass(frozen=True)
class Tanh:
    name: str = "tanh"

    def func(self, z: Array) -> Array:
        return np.tanh(z)

    def func_grad(self, z: Array) -> Array:
        return 1.0 - np.tanh(z) ** 2


@dataclass(frozen=True)
class ReLU:
    name: str = "relu"

    def func(self, z: Array) -> Array:
        return np.maximum(z, 0.0)

    def func_grad(self, z: Array) -> Array:
        return (z > 0).astype(float)


class ActivationRegistry:
    """Central registry for activation strategies."""

    def __init__(self) -> None:
        self._registry: Dict[str, ActivationFunc] = {}

    def register(self, activation: ActivationFunc) -> None:
        self._registry[activation.name] = activation

    def get(self, name: str) -> ActivationFunc:
        try:
            return self._registry[name]
        except KeyError as exc:
            available = ", ".join(self.names())
            raise ConfigurationError(
                f"Unknown activation {name!r}. Available activations: {available}",
                config_key="activation",
                actual_value=name,
            ) from exc

    def names(self) -> Iterable[str]:
        return sorted(self._registry)


REGISTRY = ActivationRegistry()
REGISTRY.register(Sigmoid())
REGISTRY.register(Linear())
REGISTRY.register(Tanh())
REGISTRY.register(ReLU())

__all__ = [
    "ActivationFunc",
    "ActivationRegistry",
    "Sigmoid",
    "Linear",
    "Tanh",
    "ReLU",
    "REGISTRY",
]
