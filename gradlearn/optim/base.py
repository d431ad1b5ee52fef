"""Contracts shared by optimisers and trainable models."""

from __future__ import annotations

from typing import Protocol, Tuple, runtime_checkable

from ..core.types import Array


@runtime_checkable
class Optimizable(Protocol):
    """Protocol implemented by every trainable model."""

    def compute_grad(
        self, params: Array, inputs: Array, targets: Array
    ) -> Tuple[float, Array]:
        """Return ``(cost, flat_gradient)`` for ``params`` on the given batch."""


class OptimAlgorithm(Protocol):
    """Protocol implemented by first-order optimisers."""

    def optimize(
        self, model: Optimizable, start: Array, inputs: Array, targets: Array
    ) -> Array:
        """Return optimised parameters starting from ``start``."""


__all__ = ["Optimizable", "OptimAlgorithm"]
