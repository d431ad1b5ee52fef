"""Criteria pair an activation strategy with a cost strategy.

A network evaluates every layer with the criterion's activation and scores its
output with the criterion's cost. Any value exposing the four operations below
can stand in for :class:`Criterion`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from . import activations as _activations
from . import costs as _costs
from .activations import ActivationFunc, Linear, Sigmoid
from .costs import CostFunc, CrossEntropyError, MeanSqError
from .types import Array


@dataclass(frozen=True)
class Criterion:
    """Immutable ``(activation, cost)`` pair shared by every gradient evaluation."""

    activation: ActivationFunc
    cost_fn: CostFunc

    @classmethod
    def from_names(cls, activation: str, cost: str) -> "Criterion":
        """Build a criterion from registered activation and cost names."""

        return cls(_activations.REGISTRY.get(activation), _costs.REGISTRY.get(cost))

    def activate(self, z: Array) -> Array:
        return self.activation.func(z)

    def grad_activ(self, z: Array) -> Array:
        return self.activation.func_grad(z)

    def cost(self, outputs: Array, targets: Array) -> float:
        return self.cost_fn.cost(outputs, targets)

    def cost_grad(self, outputs: Array, targets: Array) -> Array:
        return self.cost_fn.grad_cost(outputs, targets)

    @property
    def name(self) -> str:
        return f"{self.activation.name}+{self.cost_fn.name}"


@dataclass(frozen=True)
class BCECriterion(Criterion):
    """Sigmoid activation with cross entropy error."""

    activation: ActivationFunc = field(default_factory=Sigmoid)
    cost_fn: CostFunc = field(default_factory=CrossEntropyError)


@dataclass(frozen=True)
class MSECriterion(Criterion):
    """Linear activation with mean squared error."""

    activation: ActivationFunc = field(default_factory=Linear)
    cost_fn: CostFunc = field(default_factory=MeanSqError)


__all__ = ["Criterion", "BCECriterion", "MSECriterion"]
