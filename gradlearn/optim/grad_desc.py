"""Gradient descent optimisers.

Both optimisers only see the :class:`~gradlearn.optim.base.Optimizable`
contract: they hand the model a flat parameter vector plus a batch and get
back ``(cost, gradient)``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import numpy as np

from ..core.errors import ConfigurationError
from ..core.layout import make_rng
from ..core.types import Array
from .base import Optimizable

logger = logging.getLogger(__name__)


def _check_positive(name: str, value, *, integer: bool) -> None:
    if integer and (isinstance(value, bool) or not isinstance(value, (int, np.integer))):
        raise ConfigurationError(
            f"{name} must be an integer, got {value!r}", config_key=name, actual_value=value
        )
    if not value > 0:
        raise ConfigurationError(
            f"{name} must be positive, got {value!r}", config_key=name, actual_value=value
        )


@dataclass
class GradientDesc:
    """Full-batch gradient descent for a fixed number of iterations."""

    learning_rate: float = 0.3
    iters: int = 100
    cost_history: List[float] = field(init=False, default_factory=list, repr=False)

    def __post_init__(self) -> None:
        _check_positive("learning_rate", self.learning_rate, integer=False)
        _check_positive("iters", self.iters, integer=True)

    def optimize(
        self, model: Optimizable, start: Array, inputs: Array, targets: Array
    ) -> Array:
        params = np.array(start, dtype=float, copy=True)
        self.cost_history = []
        logger.info(
            "gradient descent: %d iterations, lr=%g, %d parameters",
            self.iters,
            self.learning_rate,
            params.size,
        )
        for iteration in range(self.iters):
            cost, grad = model.compute_grad(params, inputs, targets)
            params -= self.learning_rate * grad
            self.cost_history.append(float(cost))
            logger.debug("iter %d cost %.6f", iteration, cost)
        logger.info("gradient descent finished, last cost %.6f", self.cost_history[-1])
        return params


@dataclass
class StochasticGD:
    """Minibatch gradient descent over shuffled epochs.

    ``iters`` counts epochs. Each epoch permutes the rows with ``rng`` and
    performs one update per ``batch_size`` rows; the final partial batch is
    used as well.
    """

    learning_rate: float = 0.1
    iters: int = 20
    batch_size: int = 1
    rng: np.random.Generator | int | None = None
    cost_history: List[float] = field(init=False, default_factory=list, repr=False)

    def __post_init__(self) -> None:
        _check_positive("learning_rate", self.learning_rate, integer=False)
        _check_positive("iters", self.iters, integer=True)
        _check_positive("batch_size", self.batch_size, integer=True)
        self.rng = make_rng(self.rng)

    def optimize(
        self, model: Optimizable, start: Array, inputs: Array, targets: Array
    ) -> Array:
        n_rows = inputs.shape[0]
        if self.batch_size > n_rows:
            raise ConfigurationError(
                f"batch_size {self.batch_size} exceeds the {n_rows} training rows",
                config_key="batch_size",
                actual_value=self.batch_size,
            )
        params = np.array(start, dtype=float, copy=True)
        self.cost_history = []
        logger.info(
            "stochastic gradient descent: %d epochs, batch_size=%d, lr=%g",
            self.iters,
            self.batch_size,
            self.learning_rate,
        )
        for epoch in range(self.iters):
            order = self.rng.permutation(n_rows)
            costs: List[float] = []
            for begin in range(0, n_rows, self.batch_size):
                idx = order[begin : begin + self.batch_size]
                cost, grad = model.compute_grad(params, inputs[idx], targets[idx])
                params -= self.learning_rate * grad
                costs.append(float(cost))
            self.cost_history.append(float(np.mean(costs)))
            logger.debug("epoch %d mean cost %.6f", epoch, self.cost_history[-1])
        logger.info(
            "stochastic gradient descent finished, last epoch cost %.6f",
            self.cost_history[-1],
        )
        return params


__all__ = ["GradientDesc", "StochasticGD"]
