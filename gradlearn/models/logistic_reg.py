"""Logistic regression trained by gradient descent.

The intercept is added automatically: inputs get a leading column of ones
before optimisation and prediction.
"""

from __future__ import annotations

import logging
from typing import Tuple

import numpy as np

from ..core.activations import Sigmoid
from ..core.costs import CrossEntropyError
from ..core.errors import DimensionError, UntrainedModelError
from ..core.types import Array, ModelState, Trained, Untrained
from ..optim.base import OptimAlgorithm
from ..optim.grad_desc import GradientDesc
from .nnet import add_bias, as_matrix, require_rows

logger = logging.getLogger(__name__)

_INITIAL_PARAMETER = 0.5


class LogisticRegressor:
    """Single-layer sigmoid model with cross entropy cost."""

    def __init__(self, optimizer: OptimAlgorithm | None = None) -> None:
        self.optimizer = optimizer if optimizer is not None else GradientDesc()
        self._activation = Sigmoid()
        self._cost = CrossEntropyError()
        self._state: ModelState = Untrained()

    def get_parameters(self) -> Array | None:
        """Return a copy of the fitted coefficients (intercept first), or ``None``."""

        if isinstance(self._state, Trained):
            return self._state.parameters.copy()
        return None

    def train(self, inputs, targets) -> None:
        """Fit the coefficients; ``targets`` is a vector or a single column."""

        x = as_matrix(inputs, "inputs")
        require_rows(x, "inputs")
        y = np.asarray(targets, dtype=float)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y[:, 0]
        if y.ndim != 1:
            raise DimensionError(
                f"targets must be a vector or a single column, got shape {y.shape}",
                expected=(x.shape[0],),
                actual=y.shape,
            )
        if x.shape[0] != y.shape[0]:
            raise DimensionError(
                f"inputs have {x.shape[0]} rows but targets have {y.shape[0]}",
                expected=x.shape[0],
                actual=y.shape[0],
            )
        full_inputs = add_bias(x)
        start = np.full(full_inputs.shape[1], _INITIAL_PARAMETER)
        logger.info("training logistic regression on %d rows", x.shape[0])
        optimal = self.optimizer.optimize(self, start, full_inputs, y)
        self._state = Trained(parameters=optimal)

    def predict(self, inputs) -> Array:
        """Return the predicted probability for each row of ``inputs``."""

        if not isinstance(self._state, Trained):
            raise UntrainedModelError(type(self).__name__)
        params = self._state.parameters
        x = as_matrix(inputs, "inputs")
        if x.shape[1] + 1 != params.shape[0]:
            raise DimensionError(
                f"inputs have {x.shape[1]} columns, model was trained on "
                f"{params.shape[0] - 1}",
                expected=params.shape[0] - 1,
                actual=x.shape[1],
            )
        return self._activation.func(add_bias(x) @ params)

    def compute_grad(
        self, params: Array, inputs: Array, targets: Array
    ) -> Tuple[float, Array]:
        # ``inputs`` already carries the intercept column.
        outputs = self._activation.func(inputs @ params)
        cost = self._cost.cost(outputs, targets)
        grad = inputs.T @ (outputs - targets) / inputs.shape[0]
        return cost, grad


__all__ = ["LogisticRegressor"]
