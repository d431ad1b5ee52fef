"""Feed-forward neural network trained by backpropagation.

The network keeps all layer weights in one flat vector. A
:class:`~gradlearn.core.layout.LayerLayout` computed from the topology says
where each layer's ``(n_l + 1) x n_{l+1}`` matrix lives; the extra row holds
the bias weights applied to a column of ones prepended to every layer input.

Example::

    net = NeuralNet([3, 5, 3])
    net.train(inputs, targets)
    outputs = net.predict(test_inputs)
"""

from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np

from ..core.criterion import BCECriterion, Criterion
from ..core.errors import DimensionError, UntrainedModelError
from ..core.layout import LayerLayout, make_rng
from ..core.types import Array, ModelState, Topology, Trained, Untrained
from ..optim.base import OptimAlgorithm
from ..optim.grad_desc import StochasticGD

logger = logging.getLogger(__name__)


def add_bias(x: Array) -> Array:
    """Prepend a column of ones to ``x``."""

    return np.hstack([np.ones((x.shape[0], 1)), x])


def as_matrix(data, name: str) -> Array:
    """Return ``data`` as a 2-D float array; 1-D input becomes one column."""

    arr = np.asarray(data, dtype=float)
    if arr.ndim == 1:
        arr = arr.reshape(-1, 1)
    if arr.ndim != 2:
        raise DimensionError(
            f"{name} must be a 2-D matrix, got shape {arr.shape}",
            expected=2,
            actual=arr.ndim,
        )
    return arr


def require_rows(x: Array, name: str) -> None:
    """Raise :class:`DimensionError` when ``x`` has no rows to train on."""

    if x.shape[0] == 0:
        raise DimensionError(
            f"{name} must contain at least one row, got shape {x.shape}",
            expected=">= 1 rows",
            actual=x.shape,
        )


class NeuralNet:
    """Multi-layer feed-forward network implementing ``Optimizable``."""

    def __init__(
        self,
        layer_sizes: Sequence[int],
        criterion: Criterion | None = None,
        optimizer: OptimAlgorithm | None = None,
        rng: np.random.Generator | int | None = None,
        weights: Array | None = None,
    ) -> None:
        self.layout = LayerLayout.from_topology(layer_sizes)
        self.criterion = criterion if criterion is not None else BCECriterion()
        generator = make_rng(rng)
        self.optimizer = optimizer if optimizer is not None else StochasticGD(rng=generator)
        if weights is None:
            self._initial = self.layout.init_weights(generator)
        else:
            initial = np.array(weights, dtype=float, copy=True)
            self.layout.check(initial)
            self._initial = initial
        self._state: ModelState = Untrained()

    @classmethod
    def default(cls, layer_sizes: Sequence[int], **kwargs) -> "NeuralNet":
        """Network with the sigmoid / cross entropy criterion and default SGD."""

        return cls(layer_sizes, BCECriterion(), **kwargs)

    @property
    def topology(self) -> Topology:
        return self.layout.topology

    @property
    def initial_parameters(self) -> Array:
        return self._initial.copy()

    @property
    def is_trained(self) -> bool:
        return isinstance(self._state, Trained)

    def parameter_count(self) -> int:
        return self.layout.total_size

    def get_parameters(self) -> Array | None:
        """Return a copy of the trained parameters, or ``None`` when untrained."""

        if isinstance(self._state, Trained):
            return self._state.parameters.copy()
        return None

    def get_net_weights(self, idx: int) -> Array:
        """Read-only weight matrix between layer ``idx`` and ``idx + 1``.

        The first row holds the bias weights. Untrained networks report their
        initial parameters.
        """

        if isinstance(self._state, Trained):
            params = self._state.parameters
        else:
            params = self._initial
        view = self.layout.view(params, idx)
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    # Supervised model interface

    def train(self, inputs, targets) -> None:
        """Optimise the weights on ``inputs`` / ``targets``, replacing any previous fit."""

        x, y = self._check_training_data(inputs, targets)
        logger.info(
            "training network %s on %d rows with %s",
            list(self.topology),
            x.shape[0],
            type(self.optimizer).__name__,
        )
        optimal = self.optimizer.optimize(self, self._initial.copy(), x, y)
        self.layout.check(optimal)
        self._state = Trained(parameters=optimal)

    def predict(self, inputs) -> Array:
        """Forward propagate ``inputs`` through the trained network."""

        if not isinstance(self._state, Trained):
            raise UntrainedModelError(type(self).__name__)
        x = self._check_inputs(inputs)
        return self.forward_prop(x, self._state.parameters)

    # ------------------------------------------------------------------
    # Optimizable

    def compute_grad(
        self, params: Array, inputs: Array, targets: Array
    ) -> Tuple[float, Array]:
        """Return the cost and the flat backpropagation gradient at ``params``."""

        self.layout.check(params)
        x = self._check_inputs(inputs)
        y = as_matrix(targets, "targets")
        layer_inputs, pre_activations = self._forward_cached(params, x)
        outputs = self.criterion.activate(pre_activations[-1])

        n_layers = len(self.layout)
        n_rows = x.shape[0]
        blocks: List[Array] = [np.empty(0)] * n_layers
        delta = self.criterion.cost_grad(outputs, y) * self.criterion.grad_activ(
            pre_activations[-1]
        )
        for idx in reversed(range(n_layers)):
            blocks[idx] = layer_inputs[idx].T @ delta / n_rows
            if idx > 0:
                weights = self.layout.view(params, idx)
                # Column 0 of the propagated error belongs to the bias input.
                delta = (delta @ weights.T)[:, 1:] * self.criterion.grad_activ(
                    pre_activations[idx - 1]
                )
        return self.criterion.cost(outputs, y), self.layout.flatten(blocks)

    def forward_prop(self, inputs: Array, params: Array | None = None) -> Array:
        """Compute network outputs for ``inputs`` under ``params``.

        ``params`` defaults to the trained parameters, or the initial ones for an
        untrained network.
        """

        if params is None:
            params = self.get_parameters()
            if params is None:
                params = self._initial
        x = self._check_inputs(inputs)
        activation = x
        for idx in range(len(self.layout)):
            z = add_bias(activation) @ self.layout.view(params, idx)
            activation = self.criterion.activate(z)
        return activation

    # ------------------------------------------------------------------
    # Internal helpers

    def _forward_cached(
        self, params: Array, x: Array
    ) -> Tuple[List[Array], List[Array]]:
        layer_inputs: List[Array] = []
        pre_activations: List[Array] = []
        activation = x
        for idx in range(len(self.layout)):
            augmented = add_bias(activation)
            z = augmented @ self.layout.view(params, idx)
            layer_inputs.append(augmented)
            pre_activations.append(z)
            activation = self.criterion.activate(z)
        return layer_inputs, pre_activations

    def _check_inputs(self, inputs) -> Array:
        x = as_matrix(inputs, "inputs")
        if x.shape[1] != self.topology[0]:
            raise DimensionError(
                f"inputs have {x.shape[1]} columns but the input layer has "
                f"{self.topology[0]} neurons",
                expected=self.topology[0],
                actual=x.shape[1],
            )
        return x

    def _check_training_data(self, inputs, targets) -> Tuple[Array, Array]:
        x = self._check_inputs(inputs)
        require_rows(x, "inputs")
        y = as_matrix(targets, "targets")
        if y.shape[1] != self.topology[-1]:
            raise DimensionError(
                f"targets have {y.shape[1]} columns but the output layer has "
                f"{self.topology[-1]} neurons",
                expected=self.topology[-1],
                actual=y.shape[1],
            )
        if x.shape[0] != y.shape[0]:
            raise DimensionError(
                f"inputs have {x.shape[0]} rows but targets have {y.shape[0]}",
                expected=x.shape[0],
                actual=y.shape[0],
            )
        return x, y


__all__ = ["NeuralNet", "add_bias", "as_matrix", "require_rows"]
