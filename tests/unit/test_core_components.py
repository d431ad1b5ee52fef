import numpy as np
import pytest

from gradlearn.core import activations, costs
from gradlearn.core.criterion import BCECriterion, Criterion, MSECriterion
from gradlearn.core.errors import ConfigurationError, DimensionError, TopologyError
from gradlearn.core.layout import LayerLayout, make_rng
from gradlearn.core.types import LayerSlot, as_topology


@pytest.mark.parametrize(
    "topology", [[1, 1], [2, 3, 1], [3, 5, 11, 7, 3], [4, 4, 4, 4]]
)
def test_layout_total_size_matches_topology(topology):
    layout = LayerLayout.from_topology(topology)
    expected = sum((topology[i] + 1) * topology[i + 1] for i in range(len(topology) - 1))
    assert layout.total_size == expected
    assert len(layout) == len(topology) - 1
    assert layout.init_weights(make_rng(0)).shape == (expected,)


def test_layout_slots_are_contiguous():
    layout = LayerLayout.from_topology([2, 3, 1])
    starts = [(slot.start, slot.rows, slot.cols) for slot in layout.slots]
    assert starts == [(0, 3, 3), (9, 4, 1)]


def test_layout_view_is_row_major_and_shares_memory():
    layout = LayerLayout.from_topology([2, 3, 1])
    flat = np.arange(layout.total_size, dtype=float)
    first = layout.view(flat, 0)
    second = layout.view(flat, 1)
    assert first.shape == (3, 3)
    assert first[1, 0] == 3.0
    assert second.ravel().tolist() == [9.0, 10.0, 11.0, 12.0]
    assert np.shares_memory(first, flat)


def test_layout_view_checks_bounds_and_length():
    layout = LayerLayout.from_topology([2, 3, 1])
    with pytest.raises(IndexError):
        layout.view(np.zeros(layout.total_size), 2)
    with pytest.raises(DimensionError):
        layout.view(np.zeros(layout.total_size - 1), 0)


def test_layout_flatten_rejects_misshaped_blocks():
    layout = LayerLayout.from_topology([2, 3, 1])
    with pytest.raises(DimensionError):
        layout.flatten([np.zeros((3, 3))])
    with pytest.raises(DimensionError):
        layout.flatten([np.zeros((3, 3)), np.zeros((1, 4))])


def test_layout_flatten_checks_assembled_length():
    # A slot table with a gap: blocks fit their slots but the total does not.
    layout = LayerLayout(
        topology=(2, 1, 1),
        slots=(LayerSlot(start=0, rows=3, cols=1), LayerSlot(start=5, rows=2, cols=1)),
    )
    with pytest.raises(DimensionError) as excinfo:
        layout.flatten([np.zeros((3, 1)), np.zeros((2, 1))])
    assert excinfo.value.expected == 7
    assert excinfo.value.actual == (5,)


def test_init_weights_respect_layer_bounds():
    layout = LayerLayout.from_topology([3, 5, 2])
    flat = layout.init_weights(np.random.default_rng(42))
    for idx, slot in enumerate(layout.slots):
        eps = np.sqrt(6.0 / (slot.rows + slot.cols))
        block = layout.view(flat, idx)
        assert np.all(np.abs(block) <= eps)


def test_init_weights_are_reproducible_with_seed():
    layout = LayerLayout.from_topology([2, 4, 1])
    first = layout.init_weights(make_rng(7))
    second = layout.init_weights(make_rng(7))
    np.testing.assert_array_equal(first, second)


@pytest.mark.parametrize("bad", [[3], [], [2, 0, 1], [2, -1], [2.5, 1], [True, 1]])
def test_topology_validation(bad):
    with pytest.raises(TopologyError):
        as_topology(bad)


def test_sigmoid_is_finite_at_extremes():
    sig = activations.Sigmoid()
    values = sig.func(np.array([-1e4, 0.0, 1e4]))
    assert np.all(np.isfinite(values))
    assert values[1] == pytest.approx(0.5)
    assert sig.func_grad(np.array([0.0]))[0] == pytest.approx(0.25)


@pytest.mark.parametrize("name", ["sigmoid", "linear", "tanh", "relu"])
def test_activation_gradients_match_finite_differences(name):
    act = activations.REGISTRY.get(name)
    # Avoid the kink of relu at zero.
    z = np.array([[-1.3, -0.4, 0.35, 1.7]])
    h = 1e-6
    numeric = (act.func(z + h) - act.func(z - h)) / (2 * h)
    np.testing.assert_allclose(act.func_grad(z), numeric, atol=1e-6)


def test_mse_cost_and_gradient():
    cost = costs.MeanSqError()
    outputs = np.array([[1.0], [3.0]])
    targets = np.array([[0.0], [1.0]])
    assert cost.cost(outputs, targets) == pytest.approx((1.0 + 4.0) / 4.0)
    np.testing.assert_allclose(cost.grad_cost(outputs, targets), [[1.0], [2.0]])


def test_cross_entropy_cost_and_gradient():
    cost = costs.CrossEntropyError()
    outputs = np.array([[0.8], [0.3]])
    targets = np.array([[1.0], [0.0]])
    expected = -(np.log(0.8) + np.log(0.7)) / 2
    assert cost.cost(outputs, targets) == pytest.approx(expected)
    grad = cost.grad_cost(outputs, targets)
    np.testing.assert_allclose(grad, [[-1 / 0.8], [1 / 0.7]])


def test_cross_entropy_is_clipped_at_saturation():
    cost = costs.CrossEntropyError()
    outputs = np.array([[0.0], [1.0]])
    targets = np.array([[1.0], [0.0]])
    assert np.isfinite(cost.cost(outputs, targets))
    assert np.all(np.isfinite(cost.grad_cost(outputs, targets)))


def test_criteria_pairings():
    bce = BCECriterion()
    mse = MSECriterion()
    assert bce.name == "sigmoid+cross_entropy"
    assert mse.name == "linear+mse"
    z = np.array([[0.0, 2.0]])
    np.testing.assert_allclose(mse.activate(z), z)
    np.testing.assert_allclose(mse.grad_activ(z), np.ones_like(z))
    assert bce.activate(z)[0, 0] == pytest.approx(0.5)


def test_criterion_from_names_uses_registries():
    criterion = Criterion.from_names("tanh", "mse")
    assert isinstance(criterion.activation, activations.Tanh)
    assert isinstance(criterion.cost_fn, costs.MeanSqError)
    assert Criterion.from_names("sigmoid", "bce").cost_fn == costs.CrossEntropyError()


def test_unknown_registry_names_raise_configuration_error():
    with pytest.raises(ConfigurationError):
        activations.REGISTRY.get("softplus")
    with pytest.raises(ConfigurationError):
        costs.REGISTRY.get("hinge")
