import numpy as np
import pytest

from gradlearn.core.errors import ConfigurationError
from gradlearn.data import available_datasets, get_dataset
from gradlearn.training.metrics import compute_metrics, default_metrics


def test_builtin_datasets_registered():
    assert {"blobs", "line", "xor"} <= set(available_datasets())


def test_blobs_shapes_and_determinism():
    binary = get_dataset("blobs", n_points=30, n_classes=2, seed=4)
    assert binary.inputs.shape == (30, 2)
    assert binary.targets.shape == (30, 1)
    assert binary.task_type == "binary"
    again = get_dataset("blobs", n_points=30, n_classes=2, seed=4)
    np.testing.assert_array_equal(binary.inputs, again.inputs)

    multi = get_dataset("blobs", n_points=30, n_classes=3, seed=4)
    assert multi.d_out == 3
    np.testing.assert_array_equal(multi.targets.sum(axis=1), np.ones(30))


def test_xor_and_line():
    xor = get_dataset("xor", repeats=2)
    assert xor.inputs.shape == (8, 2)
    line = get_dataset("line", n_points=10, noise=0.0, slope=1.0, intercept=0.0)
    np.testing.assert_allclose(line.targets, line.inputs)
    assert line.task_type == "regression"


def test_unknown_dataset():
    with pytest.raises(ConfigurationError):
        get_dataset("imagenet")


def test_metrics_by_task_type():
    assert default_metrics("binary") == ["accuracy"]
    binary = compute_metrics(
        np.array([0.9, 0.2, 0.6, 0.4]), np.array([[1.0], [0.0], [0.0], [0.0]]), task_type="binary"
    )
    assert binary["accuracy"] == pytest.approx(0.75)

    multi = compute_metrics(
        np.array([[0.8, 0.1], [0.3, 0.6]]), np.eye(2), task_type="multiclass"
    )
    assert multi["accuracy"] == pytest.approx(1.0)

    regression = compute_metrics(
        np.array([[1.0], [2.0]]), np.array([[1.0], [4.0]]), task_type="regression"
    )
    assert regression["mae"] == pytest.approx(1.0)
    assert regression["rmse"] == pytest.approx(np.sqrt(2.0))

    with pytest.raises(ConfigurationError):
        default_metrics("ranking")
