import json
from pathlib import Path

import pytest

from gradlearn.core.errors import ConfigurationError
from gradlearn.reporting.artifacts import config_hash
from gradlearn.training import pipelines


def _config(tmp_path, **train):
    config = pipelines.load_preset("blobs-sgd")
    config["train"]["run_dir"] = str(tmp_path / "run")
    config["train"].update(train)
    return config


def test_pipeline_produces_artifacts(tmp_path):
    config = _config(tmp_path)
    result = pipelines.run_pipeline(config)

    assert result.steps == config["train"]["iters"]
    assert Path(result.metrics_path).exists()
    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["train"]["seed"] == 7
    assert manifest["run_id"] == config_hash(config)
    assert manifest["dataset"]["type"] == "blobs"
    assert manifest["results"]["accuracy"] > 0.8
    assert manifest["results"]["final_cost"] == pytest.approx(result.final_cost)

    records = [
        json.loads(line) for line in Path(result.metrics_path).read_text().splitlines() if line
    ]
    assert len(records) == result.steps
    assert [r["step"] for r in records] == list(range(result.steps))
    assert all("cost" in r and r["seed"] == 7 for r in records)
    assert (Path(config["train"]["run_dir"]) / "metrics.csv").exists()
    assert (Path(config["train"]["run_dir"]) / "config.json").exists()


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a"))
    second = pipelines.run_pipeline(_config(tmp_path / "b"))
    assert first.history == second.history
    assert Path(first.metrics_path).read_text() == Path(second.metrics_path).read_text()


def test_pipeline_writes_plot_when_enabled(tmp_path):
    config = _config(tmp_path, enable_plots=True)
    pipelines.run_pipeline(config)
    assert (Path(config["train"]["run_dir"]) / "loss.png").exists()


@pytest.mark.parametrize("name", ["xor-gd", "blobs-logistic", "line-mse"])
def test_builtin_presets_reduce_cost(tmp_path, name):
    config = pipelines.load_preset(name)
    config["train"]["run_dir"] = str(tmp_path / name)
    config["train"]["iters"] = min(int(config["train"]["iters"]), 300)
    result = pipelines.run_pipeline(config)
    assert result.history[-1] < result.history[0]


def test_file_presets_are_loaded():
    assert "blobs-3class" in pipelines.presets()
    preset = pipelines.load_preset("blobs-3class")
    assert preset["data"]["options"]["n_classes"] == 3


def test_read_config_file_yaml_and_json(tmp_path):
    yaml_path = tmp_path / "override.yaml"
    yaml_path.write_text("train:\n  lr: 0.25\n  iters: 3\n")
    json_path = tmp_path / "override.json"
    json_path.write_text(json.dumps({"train": {"lr": 0.25, "iters": 3}}))
    assert pipelines.read_config_file(yaml_path) == pipelines.read_config_file(json_path)

    with pytest.raises(ConfigurationError):
        pipelines.read_config_file(tmp_path / "override.toml")


def test_merge_config_is_recursive_and_non_destructive():
    base = pipelines.load_preset("xor-gd")
    merged = pipelines.merge_config(base, {"train": {"lr": 0.1}})
    assert merged["train"]["lr"] == 0.1
    assert merged["train"]["iters"] == base["train"]["iters"]
    assert base["train"]["lr"] == 2.0


def test_config_hash_is_order_independent():
    assert config_hash({"a": 1, "b": [1, 2]}) == config_hash({"b": [1, 2], "a": 1})
    assert config_hash({"a": 1}) != config_hash({"a": 2})


@pytest.mark.parametrize(
    "section, override",
    [
        ("data", {"name": "imagenet"}),
        ("model", {"kind": "svm"}),
        ("model", {"activation": "softplus"}),
        ("train", {"optimizer": "adam"}),
    ],
)
def test_invalid_configs_raise(tmp_path, section, override):
    config = _config(tmp_path)
    config[section].update(override)
    with pytest.raises(ConfigurationError):
        pipelines.run_pipeline(config)


def test_missing_sections_raise():
    with pytest.raises(ConfigurationError):
        pipelines.run_pipeline({"data": {"name": "xor"}})


def test_unknown_preset_raises():
    with pytest.raises(ConfigurationError):
        pipelines.load_preset("does-not-exist")
