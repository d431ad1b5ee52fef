"""Pipeline assembly: presets, config files and single training runs."""

from __future__ import annotations

import json
import logging
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, Mapping, Sequence

import numpy as np
import yaml

from ..core.criterion import Criterion
from ..core.errors import ConfigurationError
from ..core.types import RunResult
from ..data import Dataset, get_dataset
from ..models.logistic_reg import LogisticRegressor
from ..models.nnet import NeuralNet
from ..optim.grad_desc import GradientDesc, StochasticGD
from ..reporting.artifacts import config_hash, write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from .metrics import compute_metrics

logger = logging.getLogger(__name__)

_REQUIRED_SECTIONS = {"data", "model", "train"}

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor-gd": {
        "data": {"name": "xor", "options": {"repeats": 1}},
        "model": {
            "kind": "nnet",
            "hidden": [4],
            "activation": "sigmoid",
            "cost": "cross_entropy",
        },
        "train": {
            "optimizer": "gd",
            "lr": 2.0,
            "iters": 2000,
            "seed": 3,
            "run_dir": "runs/xor-gd",
            "enable_plots": False,
        },
    },
    "blobs-sgd": {
        "data": {"name": "blobs", "options": {"n_points": 120, "n_classes": 2, "seed": 0}},
        "model": {
            "kind": "nnet",
            "hidden": [4],
            "activation": "sigmoid",
            "cost": "cross_entropy",
        },
        "train": {
            "optimizer": "sgd",
            "lr": 0.5,
            "iters": 20,
            "batch_size": 8,
            "seed": 7,
            "run_dir": "runs/blobs-sgd",
            "enable_plots": False,
        },
    },
    "blobs-logistic": {
        "data": {"name": "blobs", "options": {"n_points": 80, "n_classes": 2, "seed": 1}},
        "model": {"kind": "logistic"},
        "train": {
            "optimizer": "gd",
            "lr": 0.3,
            "iters": 200,
            "seed": 0,
            "run_dir": "runs/blobs-logistic",
            "enable_plots": False,
        },
    },
    "line-mse": {
        "data": {"name": "line", "options": {"n_points": 64, "seed": 0}},
        "model": {
            "kind": "nnet",
            "hidden": [],
            "activation": "linear",
            "cost": "mse",
        },
        "train": {
            "optimizer": "gd",
            "lr": 0.5,
            "iters": 200,
            "seed": 0,
            "run_dir": "runs/line-mse",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: str | Path) -> Mapping[str, object]:
    """Load a YAML or JSON mapping from ``path``."""

    path = Path(path)
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        data = yaml.safe_load(path.read_text()) or {}
    elif suffix == ".json":
        data = json.loads(path.read_text() or "{}")
    else:
        raise ConfigurationError(
            f"Unsupported config file type: {path.suffix}", actual_value=str(path)
        )

    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        presets: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = _REQUIRED_SECTIONS - set(data)
                if missing:
                    raise ConfigurationError(
                        f"Preset {file.name} is missing required sections: "
                        f"{', '.join(sorted(missing))}"
                    )
                presets[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = presets
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise ConfigurationError(
            f"Unknown preset: {name}", config_key="preset", actual_value=name
        ) from exc


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into a copy of ``base``."""

    merged = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train one model as described by ``config`` and write its artifacts."""

    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise ConfigurationError(
            f"Config is missing required sections: {', '.join(sorted(missing))}"
        )
    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = get_dataset(str(data_cfg.get("name", "")), **data_cfg.get("options", {}))
    seed = int(train_cfg.get("seed", 0))
    optimizer = _build_optimizer(train_cfg, seed)
    model = _build_model(model_cfg, dataset, optimizer, seed)

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)
    _log_startup_summary(dataset, model_cfg, train_cfg, model)

    started = time.perf_counter()
    model.train(dataset.inputs, dataset.targets)
    elapsed = time.perf_counter() - started
    history = list(optimizer.cost_history)

    run_id = config_hash(config)
    jsonl = JsonlSink(run_dir / "metrics.jsonl", seed=seed)
    csv_sink = CsvSink(run_dir / "metrics.csv")
    plots = PlotAdapter.for_optimizer(
        run_dir, optimizer, enable_plots=bool(train_cfg.get("enable_plots", False))
    )
    for step, cost in enumerate(history):
        for sink in (jsonl, csv_sink, plots):
            sink.on_step(step, {"cost": cost})
    plots.close()

    predictions = model.predict(dataset.inputs)
    results: Dict[str, object] = {
        "final_cost": history[-1],
        "initial_cost": history[0],
        "steps": len(history),
        "train_seconds": round(elapsed, 6),
    }
    results.update(compute_metrics(predictions, dataset.targets, task_type=dataset.task_type))
    logger.info("run %s finished: %s", run_id, results)

    safe_config = json.loads(json.dumps(config))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        results=results,
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        steps=len(history),
        metrics_path=str(jsonl.path),
        manifest_path=manifest,
        final_cost=float(history[-1]),
        history=history,
    )


def _build_optimizer(train_cfg: Mapping[str, object], seed: int):
    name = str(train_cfg.get("optimizer", "gd")).lower()
    lr = float(train_cfg.get("lr", 0.1))
    iters = int(train_cfg.get("iters", 100))
    if name == "gd":
        return GradientDesc(learning_rate=lr, iters=iters)
    if name == "sgd":
        return StochasticGD(
            learning_rate=lr,
            iters=iters,
            batch_size=int(train_cfg.get("batch_size", 1)),
            rng=np.random.default_rng(seed + 1),
        )
    raise ConfigurationError(
        f"Unknown optimizer {name!r}; expected 'gd' or 'sgd'",
        config_key="train.optimizer",
        actual_value=name,
    )


def _build_model(
    model_cfg: Mapping[str, object], dataset: Dataset, optimizer, seed: int
):
    kind = str(model_cfg.get("kind", "nnet"))
    if kind == "logistic":
        if dataset.d_out != 1:
            raise ConfigurationError(
                f"Logistic regression needs a single target column, dataset "
                f"{dataset.name!r} has {dataset.d_out}",
                config_key="model.kind",
                actual_value=kind,
            )
        return LogisticRegressor(optimizer)
    if kind == "nnet":
        criterion = Criterion.from_names(
            str(model_cfg.get("activation", "sigmoid")),
            str(model_cfg.get("cost", "cross_entropy")),
        )
        return NeuralNet(
            _build_dims(model_cfg, dataset), criterion, optimizer, rng=seed
        )
    raise ConfigurationError(
        f"Unknown model kind {kind!r}; expected 'nnet' or 'logistic'",
        config_key="model.kind",
        actual_value=kind,
    )


def _build_dims(model_cfg: Mapping[str, object], dataset: Dataset) -> list[int]:
    hidden: Sequence[int] = model_cfg.get("hidden", [])  # type: ignore[assignment]
    return [dataset.d_in, *(int(h) for h in hidden), dataset.d_out]


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _log_startup_summary(
    dataset: Dataset,
    model_cfg: Mapping[str, object],
    train_cfg: Mapping[str, object],
    model,
) -> None:
    logger.info("dataset    : %s (%d rows)", dataset.name, dataset.inputs.shape[0])
    logger.info("model      : %s", model_cfg.get("kind", "nnet"))
    if isinstance(model, NeuralNet):
        logger.info("topology   : %s", list(model.topology))
        logger.info("criterion  : %s", model.criterion.name)
        logger.info("parameters : %d", model.parameter_count())
    logger.info(
        "optimizer  : %s lr=%s iters=%s",
        train_cfg.get("optimizer", "gd"),
        train_cfg.get("lr", 0.1),
        train_cfg.get("iters", 100),
    )


__all__ = ["run_pipeline", "load_preset", "presets", "read_config_file", "merge_config"]
