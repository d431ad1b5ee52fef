import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_basic_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "blobs-logistic", "--log-level", "WARNING"])
    run_dir = Path("runs/blobs-logistic")
    assert (run_dir / "metrics.jsonl").exists()
    assert (run_dir / "manifest.json").exists()
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["steps"] == 200
    assert "run_id" in payload


def test_cli_config_override_and_dump(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.yaml"
    override.write_text("train:\n  iters: 5\n  lr: 0.5\n")
    dump = tmp_path / "resolved.json"
    main(
        [
            "--preset",
            "xor-gd",
            "--config",
            str(override),
            "--seed",
            "9",
            "--run-dir",
            str(tmp_path / "out"),
            "--dump-config",
            str(dump),
        ]
    )
    resolved = json.loads(dump.read_text())
    assert resolved["train"]["iters"] == 5
    assert resolved["train"]["seed"] == 9
    assert resolved["model"]["hidden"] == [4]
    lines = (tmp_path / "out" / "metrics.jsonl").read_text().splitlines()
    assert len(lines) == 5


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert {"xor-gd", "blobs-sgd", "blobs-logistic", "line-mse"} <= set(names)
