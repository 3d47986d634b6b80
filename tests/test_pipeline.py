import json
from pathlib import Path

import numpy as np
import pytest

from icrnet.training import pipelines


def _config(run_dir, **train):
    config = pipelines.load_preset("synthetic-min")
    config["data"]["options"].update({"train_size": 200, "test_size": 40})
    config["train"].update({"run_dir": str(run_dir), "log_every": 50, **train})
    return config


def test_pipeline_produces_artifacts(tmp_path, capsys):
    config = _config(tmp_path / "run")
    result = pipelines.run_pipeline(config)

    out = capsys.readouterr().out
    assert "poz:" in out and "average:" in out
    assert result.samples == 200
    assert 0.0 <= result.accuracy <= 1.0

    run_dir = tmp_path / "run"
    records = [json.loads(line) for line in Path(result.metrics_path).read_text().splitlines()]
    steps = [r for r in records if "step" in r]
    assert [r["step"] for r in steps] == [50, 100, 150, 200]
    assert records[-1]["epoch"] == 1
    assert all(r["split"] == "train" and "sha" in r for r in records)

    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["config"]["model"]["layer_dims"] == [64, 16, 10]
    assert manifest["dataset"]["type"] == "synthetic"
    assert manifest["results"]["accuracy"] == result.accuracy

    summary = json.loads(Path(result.summary_path).read_text())
    assert summary["records"] == 4
    assert "loss" in summary["metrics"]

    confusion = json.loads((run_dir / "confusion.json").read_text())
    assert sum(map(sum, confusion)) == 40
    assert (run_dir / "metrics_train.csv").exists()
    assert (run_dir / "metrics_test.jsonl").exists()
    assert not list(run_dir.glob("*.ckpt"))


def test_pipeline_determinism(tmp_path):
    first = pipelines.run_pipeline(_config(tmp_path / "a"), echo=False)
    second = pipelines.run_pipeline(_config(tmp_path / "b"), echo=False)

    def _strip(path):
        return [
            {k: v for k, v in json.loads(line).items() if k != "sha"}
            for line in Path(path).read_text().splitlines()
        ]

    assert _strip(first.metrics_path) == _strip(second.metrics_path)
    assert first.accuracy == second.accuracy


def test_plots_written_when_enabled(tmp_path):
    result = pipelines.run_pipeline(_config(tmp_path / "run", enable_plots=True), echo=False)
    assert (tmp_path / "run" / "error.png").exists()
    manifest = json.loads(Path(result.manifest_path).read_text())
    assert manifest["results"]["plot"] == "error.png"


def test_presets_include_file_presets():
    names = set(pipelines.presets())
    assert {"digits-784-60-10", "synthetic-min", "synthetic-deep"} <= names
    assert "digits-textbook-derivative" in names


def test_merge_config_is_recursive():
    base = {"train": {"lr": 0.1, "seed": 1}, "model": {"hidden": [60]}}
    merged = pipelines.merge_config(base, {"train": {"lr": 0.5}})
    assert merged == {"train": {"lr": 0.5, "seed": 1}, "model": {"hidden": [60]}}


def test_pipeline_rejects_bad_labels_before_writing(tmp_path):
    archive = tmp_path / "bad.npz"
    np.savez(
        archive,
        X_train=np.zeros((4, 2, 2), dtype=np.uint8),
        y_train=np.array([0, 1, 2, 3]),
        X_test=np.zeros((2, 2, 2), dtype=np.uint8),
        y_test=np.array([0, 10]),
    )
    config = {
        "data": {"name": "npz", "options": {"path": str(archive)}},
        "model": {"hidden": [3]},
        "train": {"run_dir": str(tmp_path / "run"), "seed": 1},
    }
    with pytest.raises(ValueError, match="Label 10"):
        pipelines.run_pipeline(config, echo=False)
    assert not (tmp_path / "run").exists()
