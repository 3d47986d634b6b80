import csv
import json

import pytest

from icrnet.reporting import CsvSink, JsonlSink, PlotAdapter, Timer, write_manifest, write_summary
from icrnet.reporting.summary import error_auc


def test_jsonl_and_csv_sinks(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", split="train", seed=3, sha="abc")
    jsonl.on_step(10, {"loss": 0.5, "accuracy": 0.25})
    jsonl.on_epoch(1, {"loss": 0.4, "note": "ignored"})
    records = [json.loads(line) for line in (tmp_path / "m.jsonl").read_text().splitlines()]
    assert records[0] == {"step": 10, "split": "train", "seed": 3, "sha": "abc", "loss": 0.5, "accuracy": 0.25}
    assert records[1]["epoch"] == 1 and "note" not in records[1]

    sink = CsvSink(tmp_path / "m.csv")
    sink.on_step(1, {"loss": 1.0})
    sink.on_step(2, {"loss": 0.5})
    with (tmp_path / "m.csv").open() as handle:
        rows = list(csv.DictReader(handle))
    assert [row["step"] for row in rows] == ["1", "2"]


def test_summary_and_manifest(tmp_path):
    jsonl = JsonlSink(tmp_path / "m.jsonl", sha="abc")
    for step, loss in enumerate([1.0, 0.5, 0.25], start=1):
        jsonl.on_step(step, {"loss": loss})
    jsonl.on_epoch(1, {"loss": 0.58, "accuracy": 0.9})
    summary = json.loads(open(write_summary(jsonl.path, tmp_path / "s.json", tail=2)).read())
    assert summary["records"] == 3
    assert summary["metrics"]["loss"]["min"] == 0.25
    assert summary["metrics"]["loss"]["tail_auc"] == pytest.approx(0.375)
    assert summary["final"] == {"loss": 0.58, "accuracy": 0.9}

    manifest = json.loads(
        open(write_manifest(tmp_path / "x" / "manifest.json", config={"a": 1}, dataset_provenance={"type": "t"})).read()
    )
    assert manifest["config"] == {"a": 1}
    assert manifest["dataset"] == {"type": "t"}
    assert "git_sha" in manifest


def test_error_auc():
    assert error_auc([]) == 0.0
    assert error_auc([3.0]) == 0.0
    assert error_auc([1.0, 1.0, 1.0]) == 2.0
    assert error_auc([0.0, 1.0, 0.0, 2.0]) == pytest.approx(2.0)


def test_plot_adapter_headless(tmp_path):
    adapter = PlotAdapter(tmp_path / "plots", enable_plots=True, filename="curve.png")
    adapter.on_step(50, {"loss": 1.0, "accuracy": 0.2})
    adapter.on_step(100, {"loss": 0.5, "accuracy": 0.4})
    adapter(120, {"loss": 0.4})
    assert adapter.samples == [50, 100, 120]
    assert adapter.accuracies == [0.2, 0.4, None]
    path = adapter.close()
    assert path == tmp_path / "plots" / "curve.png"
    assert path.exists() and path.stat().st_size > 0


def test_plot_adapter_disabled_records_nothing(tmp_path):
    adapter = PlotAdapter(tmp_path / "off")
    adapter.on_step(1, {"loss": 1.0, "accuracy": 1.0})
    assert adapter.samples == []
    assert adapter.close() is None
    assert not (tmp_path / "off").exists()
    assert PlotAdapter(tmp_path, enable_plots=True).close() is None


def test_timer(capsys):
    timer = Timer()
    with timer.measure("Training..."):
        pass
    assert timer.elapsed >= 0.0
    assert "Training... Done" in capsys.readouterr().out
    with pytest.raises(RuntimeError):
        Timer(echo=False).stop()
