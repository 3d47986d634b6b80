"""Deterministic run summarisation helpers."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Mapping

import numpy as np

_SKIP = {"step", "epoch", "seed", "split", "sha"}


def _trapezoid(y: np.ndarray) -> float:
    trapezoid = getattr(np, "trapezoid", None)
    if callable(trapezoid):
        return float(trapezoid(y))
    return float(np.trapz(y))


def error_auc(points: List[float]) -> float:
    """Trapezoidal area under a metric curve with unit spacing."""

    if len(points) < 2:
        return 0.0
    return _trapezoid(np.asarray(points, dtype=np.float64))


def read_records(path: str | Path) -> List[Mapping[str, object]]:
    path = Path(path)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text().splitlines() if line.strip()]


def summarize(records: List[Mapping[str, object]], tail: int) -> Mapping[str, object]:
    """Per-metric min/max/mean/last plus the tail area of step records."""

    steps = [r for r in records if "step" in r]
    series: Dict[str, List[float]] = {}
    for record in steps:
        for key, value in record.items():
            if key not in _SKIP and isinstance(value, (int, float)):
                series.setdefault(key, []).append(float(value))

    tail_window = min(tail, len(steps))
    metrics = {}
    for name, values in series.items():
        arr = np.asarray(values)
        metrics[name] = {
            "min": float(arr.min()),
            "max": float(arr.max()),
            "mean": float(arr.mean()),
            "last": float(arr[-1]),
            "tail_auc": error_auc(values[-tail_window:]) if tail_window else 0.0,
        }
    final = next((r for r in reversed(records) if "epoch" in r), {})
    return {
        "version": 1,
        "records": len(steps),
        "tail_window": tail_window,
        "metrics": metrics,
        "final": {k: v for k, v in final.items() if k not in _SKIP},
    }


def write_summary(metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32) -> str:
    """Write a deterministic summary of ``metrics_jsonl``."""

    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    summary = summarize(read_records(metrics_jsonl), tail)
    out_path.write_text(json.dumps(summary, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["error_auc", "read_records", "summarize", "write_summary"]
