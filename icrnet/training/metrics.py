"""Metric helpers for classification runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np

from ..core.types import Array


@dataclass(frozen=True)
class MetricResult:
    name: str
    value: float


def default_metrics(num_classes: int | None = None) -> List[str]:
    metrics = ["accuracy"]
    if num_classes and num_classes <= 20:
        metrics.append("macro_f1")
    return metrics


def squared_error(error: Array) -> float:
    """Half the summed squared output error of one sample."""

    error = np.asarray(error, dtype=np.float64)
    return float(0.5 * np.sum(error**2))


def confusion_matrix(
    predictions: Sequence[int], labels: Sequence[int], num_classes: int
) -> Array:
    """``[true, predicted]`` counts."""

    matrix = np.zeros((num_classes, num_classes), dtype=np.int64)
    np.add.at(matrix, (np.asarray(labels, dtype=np.int64), np.asarray(predictions, dtype=np.int64)), 1)
    return matrix


def compute_metric(
    name: str,
    predictions: Sequence[int],
    labels: Sequence[int],
    *,
    num_classes: int | None = None,
) -> MetricResult:
    key = name.lower()
    pred_idx = np.asarray(predictions, dtype=np.int64)
    targ_idx = np.asarray(labels, dtype=np.int64)
    if key == "accuracy":
        value = float(np.mean(pred_idx == targ_idx)) if pred_idx.size else 0.0
    elif key == "macro_f1":
        if num_classes is None:
            raise ValueError("macro_f1 requires num_classes")
        f1_scores = []
        for cls in range(num_classes):
            tp = np.sum((pred_idx == cls) & (targ_idx == cls))
            fp = np.sum((pred_idx == cls) & (targ_idx != cls))
            fn = np.sum((pred_idx != cls) & (targ_idx == cls))
            precision = tp / (tp + fp + 1e-9)
            recall = tp / (tp + fn + 1e-9)
            f1 = 2 * precision * recall / (precision + recall + 1e-9)
            f1_scores.append(f1)
        value = float(np.mean(f1_scores))
    else:
        raise KeyError(f"Unknown metric: {name}")
    return MetricResult(name=key, value=value)


def compute_metrics(
    names: Iterable[str],
    predictions: Sequence[int],
    labels: Sequence[int],
    *,
    num_classes: int | None = None,
) -> Mapping[str, float]:
    results: Dict[str, float] = {}
    for name in names:
        metric = compute_metric(name, predictions, labels, num_classes=num_classes)
        results[metric.name] = metric.value
    return results


__all__ = [
    "MetricResult",
    "compute_metrics",
    "confusion_matrix",
    "default_metrics",
    "squared_error",
]
