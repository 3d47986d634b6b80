"""Core typing contracts for icrnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Protocol

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Sample:
    """A single flattened image and its class label."""

    pixels: Array
    label: int


@dataclass(frozen=True)
class ModelDescription:
    """Description of the feed-forward network architecture."""

    layer_dims: List[int]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`icrnet.training.pipelines.run_pipeline`."""

    samples: int
    accuracy: float
    metrics_path: str
    manifest_path: str
    summary_path: str = ""


@dataclass
class EvaluationResult:
    """Outcome of running inference over a labelled split."""

    correct: int = 0
    incorrect: int = 0
    predictions: List[int] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    def as_metrics(self) -> Dict[str, float]:
        return {
            "correct": float(self.correct),
            "incorrect": float(self.incorrect),
            "accuracy": float(self.accuracy),
        }


class PixelProvider(Protocol):
    """Returns flattened grayscale images as integers in ``[0, 255]``."""

    def pixels(self, index: int) -> Array:
        """Return the image at ``index``."""

    def __len__(self) -> int:
        """Number of images available."""


class LabelProvider(Protocol):
    """Returns integer class labels."""

    def label(self, index: int) -> int:
        """Return the label of sample ``index``."""

    def __len__(self) -> int:
        """Number of labels available."""
