"""Online gradient-descent training and inference loops."""

from __future__ import annotations

from typing import Iterable, List, Mapping, Sequence

import numpy as np

from ..core.activations import argmax_first
from ..core.propagation import output_error
from ..core.types import Array, EvaluationResult, Sample
from ..data.utils import PIXEL_MAX
from .metrics import squared_error
from .network import FeedForwardNetwork


def normalize(pixels: Array) -> Array:
    """Scale ``[0, 255]`` integers to ``[0, 1]`` reals."""

    return np.asarray(pixels, dtype=np.float64) / PIXEL_MAX


class Trainer:
    """Run one pass of per-sample gradient descent, then score a test split.

    Callbacks receive ``on_step(step, metrics)`` every ``log_every`` training
    samples and ``on_epoch(1, metrics)`` once the pass is complete.
    """

    def __init__(
        self,
        network: FeedForwardNetwork,
        learning_rate: float,
        callbacks: Sequence[object] | None = None,
        *,
        log_every: int = 100,
    ) -> None:
        self.network = network
        self.learning_rate = float(learning_rate)
        self.callbacks = list(callbacks or [])
        self.log_every = max(1, int(log_every))

    def train_sample(self, sample: Sample) -> tuple[float, bool]:
        """Forward, error, backward for one sample.

        Returns the sample's squared error and whether the prediction made
        before the update was correct.
        """

        num_classes = len(self.network.output_layer)
        if not 0 <= sample.label < num_classes:
            raise ValueError(f"Label {sample.label} outside [0, {num_classes})")
        outputs = self.network.forward(normalize(sample.pixels))
        error = output_error(self.network.output_layer, sample.label)
        hit = argmax_first(outputs) == sample.label
        self.network.backward(error, self.learning_rate)
        return squared_error(error), hit

    def fit(self, samples: Iterable[Sample]) -> Mapping[str, float]:
        """Visit every sample exactly once, in order."""

        window: List[float] = []
        losses: List[float] = []
        hits = 0
        step = 0
        for step, sample in enumerate(samples, start=1):
            loss, hit = self.train_sample(sample)
            window.append(loss)
            losses.append(loss)
            hits += int(hit)
            if step % self.log_every == 0:
                self._emit("on_step", step, {"loss": float(np.mean(window)), "accuracy": hits / step})
                window = []
        metrics = {
            "loss": float(np.mean(losses)) if losses else 0.0,
            "accuracy": hits / step if step else 0.0,
            "samples": float(step),
        }
        if window:
            self._emit("on_step", step, {"loss": float(np.mean(window)), "accuracy": hits / step})
        self._emit("on_epoch", 1, metrics)
        return metrics

    def evaluate(self, samples: Iterable[Sample]) -> EvaluationResult:
        result = EvaluationResult()
        for sample in samples:
            prediction = self.network.predict(normalize(sample.pixels))
            result.predictions.append(prediction)
            if prediction == sample.label:
                result.correct += 1
            else:
                result.incorrect += 1
        return result

    def _emit(self, hook: str, step: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            method = getattr(callback, hook, None)
            if method is not None:
                method(step, metrics)
            elif hook == "on_step" and callable(callback):
                callback(step, metrics)


__all__ = ["Trainer", "normalize"]
