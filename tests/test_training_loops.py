from __future__ import annotations

from typing import List, Mapping

import numpy as np
import pytest

from icrnet.core.types import Sample
from icrnet.data import get_dataset
from icrnet.training.network import FeedForwardNetwork
from icrnet.training.trainer import Trainer, normalize


class _Capture:
    def __init__(self) -> None:
        self.steps: List[tuple[int, Mapping[str, float]]] = []
        self.epochs: List[tuple[int, Mapping[str, float]]] = []

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        self.steps.append((step, dict(metrics)))

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.epochs.append((epoch, dict(metrics)))


def test_normalize_scales_pixels():
    assert normalize(np.array([0, 255, 51])).tolist() == [0.0, 1.0, 0.2]


def test_single_pass_learns_synthetic_digits():
    spec = get_dataset("synthetic", train_size=2000, test_size=200, side=8, seed=0)
    network = FeedForwardNetwork(layer_dims=[64, 24, 10], seed=0)
    trainer = Trainer(network, learning_rate=0.3)

    before = trainer.evaluate(spec.split("test")).accuracy
    trainer.fit(spec.split("train"))
    after = trainer.evaluate(spec.split("test"))

    assert after.total == 200
    assert after.accuracy > max(before, 0.5)


def test_fit_visits_each_sample_once_and_reports():
    spec = get_dataset("synthetic", train_size=25, test_size=5, seed=1)
    capture = _Capture()
    network = FeedForwardNetwork(layer_dims=[64, 8, 10], seed=1)
    trainer = Trainer(network, learning_rate=0.1, callbacks=[capture], log_every=10)

    metrics = trainer.fit(spec.split("train"))

    assert metrics["samples"] == 25.0
    assert [step for step, _ in capture.steps] == [10, 20, 25]
    assert capture.epochs == [(1, metrics)]
    assert all("loss" in m and "accuracy" in m for _, m in capture.steps)


def test_fit_is_deterministic_for_fixed_seed():
    spec = get_dataset("synthetic", train_size=50, test_size=5, seed=2)
    states = []
    for _ in range(2):
        network = FeedForwardNetwork(layer_dims=[64, 8, 10], seed=4)
        Trainer(network, learning_rate=0.1).fit(spec.split("train"))
        states.append(network.state_dict())
    for key in states[0]:
        assert np.array_equal(states[0][key], states[1][key])


def test_label_out_of_range_is_rejected():
    network = FeedForwardNetwork(layer_dims=[4, 3, 2], seed=0)
    trainer = Trainer(network, learning_rate=0.1)
    with pytest.raises(ValueError, match="Label 2"):
        trainer.train_sample(Sample(pixels=np.zeros(4, dtype=np.int64), label=2))


def test_evaluate_counts_predictions():
    network = FeedForwardNetwork(layer_dims=[4, 3, 2], seed=0)
    trainer = Trainer(network, learning_rate=0.1)
    samples = [Sample(pixels=np.full(4, v, dtype=np.int64), label=v % 2) for v in range(6)]
    result = trainer.evaluate(samples)
    assert result.total == 6
    assert len(result.predictions) == 6
    assert result.correct == sum(p == s.label for p, s in zip(result.predictions, samples))
