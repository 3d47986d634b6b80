"""Deterministic offline digit-like fixture."""

from __future__ import annotations

import numpy as np

from ..core.types import Array
from .registry import DataSpec, DatasetSpec, SampleSplit, register_dataset
from .utils import PIXEL_MAX, ArrayLabels, ArrayPixels


def _prototypes(num_classes: int, side: int, rng: np.random.Generator) -> Array:
    """One random bright-pixel mask per class on a dark ``side x side`` canvas."""

    masks = rng.random((num_classes, side, side)) < 0.3
    return masks.astype(np.float64) * PIXEL_MAX


def make_samples(
    n: int, *, num_classes: int, side: int, noise: float, seed: int
) -> tuple[Array, Array]:
    rng = np.random.default_rng(seed)
    protos = _prototypes(num_classes, side, np.random.default_rng(12345 + num_classes * side))
    labels = rng.integers(0, num_classes, size=n)
    images = protos[labels] + rng.normal(0.0, noise * PIXEL_MAX, size=(n, side, side))
    images = np.clip(np.rint(images), 0, PIXEL_MAX).astype(np.int64)
    return images.reshape(n, side * side), labels.astype(np.int64)


@register_dataset("synthetic")
def build_synthetic(
    *,
    train_size: int = 256,
    test_size: int = 64,
    num_classes: int = 10,
    side: int = 8,
    noise: float = 0.1,
    seed: int = 0,
) -> DatasetSpec:
    """Create a small learnable dataset that needs no files."""

    splits: dict[str, SampleSplit] = {}
    for offset, (split, size) in enumerate((("train", train_size), ("test", test_size))):
        images, labels = make_samples(
            int(size), num_classes=num_classes, side=side, noise=noise, seed=seed + offset
        )
        splits[split] = SampleSplit(
            pixels=ArrayPixels(images), labels=ArrayLabels(labels), num_classes=int(num_classes)
        )

    def loader(split: str) -> SampleSplit:
        return splits[split]

    provenance = {
        "type": "synthetic",
        "seed": seed,
        "side": side,
        "noise": noise,
    }
    return DatasetSpec(
        name="synthetic",
        loader=loader,
        data_spec=DataSpec(
            d_in=side * side,
            num_classes=int(num_classes),
            normalization={"inputs": {"method": "divide", "scale": 255.0}},
            extra={"input_shape": (side, side)},
        ),
        provenance=provenance,
        splits={name: len(value) for name, value in splits.items()},
    )


__all__ = ["build_synthetic", "make_samples"]
