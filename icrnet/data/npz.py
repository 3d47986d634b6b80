"""Local ``.npz`` archives with ``X_train/y_train/X_test/y_test`` arrays."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from .registry import DataSpec, DatasetSpec, SampleSplit, register_dataset
from .utils import ArrayLabels, ArrayPixels, check_pixel_range

_KEYS = {"train": ("X_train", "y_train"), "test": ("X_test", "y_test")}


@register_dataset("npz")
def build_npz(
    *,
    path: str | Path,
    train_size: int | None = None,
    test_size: int | None = None,
    num_classes: int = 10,
) -> DatasetSpec:
    """Create a :class:`DatasetSpec` from an archive on disk."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Archive not found: {path}")
    limits = {"train": train_size, "test": test_size}
    splits: dict[str, SampleSplit] = {}
    shape = None
    with np.load(path) as data:
        for split, (x_key, y_key) in _KEYS.items():
            if x_key not in data.files or y_key not in data.files:
                raise KeyError(f"Archive {path.name} is missing {x_key!r} or {y_key!r}")
            images = np.asarray(data[x_key])
            if not np.issubdtype(images.dtype, np.integer):
                raise ValueError(
                    f"Archive {path.name} key {x_key!r} must hold integer pixels in [0, 255], got {images.dtype}"
                )
            labels = np.asarray(data[y_key])
            limit = limits[split]
            if limit is not None:
                images, labels = images[:limit], labels[:limit]
            if split == "train":
                shape = images.shape[1:]
            pixels = ArrayPixels(images)
            check_pixel_range(pixels.images)
            splits[split] = SampleSplit(
                pixels=pixels, labels=ArrayLabels(labels), num_classes=int(num_classes)
            )

    def loader(split: str) -> SampleSplit:
        return splits[split]

    return DatasetSpec(
        name="npz",
        loader=loader,
        data_spec=DataSpec(
            d_in=int(np.prod(shape)),
            num_classes=int(num_classes),
            normalization={"inputs": {"method": "divide", "scale": 255.0}},
            extra={"input_shape": tuple(int(s) for s in shape)},
        ),
        provenance={"type": "npz", "path": str(path)},
        splits={name: len(value) for name, value in splits.items()},
    )


__all__ = ["build_npz"]
