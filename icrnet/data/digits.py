"""Handwritten digit images stored as numbered PNG files."""

from __future__ import annotations

from pathlib import Path

import matplotlib.image as mpimg
import numpy as np

from ..core.types import Array
from .registry import DataSpec, DatasetSpec, SampleSplit, register_dataset
from .utils import ArrayLabels, check_pixel_range, invert, read_ground_truth, to_grayscale_bytes

DEFAULT_PREFIX = "digit_"
INDEX_WIDTH = 4


def image_path(directory: Path, index: int, prefix: str = DEFAULT_PREFIX) -> Path:
    return directory / f"{prefix}{index:0{INDEX_WIDTH}d}.png"


def load_png(path: str | Path) -> Array:
    """Decode ``path`` into a 2-D ``uint8`` grayscale array."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Image not found: {path}")
    return to_grayscale_bytes(mpimg.imread(str(path)))


class PngDigitPixels:
    """Pixel provider decoding ``digit_NNNN.png`` files on demand.

    Nothing is cached between calls, so memory stays flat regardless of the
    number of samples.
    """

    def __init__(
        self,
        directory: str | Path,
        count: int,
        *,
        prefix: str = DEFAULT_PREFIX,
        inverted: bool = True,
    ) -> None:
        self.directory = Path(directory)
        self.count = int(count)
        self.prefix = prefix
        self.inverted = inverted

    def pixels(self, index: int) -> Array:
        if not 0 <= index < self.count:
            raise IndexError(f"Sample index {index} out of range for {self.count} images")
        image = load_png(image_path(self.directory, index, self.prefix)).reshape(-1)
        pixels = invert(image) if self.inverted else image.astype(np.int64)
        check_pixel_range(pixels)
        return pixels

    def __len__(self) -> int:
        return self.count


def count_images(directory: Path, prefix: str = DEFAULT_PREFIX) -> int:
    """Number of consecutively numbered images starting at index 0."""

    count = 0
    while image_path(directory, count, prefix).exists():
        count += 1
    return count


@register_dataset("digits")
def build_digits(
    *,
    root: str | Path,
    train_size: int | None = None,
    test_size: int | None = None,
    prefix: str = DEFAULT_PREFIX,
    inverted: bool = True,
    num_classes: int = 10,
) -> DatasetSpec:
    """Create a :class:`DatasetSpec` for a ``train/`` + ``test/`` PNG layout.

    Ground truth lives next to the image folders in ``train_gt.txt`` and
    ``test_gt.txt``.  When a size is given only the first ``size`` images and
    labels of that split are used.
    """

    root = Path(root)
    if not root.is_dir():
        raise FileNotFoundError(f"Digit dataset root not found: {root}")

    requested = {"train": train_size, "test": test_size}
    splits: dict[str, SampleSplit] = {}
    for split, size in requested.items():
        labels = read_ground_truth(root / f"{split}_gt.txt")
        count = int(size) if size is not None else count_images(root / split, prefix)
        if size is not None:
            labels = labels[:count]
        pixels = PngDigitPixels(root / split, count, prefix=prefix, inverted=inverted)
        splits[split] = SampleSplit(
            pixels=pixels, labels=ArrayLabels(labels), num_classes=int(num_classes)
        )

    if len(splits["train"]) == 0:
        raise ValueError(f"No training images found under {root / 'train'}")
    first = splits["train"].pixels.pixels(0)

    def loader(split: str) -> SampleSplit:
        return splits[split]

    data_spec = DataSpec(
        d_in=int(first.shape[0]),
        num_classes=int(num_classes),
        normalization={"inputs": {"method": "divide", "scale": 255.0, "inverted": inverted}},
    )
    provenance = {
        "type": "png",
        "root": str(root),
        "prefix": prefix,
        "inverted": inverted,
    }
    return DatasetSpec(
        name="digits",
        loader=loader,
        data_spec=data_spec,
        provenance=provenance,
        splits={name: len(value) for name, value in splits.items()},
    )


__all__ = ["PngDigitPixels", "build_digits", "count_images", "image_path", "load_png"]
