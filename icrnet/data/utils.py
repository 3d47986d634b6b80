"""Utility helpers for dataset loaders."""

from __future__ import annotations

from pathlib import Path
from typing import List

import numpy as np

from ..core.types import Array

PIXEL_MAX = 255

# ITU-R BT.601 luma weights, as used by OpenCV's grayscale conversion
_LUMA = np.array([0.299, 0.587, 0.114])


class ArrayPixels:
    """In-memory pixel provider over a ``[n, d]`` integer array."""

    def __init__(self, images: Array) -> None:
        images = np.asarray(images)
        if not np.issubdtype(images.dtype, np.integer):
            raise ValueError(f"Pixel arrays must have an integer dtype, got {images.dtype}")
        width = int(np.prod(images.shape[1:]))
        self.images = images.reshape(images.shape[0], width).astype(np.int64)

    def pixels(self, index: int) -> Array:
        return self.images[index]

    def __len__(self) -> int:
        return int(self.images.shape[0])


class ArrayLabels:
    """In-memory label provider."""

    def __init__(self, labels) -> None:
        self.labels = np.asarray(labels, dtype=np.int64).reshape(-1)

    def label(self, index: int) -> int:
        return int(self.labels[index])

    def __len__(self) -> int:
        return int(self.labels.shape[0])


def read_ground_truth(path: str | Path) -> List[int]:
    """Read whitespace separated integer labels from a text file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Ground truth file not found: {path}")
    tokens = path.read_text().split()
    try:
        return [int(tok) for tok in tokens]
    except ValueError as exc:
        raise ValueError(f"Malformed label in {path}: {exc}") from exc


def to_grayscale_bytes(image: Array) -> Array:
    """Convert a decoded image to a 2-D ``uint8`` grayscale array.

    matplotlib returns PNG data as floats in ``[0, 1]`` and other formats as
    integers; colour images are reduced with luma weights and any alpha
    channel is dropped.
    """

    image = np.asarray(image)
    if np.issubdtype(image.dtype, np.floating):
        image = image * PIXEL_MAX
    image = image.astype(np.float64)
    if image.ndim == 3:
        image = image[..., :3] @ _LUMA if image.shape[-1] >= 3 else image[..., 0]
    return np.clip(np.rint(image), 0, PIXEL_MAX).astype(np.uint8)


def invert(pixels: Array) -> Array:
    """Map dark-on-light images to light-on-dark, ``|p - 255|``."""

    return np.abs(np.asarray(pixels, dtype=np.int64) - PIXEL_MAX)


def check_pixel_range(pixels: Array) -> None:
    if pixels.size and (pixels.min() < 0 or pixels.max() > PIXEL_MAX):
        raise ValueError(
            f"Pixel values must lie in [0, {PIXEL_MAX}], got [{pixels.min()}, {pixels.max()}]"
        )


__all__ = [
    "ArrayLabels",
    "ArrayPixels",
    "PIXEL_MAX",
    "check_pixel_range",
    "invert",
    "read_ground_truth",
    "to_grayscale_bytes",
]
