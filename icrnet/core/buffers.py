"""Reusable per-sample scratch space for the backward pass."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Sequence

import numpy as np

from .types import Array


class SampleBuffers:
    """Delta and gradient buffers sized to a fixed topology.

    ``deltas[i]`` has the size of layer ``i + 1`` and ``gradients[i]`` the
    shape of the weight matrix between layers ``i`` and ``i + 1``.  Buffers
    are allocated once and cleared when a :meth:`scope` exits.
    """

    def __init__(self, layer_dims: Sequence[int]) -> None:
        dims = [int(d) for d in layer_dims]
        self.layer_dims = dims
        self.deltas: List[Array] = [np.zeros(d, dtype=np.float64) for d in dims[1:]]
        self.gradients: List[Array] = [
            np.zeros((a, b), dtype=np.float64) for a, b in zip(dims[:-1], dims[1:])
        ]
        self._active = False

    def delta(self, index: int, size: int) -> Array:
        buf = self.deltas[index]
        if buf.shape != (size,):
            raise ValueError(f"Delta buffer {index} has shape {buf.shape}, requested ({size},)")
        return buf

    def gradient(self, index: int, rows: int, cols: int) -> Array:
        buf = self.gradients[index]
        if buf.shape != (rows, cols):
            raise ValueError(
                f"Gradient buffer {index} has shape {buf.shape}, requested ({rows}, {cols})"
            )
        return buf

    def clear(self) -> None:
        for buf in self.deltas:
            buf.fill(0.0)
        for buf in self.gradients:
            buf.fill(0.0)

    @contextmanager
    def scope(self) -> Iterator["SampleBuffers"]:
        """Lend the buffers for one sample; they are zeroed on exit."""

        if self._active:
            raise RuntimeError("SampleBuffers scope is already active")
        self._active = True
        try:
            yield self
        finally:
            self.clear()
            self._active = False


__all__ = ["SampleBuffers"]
