"""Neuron and layer containers backed by numpy storage."""

from __future__ import annotations

from typing import Iterator, List, Sequence

import numpy as np

from .random import RandomSource, default_source
from .types import Array

DEFAULT_WEIGHT_RANGE = (-0.5, 0.5)


class Neuron:
    """One activation value plus the row of weights leaving it.

    A neuron created by :class:`Layer` is a view into the layer's arrays so
    that the layer can run whole-matrix products; a neuron created on its own
    owns its storage.
    """

    __slots__ = ("_cell", "weights")

    def __init__(
        self,
        fan_out: int,
        value: float = 0.0,
        *,
        cell: Array | None = None,
        row: Array | None = None,
    ) -> None:
        if cell is None:
            cell = np.zeros(1, dtype=np.float64)
        if row is None:
            row = np.zeros(fan_out, dtype=np.float64)
        if row.shape != (fan_out,):
            raise ValueError(f"Weight row has shape {row.shape}, expected ({fan_out},)")
        self._cell = cell
        self.weights = row
        self._cell[0] = value

    @property
    def fan_out(self) -> int:
        return int(self.weights.shape[0])

    def get_value(self) -> float:
        return float(self._cell[0])

    def set_value(self, value: float) -> None:
        self._cell[0] = value

    def get_weight(self, index: int) -> float:
        return float(self.weights[index])

    def set_weight(self, index: int, weight: float) -> None:
        self.weights[index] = weight

    def initialize_weights(
        self,
        source: RandomSource | None = None,
        low: float = DEFAULT_WEIGHT_RANGE[0],
        high: float = DEFAULT_WEIGHT_RANGE[1],
    ) -> None:
        """Refill every outgoing weight with a uniform draw in ``[low, high)``."""

        source = source or default_source()
        self.weights[:] = source.uniform_grid(self.fan_out, 1, low, high)[0]

    def __repr__(self) -> str:
        return f"Neuron(fan_out={self.fan_out}, value={self.get_value():.4f})"


class Layer(Sequence[Neuron]):
    """Ordered neurons sharing contiguous value and weight storage."""

    def __init__(self, size: int, fan_out: int) -> None:
        if size <= 0:
            raise ValueError(f"Layer size must be positive, got {size}")
        if fan_out < 0:
            raise ValueError(f"Fan-out must be non-negative, got {fan_out}")
        self.values = np.zeros(size, dtype=np.float64)
        self.weights = np.zeros((size, fan_out), dtype=np.float64)
        self._neurons = [
            Neuron(fan_out, cell=self.values[i : i + 1], row=self.weights[i])
            for i in range(size)
        ]

    @property
    def fan_out(self) -> int:
        return int(self.weights.shape[1])

    def __len__(self) -> int:
        return len(self._neurons)

    def __getitem__(self, index):
        return self._neurons[index]

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self._neurons)

    def set_values(self, values: Array) -> None:
        values = np.asarray(values, dtype=np.float64).reshape(-1)
        if values.shape != self.values.shape:
            raise ValueError(
                f"Layer expects {self.values.shape[0]} values, got {values.shape[0]}"
            )
        self.values[:] = values

    def initialize_weights(
        self,
        source: RandomSource | None = None,
        low: float = DEFAULT_WEIGHT_RANGE[0],
        high: float = DEFAULT_WEIGHT_RANGE[1],
    ) -> None:
        for neuron in self._neurons:
            neuron.initialize_weights(source, low, high)

    def __repr__(self) -> str:
        return f"Layer(size={len(self)}, fan_out={self.fan_out})"


def build_layers(layer_dims: Sequence[int]) -> List[Layer]:
    """Allocate one layer per entry, each wired to the next."""

    dims = [int(d) for d in layer_dims]
    if len(dims) < 2:
        raise ValueError(f"At least two layers are required, got {dims}")
    fan_outs = dims[1:] + [0]
    return [Layer(size, fan_out) for size, fan_out in zip(dims, fan_outs)]


def check_topology(layers: Sequence[Layer]) -> None:
    """Raise if any weight row length differs from the next layer's size."""

    for idx, layer in enumerate(layers):
        expected = len(layers[idx + 1]) if idx + 1 < len(layers) else 0
        for neuron in layer:
            if neuron.fan_out != expected:
                raise ValueError(
                    f"Layer {idx} neuron has {neuron.fan_out} weights, expected {expected}"
                )


__all__ = ["DEFAULT_WEIGHT_RANGE", "Layer", "Neuron", "build_layers", "check_topology"]
