"""Fully-connected sigmoid network assembled from :mod:`icrnet.core` layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Mapping, Sequence, Tuple

import numpy as np

from ..core.activations import resolve_derivative
from ..core.buffers import SampleBuffers
from ..core.neuron import DEFAULT_WEIGHT_RANGE, Layer, build_layers, check_topology
from ..core.propagation import backpropagate_layers, forward, predict
from ..core.random import RandomSource
from ..core.types import Array, ModelDescription


@dataclass
class FeedForwardNetwork:
    """Dense network without biases, trained one sample at a time."""

    layer_dims: Sequence[int]
    seed: int | None = None
    weight_range: Tuple[float, float] = DEFAULT_WEIGHT_RANGE
    derivative: str = "resquash"
    layers: List[Layer] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.layer_dims = [int(d) for d in self.layer_dims]
        if any(d <= 0 for d in self.layer_dims):
            raise ValueError(f"Layer sizes must be positive, got {self.layer_dims}")
        self._derivative_fn = resolve_derivative(self.derivative)
        self.layers = build_layers(self.layer_dims)
        self._buffers = SampleBuffers(self.layer_dims)
        self.reset(self.seed)

    def describe(self) -> ModelDescription:
        return ModelDescription(layer_dims=list(self.layer_dims))

    def reset(self, seed: int | None) -> None:
        """Draw fresh weights; ``None`` seeds from the clock."""

        self.seed = seed
        source = RandomSource(seed)
        low, high = self.weight_range
        # deepest layer first, input layer last
        for layer in reversed(self.layers[:-1]):
            layer.initialize_weights(source, low, high)
        for layer in self.layers:
            layer.values.fill(0.0)
        check_topology(self.layers)

    @property
    def input_layer(self) -> Layer:
        return self.layers[0]

    @property
    def output_layer(self) -> Layer:
        return self.layers[-1]

    def forward(self, inputs: Array) -> Array:
        """Load ``inputs`` into the input layer and return the output activations."""

        self.input_layer.set_values(inputs)
        return forward(self.layers).copy()

    def backward(self, error: Array, learning_rate: float) -> None:
        """Update every weight matrix from the output ``error`` of the last forward pass."""

        error = np.asarray(error, dtype=np.float64).reshape(-1)
        if error.shape[0] != len(self.output_layer):
            raise ValueError(
                f"Error vector has {error.shape[0]} entries, output layer has {len(self.output_layer)}"
            )
        backpropagate_layers(
            self.layers, error, learning_rate, self._buffers, self._derivative_fn
        )

    def predict(self, inputs: Array) -> int:
        self.forward(inputs)
        return predict(self.output_layer)

    @property
    def weights(self) -> List[Array]:
        return [layer.weights for layer in self.layers[:-1]]

    def state_dict(self) -> Mapping[str, Array]:
        return {f"W{idx}": W.copy() for idx, W in enumerate(self.weights)}

    def load_state_dict(self, state: Mapping[str, Array]) -> None:
        for idx, layer in enumerate(self.layers[:-1]):
            key = f"W{idx}"
            if key not in state:
                raise KeyError(f"Missing weight {key} in state dict")
            value = np.asarray(state[key], dtype=np.float64)
            if value.shape != layer.weights.shape:
                raise ValueError(
                    f"Weight {key} has shape {value.shape}, expected {layer.weights.shape}"
                )
            layer.weights[:] = value

    def parameter_count(self) -> int:
        return int(sum(int(w.size) for w in self.weights))


__all__ = ["FeedForwardNetwork"]
