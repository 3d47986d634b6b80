"""Forward and backward passes over fully-connected sigmoid layers."""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from .activations import argmax_first, one_hot, resquash_deriv, sigmoid
from .buffers import SampleBuffers
from .neuron import Layer
from .types import Array


def propagate(upstream: Layer, downstream: Layer) -> None:
    """Set every downstream activation to ``sigmoid(sum_i w_ij * a_i)``."""

    raw = upstream.values @ upstream.weights
    downstream.values[:] = sigmoid(raw)


def forward(layers: Sequence[Layer]) -> Array:
    """Propagate through every adjacent pair; return the output activations."""

    for upstream, downstream in zip(layers[:-1], layers[1:]):
        propagate(upstream, downstream)
    return layers[-1].values


def output_error(output: Layer, target: int) -> Array:
    """One-hot ``target`` minus the current output activations."""

    return one_hot(target, len(output)) - output.values


def predict(output: Layer) -> int:
    return argmax_first(output.values)


def backpropagate(
    input_layer: Layer,
    hidden: Layer,
    output: Layer,
    error: Array,
    learning_rate: float,
) -> None:
    """Apply one gradient-descent step to a three-layer network.

    The hidden deltas use :func:`resquash_deriv`, i.e. the sigmoid is applied
    to the stored (already squashed) hidden activation before computing
    ``s * (1 - s)``.
    """

    error = np.asarray(error, dtype=np.float64)
    # both products read the hidden->output weights before they change
    grad_ho = learning_rate * np.outer(hidden.values, error)
    pulled_back = hidden.weights @ error
    delta = pulled_back * resquash_deriv(hidden.values)

    input_layer.weights += learning_rate * np.outer(input_layer.values, delta)
    hidden.weights += grad_ho


def backpropagate_layers(
    layers: Sequence[Layer],
    error: Array,
    learning_rate: float,
    buffers: SampleBuffers,
    derivative: Callable[[Array], Array] = resquash_deriv,
) -> None:
    """Generalised :func:`backpropagate` for any number of layers.

    The output delta is the raw error.  Each hidden layer's delta is the
    downstream delta pulled back through the pre-update weights, times
    ``derivative`` of its activations.  Weights are only written once every
    delta is known.
    """

    last = len(layers) - 1
    with buffers.scope() as scratch:
        out_delta = scratch.delta(last - 1, len(layers[last]))
        out_delta[:] = error
        for idx in range(last - 1, 0, -1):
            layer = layers[idx]
            downstream_delta = scratch.deltas[idx]
            delta = scratch.delta(idx - 1, len(layer))
            np.matmul(layer.weights, downstream_delta, out=delta)
            delta *= derivative(layer.values)
        for idx in range(last):
            layer = layers[idx]
            grad = scratch.gradient(idx, len(layer), len(layers[idx + 1]))
            np.outer(layer.values, scratch.deltas[idx], out=grad)
            grad *= learning_rate
        for idx in range(last):
            layers[idx].weights += scratch.gradients[idx]


__all__ = [
    "backpropagate",
    "backpropagate_layers",
    "forward",
    "output_error",
    "predict",
    "propagate",
]
