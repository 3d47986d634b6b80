"""icrnet public API."""

from .core import activations, neuron, propagation, random, types  # noqa: F401
from .core.neuron import Layer, Neuron
from .core.propagation import backpropagate, propagate
from .data import get_dataset
from .training.network import FeedForwardNetwork
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import Trainer

__version__ = "0.1.0"

__all__ = [
    "FeedForwardNetwork",
    "Layer",
    "Neuron",
    "Trainer",
    "activations",
    "backpropagate",
    "get_dataset",
    "load_preset",
    "neuron",
    "presets",
    "propagate",
    "random",
    "run_pipeline",
    "types",
]
