"""Core numerical primitives for icrnet."""

from . import activations, buffers, neuron, propagation, random, types

__all__ = ["activations", "buffers", "neuron", "propagation", "random", "types"]
