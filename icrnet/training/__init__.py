"""Network, training loop and run pipeline."""

from .network import FeedForwardNetwork
from .pipelines import load_preset, presets, run_pipeline
from .trainer import Trainer

__all__ = ["FeedForwardNetwork", "Trainer", "load_preset", "presets", "run_pipeline"]
