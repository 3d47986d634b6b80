"""Dataset registry and sample providers."""

# Ensure built-in datasets register themselves when the package is imported.
from . import digits as _digits  # noqa: F401
from . import npz as _npz  # noqa: F401
from . import synthetic as _synthetic  # noqa: F401
from .registry import (
    DatasetSpec,
    DataSpec,
    SampleSplit,
    available_datasets,
    get_dataset,
    register_dataset,
)

__all__ = [
    "DataSpec",
    "DatasetSpec",
    "SampleSplit",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
