"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Iterator, MutableMapping, Optional

from ..core.types import LabelProvider, PixelProvider, Sample

SPLITS = ("train", "test")


@dataclass(frozen=True)
class DataSpec:
    """Structural information about a dataset.

    Attributes
    ----------
    d_in:
        Number of pixels in one flattened image.
    num_classes:
        Number of distinct labels; the output layer has one neuron per class.
    normalization:
        Metadata describing how raw pixels relate to the ``[0, 255]`` scale
        expected by the trainer.
    extra:
        Free-form metadata, for example the original image shape.
    """

    d_in: int
    num_classes: int
    normalization: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SampleSplit:
    """Paired pixel and label providers for one split.

    Constructing a split checks that both providers describe the same number
    of samples and, when ``num_classes`` is given, that every label lies in
    ``[0, num_classes)``.  The trainer relies on both and does not check again.
    """

    pixels: PixelProvider
    labels: LabelProvider
    num_classes: Optional[int] = None

    def __post_init__(self) -> None:
        if len(self.pixels) != len(self.labels):
            raise ValueError(
                f"Sample count mismatch: {len(self.pixels)} images but {len(self.labels)} labels"
            )
        if self.num_classes is not None:
            for index in range(len(self.labels)):
                label = int(self.labels.label(index))
                if not 0 <= label < self.num_classes:
                    raise ValueError(
                        f"Label {label} at index {index} outside [0, {self.num_classes})"
                    )

    def __len__(self) -> int:
        return len(self.pixels)

    def __getitem__(self, index: int) -> Sample:
        return Sample(pixels=self.pixels.pixels(index), label=int(self.labels.label(index)))

    def __iter__(self) -> Iterator[Sample]:
        for index in range(len(self)):
            yield self[index]


@dataclass(frozen=True)
class DatasetSpec:
    """Description of a dataset registered in the system."""

    name: str
    loader: Callable[[str], SampleSplit]
    data_spec: DataSpec
    provenance: Dict[str, Any]
    splits: Dict[str, int]

    def split(self, name: str) -> SampleSplit:
        """Return the :class:`SampleSplit` called ``name``."""

        if name not in SPLITS:
            raise ValueError(f"Unknown split: {name}")
        return self.loader(name)


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str | None = None,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | None:
    """Register a dataset factory.

    ``register_dataset`` can be used both as a decorator::

        @register_dataset("digits")
        def make_digits(**kwargs):
            ...

    or directly::

        register_dataset("digits", make_digits)
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[str(name or func.__name__)] = func
        return func

    if factory is not None:
        return _decorator(factory)
    if name is None:
        raise TypeError("register_dataset requires a name when used without a decorator")
    return _decorator


def get_dataset(dataset: str | None = None, /, **options: Any) -> DatasetSpec:
    """Return the :class:`DatasetSpec` for ``dataset``."""

    if dataset is None:
        if "name" in options:
            dataset = str(options.pop("name"))
        else:
            raise TypeError("Dataset name must be provided")

    if dataset not in _REGISTRY:
        raise KeyError(f"Unknown dataset: {dataset}")

    spec = _REGISTRY[dataset](**options)
    _validate_spec(spec)
    return spec


def available_datasets() -> Iterable[str]:
    """Return the sorted list of available dataset identifiers."""

    return sorted(_REGISTRY)


def _validate_spec(spec: DatasetSpec) -> None:
    if spec.data_spec.num_classes < 1:
        raise ValueError(f"Dataset {spec.name!r} must define at least one class")
    if spec.data_spec.d_in < 1:
        raise ValueError(f"Dataset {spec.name!r} has no input features")
    if not isinstance(spec.splits, dict):
        raise TypeError("DatasetSpec.splits must be a mapping")
    for split, count in spec.splits.items():
        if count < 0:
            raise ValueError(f"Split {split!r} has negative sample count {count}")


__all__ = [
    "DataSpec",
    "DatasetSpec",
    "SampleSplit",
    "available_datasets",
    "get_dataset",
    "register_dataset",
]
