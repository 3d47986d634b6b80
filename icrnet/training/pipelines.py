"""Pipeline assembly: presets, config resolution and the train/test run."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from ..reporting.timer import Timer
from .metrics import compute_metrics, confusion_matrix, default_metrics
from .network import FeedForwardNetwork
from .trainer import Trainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "digits-784-60-10": {
        "data": {
            "name": "digits",
            "options": {"root": "data/digits", "train_size": 4000, "test_size": 2000},
        },
        "model": {
            "hidden": [60],
            "weight_range": [-0.5, 0.5],
            "derivative": "resquash",
        },
        "train": {
            "lr": 0.1,
            "seed": None,
            "log_every": 100,
            "run_dir": "runs/digits-784-60-10",
            "enable_plots": False,
        },
    },
    "synthetic-min": {
        "data": {
            "name": "synthetic",
            "options": {"train_size": 512, "test_size": 128, "side": 8, "seed": 0},
        },
        "model": {
            "hidden": [16],
            "weight_range": [-0.5, 0.5],
            "derivative": "resquash",
        },
        "train": {
            "lr": 0.1,
            "seed": 7,
            "log_every": 32,
            "run_dir": "runs/synthetic-min",
            "enable_plots": False,
        },
    },
    "synthetic-deep": {
        "data": {
            "name": "synthetic",
            "options": {"train_size": 1024, "test_size": 256, "side": 8, "seed": 0},
        },
        "model": {
            "hidden": [32, 16],
            "weight_range": [-0.5, 0.5],
            "derivative": "activation",
        },
        "train": {
            "lr": 0.2,
            "seed": 11,
            "log_every": 64,
            "run_dir": "runs/synthetic-deep",
            "enable_plots": False,
        },
    },
}

_PRESET_DIR = Path(__file__).resolve().parents[2] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


def read_config_file(path: Path) -> Mapping[str, object]:
    """Decode a JSON or YAML config file into a mapping."""

    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = {"data", "model", "train"} - set(data)
                if missing:
                    raise KeyError(
                        f"Preset {file.name} is missing required sections: {', '.join(sorted(missing))}"
                    )
                found[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = found
    return {name: deepcopy(cfg) for name, cfg in _FILE_PRESETS_CACHE.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError:
        raise KeyError(f"Unknown preset: {name}") from None


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    """Recursively merge ``override`` into ``base`` and return ``base``."""

    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_dims(d_in: int, hidden: Sequence[int], num_classes: int) -> List[int]:
    dims = [int(d_in)]
    dims.extend(int(h) for h in hidden)
    dims.append(int(num_classes))
    return dims


def run_pipeline(config: Mapping[str, object], *, echo: bool = True) -> RunResult:
    """Load data, train once over the training split and score the test split."""

    data_cfg = dict(config["data"])
    model_cfg = dict(config["model"])
    train_cfg = dict(config["train"])

    dataset = registry.get_dataset(data_cfg["name"], **data_cfg.get("options", {}))
    data_spec = dataset.data_spec
    train_split = dataset.split("train")
    test_split = dataset.split("test")

    dims = build_dims(data_spec.d_in, model_cfg.get("hidden", [60]), data_spec.num_classes)
    seed = train_cfg.get("seed")
    seed = int(seed) if seed is not None else None
    lr = float(train_cfg.get("lr", 0.1))
    low, high = (float(v) for v in model_cfg.get("weight_range", (-0.5, 0.5)))
    network = FeedForwardNetwork(
        layer_dims=dims,
        seed=seed,
        weight_range=(low, high),
        derivative=str(model_cfg.get("derivative", "resquash")),
    )

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    if echo:
        _print_startup_summary(
            dataset_name=dataset.name,
            dims=dims,
            samples=dataset.splits,
            learning_rate=lr,
            derivative=network.derivative,
            seed=seed,
            param_count=network.parameter_count(),
        )

    train_jsonl = JsonlSink(run_dir / "metrics_train.jsonl", split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics_train.csv", split="train")
    test_jsonl = JsonlSink(run_dir / "metrics_test.jsonl", split="test", seed=seed)
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    trainer = Trainer(
        network,
        lr,
        callbacks=[train_jsonl, train_csv, plots],
        log_every=int(train_cfg.get("log_every", 100)),
    )

    timer = Timer(echo=echo)
    with timer.measure("Training..."):
        trainer.fit(train_split)
    train_seconds = timer.elapsed

    with timer.measure("Testing..."):
        evaluation = trainer.evaluate(test_split)
    test_seconds = timer.elapsed

    labels = _labels(test_split)
    test_metrics = dict(evaluation.as_metrics())
    test_metrics.update(
        compute_metrics(
            default_metrics(data_spec.num_classes),
            evaluation.predictions,
            labels,
            num_classes=data_spec.num_classes,
        )
    )
    test_metrics["seconds"] = test_seconds
    test_jsonl.on_epoch(1, test_metrics)
    plot_path = plots.close()

    if echo:
        print(f"poz: {evaluation.correct}\nneg: {evaluation.incorrect}")
        print(f"average: {evaluation.accuracy * 100:.2f}%")

    confusion = confusion_matrix(evaluation.predictions, labels, data_spec.num_classes)
    (run_dir / "confusion.json").write_text(json.dumps(confusion.tolist()))
    resolved = _safe_config(config, dims)
    (run_dir / "config.json").write_text(json.dumps(resolved, indent=2))

    manifest = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        dataset_provenance=dataset.provenance,
        results={
            **test_metrics,
            "train_seconds": train_seconds,
            **({"plot": plot_path.name} if plot_path is not None else {}),
        },
    )
    summary_path = write_summary(
        train_jsonl.path, run_dir / "summary.json", tail=int(train_cfg.get("summary_tail", 32))
    )

    return RunResult(
        samples=len(train_split),
        accuracy=evaluation.accuracy,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
    )


def _labels(split: registry.SampleSplit) -> List[int]:
    return [split.labels.label(i) for i in range(len(split))]


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if train_cfg.get("run_dir"):
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _safe_config(config: Mapping[str, object], dims: Sequence[int]) -> Mapping[str, object]:
    copied = json.loads(json.dumps(config))
    copied.setdefault("model", {})["layer_dims"] = list(dims)
    return copied


def _print_startup_summary(
    *,
    dataset_name: str,
    dims: Sequence[int],
    samples: Mapping[str, int],
    learning_rate: float,
    derivative: str,
    seed: int | None,
    param_count: int,
) -> None:
    print("=== icrnet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Samples       : {dict(samples)}")
    print(f"Dimensions    : {list(dims)}")
    print(f"Learning rate : {learning_rate}")
    print(f"Derivative    : {derivative}")
    print(f"Seed          : {seed if seed is not None else 'clock'}")
    print(f"Parameters    : {param_count}")
    print("==================")


__all__ = ["build_dims", "load_preset", "merge_config", "presets", "read_config_file", "run_pipeline"]
