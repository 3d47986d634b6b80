"""Command line entry point for icrnet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from icrnet.data import available_datasets
from icrnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "samples": result.samples,
        "accuracy": round(result.accuracy, 6),
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
    }
    if getattr(result, "summary_path", ""):
        payload["summary"] = result.summary_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="digits-784-60-10",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument(
        "--dataset", choices=sorted(available_datasets()), help="Override the dataset"
    )
    parser.add_argument("--data-root", help="Root folder of the PNG digit dataset")
    parser.add_argument("--npz-path", help="Archive used by the npz dataset")
    parser.add_argument("--train-size", type=int, help="Number of training samples to use")
    parser.add_argument("--test-size", type=int, help="Number of test samples to use")
    parser.add_argument(
        "--hidden", type=int, nargs="+", help="Hidden layer sizes, e.g. --hidden 60"
    )
    parser.add_argument("--lr", type=float, help="Learning rate")
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument(
        "--derivative",
        choices=["resquash", "activation"],
        help="Hidden-layer sigmoid derivative",
    )
    parser.add_argument("--run-dir", help="Directory receiving run artifacts")
    parser.add_argument("--enable-plots", action="store_true", help="Write the error curve")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> dict:
    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = dict(pipelines.read_config_file(args.config))
        if {"data", "model", "train"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    data_cfg = config.setdefault("data", {})
    if args.dataset and args.dataset != data_cfg.get("name"):
        data_cfg["name"] = args.dataset
        data_cfg["options"] = {}
    opts = data_cfg.setdefault("options", {})
    if args.data_root:
        opts["root"] = args.data_root
    if args.npz_path:
        opts["path"] = args.npz_path
    if args.train_size is not None:
        opts["train_size"] = int(args.train_size)
    if args.test_size is not None:
        opts["test_size"] = int(args.test_size)

    model_cfg = config.setdefault("model", {})
    if args.hidden:
        model_cfg["hidden"] = [int(h) for h in args.hidden]
    if args.derivative:
        model_cfg["derivative"] = args.derivative

    train_cfg = config.setdefault("train", {})
    if args.lr is not None:
        train_cfg["lr"] = float(args.lr)
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.enable_plots:
        train_cfg["enable_plots"] = True
    return config


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = resolve_config(args)

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_pipeline(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
