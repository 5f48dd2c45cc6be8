"""Command line entry point for backpropnet training runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from backpropnet.core.errors import NetworkError
from backpropnet.training import pipelines


def _format_result(result) -> str:
    payload = {
        "batches": result.batches,
        "examples": result.examples,
        "metrics": result.metrics_path,
        "manifest": result.manifest_path,
        "summary": result.summary_path,
        "weights": result.extra.get("weights_path", ""),
        "checkpoint": result.extra.get("checkpoint_path", ""),
    }
    if result.score is not None:
        payload["correct"] = result.score.correct
        payload["total"] = result.score.total
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="xor",
        help="Preset configuration to execute",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--seed", type=int, help="Seed for data sampling and initialisation")
    parser.add_argument("--eta", type=float, help="Learning rate")
    parser.add_argument("--batch-size", type=int, help="Mini-batch size")
    parser.add_argument("--epochs", type=int, help="Number of passes over the training set")
    parser.add_argument("--run-dir", help="Directory receiving metrics and artifacts")
    parser.add_argument("--load", type=Path, help="Read initial weights/biases from a file")
    parser.add_argument("--save", type=Path, help="Write trained weights/biases to a file")
    parser.add_argument(
        "--load-checkpoint", type=Path, help="Resume from a .npz checkpoint written by a previous run"
    )
    parser.add_argument(
        "--enable-plots", action="store_true", help="Save a cost curve with matplotlib"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def _load_override(path: Path) -> dict:
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        try:
            import yaml  # type: ignore
        except ImportError as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load YAML configs") from exc
        return yaml.safe_load(text) or {}
    return json.loads(text)


def _merge(base: dict, override: dict) -> dict:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _merge(dict(base[key]), value)
        else:
            base[key] = value
    return base


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))
    if args.config:
        config = _merge(config, _load_override(args.config))

    train_cfg = config.setdefault("train", {})
    if args.seed is not None:
        train_cfg["seed"] = int(args.seed)
        config.setdefault("data", {}).setdefault("options", {})["seed"] = int(args.seed)
    if args.eta is not None:
        train_cfg["eta"] = float(args.eta)
    if args.batch_size is not None:
        train_cfg["batch_size"] = int(args.batch_size)
    if args.epochs is not None:
        train_cfg["epochs"] = int(args.epochs)
    if args.run_dir:
        train_cfg["run_dir"] = args.run_dir
    if args.save:
        train_cfg["save_weights"] = str(args.save)
    if args.load:
        config.setdefault("model", {})["load_weights"] = str(args.load)
    if args.load_checkpoint:
        config.setdefault("model", {})["load_checkpoint"] = str(args.load_checkpoint)
    if args.enable_plots:
        train_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    try:
        result = pipelines.run_pipeline(config)
    except NetworkError as exc:
        raise SystemExit(f"error: {exc}") from exc
    print(_format_result(result))


if __name__ == "__main__":
    main()
