"""Pipeline assembly: config dict -> dataset, network, trainer and artifacts."""

from __future__ import annotations

import json
import time
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Mapping, Sequence

import numpy as np

from ..core.errors import ConfigurationError
from ..core.network import Network
from ..core.persistence import (
    dump_weights_biases,
    load_checkpoint,
    read_weights_biases,
    save_checkpoint,
)
from ..core.types import RunResult
from ..data import registry
from ..reporting.artifacts import write_manifest
from ..reporting.metrics import CsvSink, JsonlSink
from ..reporting.plots import PlotAdapter
from ..reporting.summary import write_summary
from .evaluation import within_tolerance
from .trainer import SGDTrainer

_PRESETS: Dict[str, Mapping[str, object]] = {
    "xor": {
        "data": {"name": "xor", "options": {"n_samples": 10000, "seed": 0}},
        "model": {"sizes": [2, 3, 1]},
        "train": {
            "epochs": 1,
            "batch_size": 3,
            "eta": 3.0,
            "seed": 0,
            "tolerance": 0.1,
            "run_dir": "runs/xor",
            "enable_plots": False,
        },
    },
    "xor-wide": {
        "data": {"name": "xor", "options": {"n_samples": 4000, "seed": 1}},
        "model": {"sizes": [2, 8, 1]},
        "train": {
            "epochs": 3,
            "batch_size": 4,
            "eta": 3.0,
            "seed": 1,
            "tolerance": 0.1,
            "run_dir": "runs/xor-wide",
            "enable_plots": False,
        },
    },
}

_REQUIRED_SECTIONS = {"data", "model", "train"}


def presets() -> Mapping[str, Mapping[str, object]]:
    return {name: deepcopy(cfg) for name, cfg in _PRESETS.items()}


def load_preset(name: str) -> Dict[str, object]:
    try:
        return deepcopy(_PRESETS[name])  # type: ignore[return-value]
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def run_pipeline(config: Mapping[str, object]) -> RunResult:
    """Train a network as described by ``config`` and write its run artifacts."""

    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise ConfigurationError(
            f"Config is missing required sections: {', '.join(sorted(missing))}"
        )
    data_cfg = dict(config["data"])  # type: ignore[arg-type]
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    train_cfg = dict(config["train"])  # type: ignore[arg-type]

    dataset = registry.get(str(data_cfg["name"]), **data_cfg.get("options", {}))
    if not dataset.train:
        raise ConfigurationError(f"Dataset {dataset.name!r} has no training examples")
    sizes = _build_sizes(model_cfg, dataset.d_in, dataset.d_out)

    seed = int(train_cfg.get("seed", 0))
    eta = float(train_cfg.get("eta", 3.0))
    batch_size = int(train_cfg.get("batch_size", 1))
    epochs = int(train_cfg.get("epochs", 1))
    tolerance = float(train_cfg.get("tolerance", 0.1))

    network = Network(sizes, rng=np.random.default_rng(seed))
    if model_cfg.get("load_weights"):
        read_weights_biases(network, model_cfg["load_weights"])  # type: ignore[arg-type]
    if model_cfg.get("load_checkpoint"):
        load_checkpoint(network, model_cfg["load_checkpoint"])  # type: ignore[arg-type]

    run_dir = _resolve_run_dir(train_cfg, dataset.name)
    run_dir.mkdir(parents=True, exist_ok=True)

    _print_startup_summary(
        dataset_name=dataset.name,
        sizes=sizes,
        eta=eta,
        batch_size=batch_size,
        epochs=epochs,
        param_count=network.parameter_count(),
    )

    train_jsonl = JsonlSink(run_dir / "metrics.jsonl", split="train", seed=seed)
    train_csv = CsvSink(run_dir / "metrics.csv", split="train")
    test_jsonl = JsonlSink(run_dir / "metrics_test.jsonl", split="test", seed=seed)
    plots = PlotAdapter(run_dir, enable_plots=bool(train_cfg.get("enable_plots", False)))

    trainer = SGDTrainer(network, callbacks=[train_jsonl, train_csv, plots, _EpochOnly(test_jsonl)])
    result = trainer.run(
        dataset.train,
        eta,
        batch_size,
        epochs=epochs,
        test_data=dataset.test,
        predicate=within_tolerance(tolerance),
    )
    plots.close()

    weights_path = dump_weights_biases(
        network, train_cfg.get("save_weights") or run_dir / "weights.bin"
    )
    checkpoint_path = save_checkpoint(network, run_dir / "last.npz")
    score = None
    if result.score is not None:
        score = {
            "correct": result.score.correct,
            "total": result.score.total,
            "accuracy": result.score.accuracy,
        }
        print(f"Success : {result.score}")

    safe_config = json.loads(json.dumps(config, default=str))
    safe_config.setdefault("model", {})["sizes"] = list(sizes)
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=safe_config,
        dataset_provenance=dataset.provenance,
        score=score,
    )
    summary_path = write_summary(
        train_jsonl.path, run_dir / "summary.json", tail=int(train_cfg.get("summary_tail", 32))
    )
    (run_dir / "config.json").write_text(json.dumps(safe_config, indent=2))

    return RunResult(
        batches=result.batches,
        examples=result.examples,
        score=result.score,
        metrics_path=str(train_jsonl.path),
        manifest_path=manifest,
        summary_path=summary_path,
        extra={"weights_path": weights_path, "checkpoint_path": checkpoint_path},
    )


class _EpochOnly:
    """Forward only evaluation records to ``sink``."""

    def __init__(self, sink: JsonlSink) -> None:
        self.sink = sink

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        self.sink.on_epoch(epoch, metrics)


def _build_sizes(model_cfg: Mapping[str, object], d_in: int, d_out: int) -> List[int]:
    if "sizes" in model_cfg:
        sizes = [int(s) for s in model_cfg["sizes"]]  # type: ignore[union-attr]
    else:
        sizes = [d_in, *(int(h) for h in model_cfg.get("hidden", [])), d_out]  # type: ignore[union-attr]
    if len(sizes) < 2:
        raise ConfigurationError("Need a minimum of two layers in the network")
    if sizes[0] != d_in:
        raise ConfigurationError(f"Configured input width {sizes[0]} but dataset has {d_in}")
    if sizes[-1] != d_out:
        raise ConfigurationError(f"Configured output width {sizes[-1]} but dataset has {d_out}")
    return sizes


def _resolve_run_dir(train_cfg: Mapping[str, object], dataset: str) -> Path:
    if "run_dir" in train_cfg:
        return Path(str(train_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp / dataset


def _print_startup_summary(
    *,
    dataset_name: str,
    sizes: Sequence[int],
    eta: float,
    batch_size: int,
    epochs: int,
    param_count: int,
) -> None:
    print("=== backpropnet run ===")
    print(f"Dataset       : {dataset_name}")
    print(f"Layer sizes   : {list(sizes)}")
    print(f"Learning rate : {eta}")
    print(f"Batch size    : {batch_size}")
    print(f"Epochs        : {epochs}")
    print(f"Parameters    : {param_count}")
    print("=======================")


__all__ = ["run_pipeline", "load_preset", "presets"]
