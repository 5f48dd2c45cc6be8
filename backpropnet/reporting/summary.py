"""Reduce a metrics JSONL file to a small, deterministic ``summary.json``."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Sequence

import numpy as np

# Record fields that identify a row rather than measure anything.
_KEYS = frozenset({"step", "epoch", "seed"})


def compute_auc(points: Sequence[float]) -> float:
    """Trapezoidal area under ``points`` with one unit between samples."""

    if len(points) == 0:
        return 0.0
    y = np.asarray(points, dtype=np.float64)
    integrate = getattr(np, "trapezoid", None) or np.trapz
    return float(integrate(y, dx=1.0))


def _read_records(path: Path) -> List[Mapping[str, object]]:
    if not path.exists():
        return []
    with path.open() as handle:
        return [json.loads(line) for line in handle if line.strip()]


def _series(records: Iterable[Mapping[str, object]]) -> Dict[str, List[float]]:
    series: Dict[str, List[float]] = {}
    for record in records:
        for key, value in record.items():
            if key in _KEYS or isinstance(value, bool):
                continue
            if isinstance(value, (int, float)):
                series.setdefault(key, []).append(float(value))
    return series


def _describe(values: Sequence[float], window: int) -> Dict[str, float]:
    arr = np.asarray(values, dtype=np.float64)
    return {
        "min": float(arr.min()),
        "max": float(arr.max()),
        "mean": float(arr.mean()),
        "last": float(arr[-1]),
        "tail_auc": compute_auc(arr[-window:]) if window else 0.0,
    }


def write_summary(
    metrics_jsonl: str | Path, out_summary_json: str | Path, *, tail: int = 32
) -> str:
    """Write min/max/mean/last and tail area for each numeric metric column.

    ``tail`` bounds the number of trailing records integrated for
    ``tail_auc``; for the training cost this tracks how settled the last
    mini-batches were.
    """

    records = _read_records(Path(metrics_jsonl))
    window = min(tail, len(records))
    out_path = Path(out_summary_json)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "version": 1,
        "records": len(records),
        "tail_window": window,
        "metrics": {name: _describe(vals, window) for name, vals in _series(records).items()},
    }
    out_path.write_text(json.dumps(payload, sort_keys=True, indent=2))
    return str(out_path)


__all__ = ["compute_auc", "write_summary"]
