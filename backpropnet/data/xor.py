"""XOR truth-table datasets."""

from __future__ import annotations

from typing import List

import numpy as np

from ..core.types import Example
from .registry import DatasetSpec, register_dataset


def _example(x: int, y: int) -> Example:
    return Example(
        inputs=np.array([[float(x), float(y)]]),
        targets=np.array([[float(x ^ y)]]),
    )


def xor_truth_table() -> List[Example]:
    """The four canonical XOR examples in ``(0,0), (0,1), (1,0), (1,1)`` order."""

    return [_example(i // 2, i % 2) for i in range(4)]


def make_xor_dataset(n: int, rng: np.random.Generator) -> List[Example]:
    """Sample ``n`` XOR examples with uniformly random binary inputs."""

    bits = rng.integers(0, 2, size=(n, 2))
    return [_example(int(x), int(y)) for x, y in bits]


@register_dataset("xor")
def _factory(n_samples: int = 10000, seed: int = 0, **_: object) -> DatasetSpec:
    rng = np.random.default_rng(seed)
    return DatasetSpec(
        name="xor",
        train=make_xor_dataset(int(n_samples), rng),
        test=xor_truth_table(),
        provenance={"type": "xor", "n_samples": int(n_samples), "seed": int(seed)},
    )


__all__ = ["make_xor_dataset", "xor_truth_table"]
