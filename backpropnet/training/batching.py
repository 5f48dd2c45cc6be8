"""Positional mini-batch partitioning."""

from __future__ import annotations

import math
from typing import Iterator, Sequence

from ..core.errors import ConfigurationError
from ..core.types import Batch, Example


def count_batches(n_examples: int, batch_size: int) -> int:
    """Number of batches ``iter_batches`` yields for ``n_examples``."""

    if batch_size < 1:
        raise ConfigurationError(f"batch_size must be >= 1, got {batch_size}")
    return math.ceil(n_examples / batch_size)


def iter_batches(examples: Sequence[Example], batch_size: int) -> Iterator[Batch]:
    """Yield consecutive slices of ``batch_size`` examples in input order.

    The final batch holds the remainder when ``len(examples)`` is not a
    multiple of ``batch_size``. Nothing is shuffled.
    """

    if batch_size < 1:
        raise ConfigurationError(f"batch_size must be >= 1, got {batch_size}")
    for start in range(0, len(examples), batch_size):
        yield Batch(examples=list(examples[start : start + batch_size]))


__all__ = ["count_batches", "iter_batches"]
