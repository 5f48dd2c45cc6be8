"""Acceptance predicates and held-out evaluation."""

from __future__ import annotations

from typing import Iterable, Protocol

import numpy as np

from ..core.network import Network
from ..core.types import Array, Score
from .backprop import as_example


class AcceptancePredicate(Protocol):
    """Decide whether a produced output is acceptable for ``desired``."""

    def __call__(self, produced: Array, desired: Array) -> bool:
        ...


def within_tolerance(tol: float = 0.1) -> AcceptancePredicate:
    """Accept outputs whose every entry lies strictly within ``tol`` of the target."""

    def _accept(produced: Array, desired: Array) -> bool:
        return bool(np.all(np.abs(np.asarray(produced) - np.asarray(desired)) < tol))

    return _accept


def evaluate(
    network: Network, test_set: Iterable, predicate: AcceptancePredicate
) -> Score:
    """Count the test examples whose output ``predicate`` accepts."""

    correct = 0
    total = 0
    for pair in test_set:
        example = as_example(pair, network)
        total += 1
        if predicate(network.feedforward(example.inputs), example.targets):
            correct += 1
    return Score(correct=correct, total=total)


__all__ = ["AcceptancePredicate", "evaluate", "within_tolerance"]
