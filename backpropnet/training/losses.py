"""Quadratic cost used by the trainer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from ..core.types import Array

LossFn = Callable[[Array, Array], tuple[float, Array]]


def quadratic_cost_derivative(output: Array, desired: Array) -> Array:
    """Derivative of ``0.5 * ||desired - output||^2`` with respect to ``output``."""

    return output - desired


def quadratic_cost(output: Array, desired: Array) -> float:
    diff = desired - output
    return float(0.5 * np.sum(np.square(diff)))


@dataclass(frozen=True)
class Loss:
    """Loss wrapper returning both the scalar loss and dC/da."""

    name: str
    fn: LossFn

    def __call__(self, predictions: Array, targets: Array) -> tuple[float, Array]:
        return self.fn(predictions, targets)


def _quadratic(pred: Array, target: Array) -> tuple[float, Array]:
    return quadratic_cost(pred, target), quadratic_cost_derivative(pred, target)


QUADRATIC = Loss("quadratic", _quadratic)

__all__ = ["Loss", "QUADRATIC", "quadratic_cost", "quadratic_cost_derivative"]
