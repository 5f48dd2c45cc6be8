"""Core typing contracts for backpropnet."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List

import numpy as np

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .network import Network

Array = np.ndarray


@dataclass(frozen=True)
class Example:
    """A single ``(input, desired output)`` training pair of row vectors."""

    inputs: Array
    targets: Array


@dataclass(frozen=True)
class Batch:
    """A contiguous slice of training examples."""

    examples: List[Example]

    def __len__(self) -> int:
        return len(self.examples)


@dataclass
class ActivationTrace:
    """Activations and pre-activations captured during one forward pass."""

    activations: List[Array]
    zs: List[Array]


@dataclass
class Gradients:
    """Per-layer cost gradients shaped like the network parameters."""

    nabla_w: List[Array]
    nabla_b: List[Array]

    @classmethod
    def zeros_like(cls, network: "Network") -> "Gradients":
        return cls(
            nabla_w=[np.zeros_like(w) for w in network.weights],
            nabla_b=[np.zeros_like(b) for b in network.biases],
        )

    def accumulate(self, other: "Gradients") -> None:
        """Add ``other`` into this accumulator in place."""

        for acc, grad in zip(self.nabla_w, other.nabla_w):
            acc += grad
        for acc, grad in zip(self.nabla_b, other.nabla_b):
            acc += grad


@dataclass(frozen=True)
class Score:
    """Number of accepted test outputs."""

    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0

    def __str__(self) -> str:
        return f"{self.correct}/{self.total}"


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`backpropnet.training.trainer.SGDTrainer.sgd`."""

    batches: int
    examples: int
    score: Score | None = None
    metrics_path: str = ""
    manifest_path: str = ""
    summary_path: str = ""
    extra: dict = field(default_factory=dict)
