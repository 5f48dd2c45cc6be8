"""Mini-batch stochastic gradient descent driver."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

import numpy as np

from ..core.errors import ConfigurationError
from ..core.network import Network
from ..core.types import Batch, Example, Gradients, RunResult, Score
from .backprop import as_example, backprop
from .batching import iter_batches
from .evaluation import AcceptancePredicate, evaluate


class SGDTrainer:
    """Train a :class:`Network` with plain mini-batch SGD on the quadratic cost.

    Every example of a batch is backpropagated against the same pre-update
    parameters; the averaged update is applied only once the whole batch has
    been accumulated.
    """

    def __init__(
        self,
        network: Network,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        self.network = network
        self.callbacks = list(callbacks or [])
        self._step = 0
        self._epoch = 0

    @property
    def steps(self) -> int:
        """Number of parameter updates applied so far."""

        return self._step

    def sgd(
        self,
        training_data: Sequence,
        eta: float,
        batch_size: int,
        test_data: Sequence | None = None,
        predicate: AcceptancePredicate | None = None,
    ) -> RunResult:
        """Run one pass over ``training_data`` in consecutive mini-batches.

        When both ``test_data`` and ``predicate`` are given the network is
        scored on the held-out examples afterwards.
        """

        self.network.check_initialised()
        if eta <= 0:
            raise ConfigurationError(f"eta must be positive, got {eta}")
        if batch_size < 1:
            raise ConfigurationError(f"batch_size must be >= 1, got {batch_size}")

        examples = [as_example(pair, self.network) for pair in training_data]
        n_batches = 0
        for batch in iter_batches(examples, batch_size):
            loss = self.update_mini_batch(batch, eta)
            n_batches += 1
            self._step += 1
            self._emit("on_step", self._step, {"loss": loss, "batch_size": len(batch)})

        self._epoch += 1
        score = None
        if test_data is not None and predicate is not None:
            score = self.score(test_data, predicate)
            self._emit(
                "on_epoch",
                self._epoch,
                {"correct": score.correct, "total": score.total, "accuracy": score.accuracy},
            )
        return RunResult(batches=n_batches, examples=len(examples), score=score)

    def run(
        self,
        training_data: Sequence,
        eta: float,
        batch_size: int,
        *,
        epochs: int = 1,
        test_data: Sequence | None = None,
        predicate: AcceptancePredicate | None = None,
    ) -> RunResult:
        """Repeat :meth:`sgd` for ``epochs`` passes, scoring after each pass."""

        if epochs < 1:
            raise ConfigurationError(f"epochs must be >= 1, got {epochs}")
        batches = 0
        examples = 0
        score = None
        for _ in range(epochs):
            result = self.sgd(training_data, eta, batch_size, test_data, predicate)
            batches += result.batches
            examples += result.examples
            score = result.score
        return RunResult(batches=batches, examples=examples, score=score)

    def update_mini_batch(self, batch: Batch | Iterable[Example], eta: float) -> float:
        """Apply one averaged SGD step for ``batch``; return its mean cost."""

        examples = batch.examples if isinstance(batch, Batch) else list(batch)
        if not examples:
            return 0.0
        accumulator = Gradients.zeros_like(self.network)
        losses: list[float] = []
        for example in examples:
            grads, loss = backprop(self.network, example)
            accumulator.accumulate(grads)
            losses.append(loss)
        self.network.apply_gradients(accumulator, eta / len(examples))
        return float(np.mean(losses))

    def score(self, test_data: Sequence, predicate: AcceptancePredicate) -> Score:
        return evaluate(self.network, test_data, predicate)

    def _emit(self, hook: str, index: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, hook):
                getattr(callback, hook)(index, metrics)
            elif hook == "on_step" and callable(callback):
                callback(index, metrics)


__all__ = ["SGDTrainer"]
