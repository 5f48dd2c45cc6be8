"""Training loops for backpropnet."""

from .backprop import backprop
from .batching import count_batches, iter_batches
from .evaluation import evaluate, within_tolerance
from .trainer import SGDTrainer

__all__ = [
    "SGDTrainer",
    "backprop",
    "count_batches",
    "evaluate",
    "iter_batches",
    "within_tolerance",
]
