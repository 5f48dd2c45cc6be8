"""backpropnet public API."""

from .core import activations, errors, persistence, types  # noqa: F401
from .core.errors import (
    ConfigurationError,
    MalformedExampleError,
    NetworkError,
    PersistenceError,
    ShapeMismatchError,
)
from .core.network import Network
from .core.persistence import dump_weights_biases, read_weights_biases
from .core.types import Example, Score
from .training.evaluation import within_tolerance
from .training.pipelines import load_preset, presets, run_pipeline
from .training.trainer import SGDTrainer

__all__ = [
    "Network",
    "SGDTrainer",
    "Example",
    "Score",
    "within_tolerance",
    "dump_weights_biases",
    "read_weights_biases",
    "activations",
    "errors",
    "persistence",
    "types",
    "load_preset",
    "presets",
    "run_pipeline",
    "NetworkError",
    "ConfigurationError",
    "MalformedExampleError",
    "ShapeMismatchError",
    "PersistenceError",
]
