"""Core numerical primitives for backpropnet."""

from . import activations, errors, network, persistence, types

__all__ = ["activations", "errors", "network", "persistence", "types"]
