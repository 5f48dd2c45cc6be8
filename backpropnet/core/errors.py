"""Exceptions raised by backpropnet."""


class NetworkError(Exception):
    """Base class for all backpropnet errors."""


class ConfigurationError(NetworkError, ValueError):
    """Raised when a network or training run is configured incorrectly."""


class MalformedExampleError(ConfigurationError):
    """Raised when a training pair is not exactly an input and an output."""


class ShapeMismatchError(NetworkError, ValueError):
    """Raised when an array does not match the shape the network expects."""


class PersistenceError(NetworkError, OSError):
    """Raised when persisted weights and biases cannot be read or written."""


__all__ = [
    "NetworkError",
    "ConfigurationError",
    "MalformedExampleError",
    "ShapeMismatchError",
    "PersistenceError",
]
