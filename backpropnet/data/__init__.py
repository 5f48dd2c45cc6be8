"""Dataset registry for backpropnet."""

from . import xor  # noqa: F401  registers the built-in datasets
from .registry import DatasetSpec, get, register_dataset

__all__ = ["DatasetSpec", "get", "register_dataset"]
