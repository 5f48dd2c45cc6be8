"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, MutableMapping

from ..core.types import Example


@dataclass(frozen=True)
class DatasetSpec:
    """Training and held-out examples plus the metadata that produced them.

    Attributes
    ----------
    name:
        Registry name of the dataset.
    train:
        Training examples, consumed positionally by the trainer.
    test:
        Held-out examples scored with the acceptance predicate.
    provenance:
        Parameters used to build the dataset, recorded in the run manifest.
    """

    name: str
    train: List[Example]
    test: List[Example]
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.train[0].inputs.shape[-1])

    @property
    def d_out(self) -> int:
        return int(self.train[0].targets.shape[-1])


DatasetFactory = Callable[..., DatasetSpec]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(
    name: str,
    factory: DatasetFactory | None = None,
) -> Callable[[DatasetFactory], DatasetFactory] | DatasetFactory:
    """Register a dataset factory, directly or as a decorator::

        @register_dataset("xor")
        def make_xor(**kwargs):
            ...
    """

    def _register(fn: DatasetFactory) -> DatasetFactory:
        _REGISTRY[name] = fn
        return fn

    if factory is None:
        return _register
    return _register(factory)


def get(name: str, **options: Any) -> DatasetSpec:
    try:
        factory = _REGISTRY[name]
    except KeyError as exc:
        available = ", ".join(sorted(_REGISTRY))
        raise KeyError(f"Unknown dataset {name!r}. Available datasets: {available}") from exc
    return factory(**options)


__all__ = ["DatasetSpec", "DatasetFactory", "register_dataset", "get"]
