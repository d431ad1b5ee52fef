"""Dataset registry and metadata contracts."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, MutableMapping

from ..core.errors import ConfigurationError
from ..core.types import Array


@dataclass(frozen=True)
class Dataset:
    """An in-memory supervised dataset.

    Attributes
    ----------
    name:
        Registry name the dataset was built from.
    inputs:
        ``N x f`` input matrix.
    targets:
        ``N x t`` target matrix.
    task_type:
        ``"binary"``, ``"multiclass"`` or ``"regression"``; selects the
        accuracy metric reported after training.
    provenance:
        Options used to build the data, recorded in the run manifest.
    """

    name: str
    inputs: Array
    targets: Array
    task_type: str
    provenance: Dict[str, Any] = field(default_factory=dict)

    @property
    def d_in(self) -> int:
        return int(self.inputs.shape[1])

    @property
    def d_out(self) -> int:
        return int(self.targets.shape[1])


DatasetFactory = Callable[..., Dataset]


_REGISTRY: MutableMapping[str, DatasetFactory] = {}


def register_dataset(name: str) -> Callable[[DatasetFactory], DatasetFactory]:
    """Register a dataset factory under ``name``::

        @register_dataset("xor")
        def make_xor(**options):
            ...
    """

    def _decorator(func: DatasetFactory) -> DatasetFactory:
        _REGISTRY[name] = func
        return func

    return _decorator


def get_dataset(name: str, /, **options: Any) -> Dataset:
    """Build the dataset registered as ``name`` with ``options``."""

    try:
        factory = _REGISTRY[name]
    except KeyError as exc:
        available = ", ".join(available_datasets())
        raise ConfigurationError(
            f"Unknown dataset {name!r}. Available datasets: {available}",
            config_key="data.name",
            actual_value=name,
        ) from exc
    return factory(**options)


def available_datasets() -> Iterable[str]:
    return sorted(_REGISTRY)


__all__ = ["Dataset", "register_dataset", "get_dataset", "available_datasets"]
