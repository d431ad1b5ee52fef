"""Core typing contracts for gradlearn."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union

import numpy as np

from .errors import TopologyError

Array = np.ndarray
Topology = Tuple[int, ...]


def as_topology(layer_sizes: Sequence[int]) -> Topology:
    """Validate ``layer_sizes`` and return it as an immutable tuple."""

    sizes = tuple(layer_sizes)
    if len(sizes) < 2:
        raise TopologyError(
            f"Topology needs at least an input and an output layer, got {list(sizes)}",
            topology=sizes,
        )
    for size in sizes:
        if isinstance(size, bool) or not isinstance(size, (int, np.integer)) or size < 1:
            raise TopologyError(
                f"Layer sizes must be positive integers, got {list(sizes)}",
                topology=sizes,
            )
    return tuple(int(size) for size in sizes)


@dataclass(frozen=True)
class LayerSlot:
    """Position of one layer's weight matrix inside the flat parameter vector."""

    start: int
    rows: int
    cols: int

    @property
    def size(self) -> int:
        return self.rows * self.cols

    @property
    def stop(self) -> int:
        return self.start + self.size


@dataclass(frozen=True)
class Untrained:
    """State of a model that has not completed a ``train`` call."""


@dataclass(frozen=True)
class Trained:
    """State of a model holding optimised parameters."""

    parameters: Array = field(repr=False)


ModelState = Union[Untrained, Trained]


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :func:`gradlearn.training.pipelines.run_pipeline`."""

    steps: int
    metrics_path: str
    manifest_path: str
    final_cost: float = float("nan")
    history: List[float] = field(default_factory=list, repr=False)
