"""Layer offset table mapping a topology onto one flat parameter vector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from .errors import DimensionError
from .types import Array, LayerSlot, Topology, as_topology


def make_rng(rng: np.random.Generator | int | None) -> np.random.Generator:
    """Return ``rng`` unchanged, or a generator seeded from it."""

    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


@dataclass(frozen=True)
class LayerLayout:
    """Ordered ``(start, rows, cols)`` slots, one per layer transition.

    Layer ``l`` maps ``n_l + 1`` inputs (the extra row is the bias) onto
    ``n_{l+1}`` outputs and occupies ``(n_l + 1) * n_{l+1}`` consecutive entries.
    """

    topology: Topology
    slots: Tuple[LayerSlot, ...]

    @classmethod
    def from_topology(cls, layer_sizes: Sequence[int]) -> "LayerLayout":
        topology = as_topology(layer_sizes)
        slots: List[LayerSlot] = []
        start = 0
        for n_in, n_out in zip(topology[:-1], topology[1:]):
            slot = LayerSlot(start=start, rows=n_in + 1, cols=n_out)
            slots.append(slot)
            start = slot.stop
        return cls(topology=topology, slots=tuple(slots))

    @property
    def total_size(self) -> int:
        return self.slots[-1].stop

    def __len__(self) -> int:
        return len(self.slots)

    def check(self, flat: Array) -> None:
        """Raise :class:`DimensionError` unless ``flat`` matches this layout."""

        if flat.ndim != 1 or flat.shape[0] != self.total_size:
            raise DimensionError(
                f"Parameter vector must have {self.total_size} entries for "
                f"topology {list(self.topology)}, got shape {flat.shape}",
                expected=self.total_size,
                actual=flat.shape,
            )

    def view(self, flat: Array, idx: int) -> Array:
        """Return layer ``idx`` of ``flat`` as a ``(rows, cols)`` view, not a copy."""

        if not 0 <= idx < len(self.slots):
            raise IndexError(
                f"Layer index {idx} out of range for {len(self.slots)} weight layers"
            )
        self.check(flat)
        slot = self.slots[idx]
        return flat[slot.start : slot.stop].reshape(slot.rows, slot.cols)

    def flatten(self, blocks: Sequence[Array]) -> Array:
        """Concatenate per-layer ``(rows, cols)`` blocks in layout order."""

        if len(blocks) != len(self.slots):
            raise DimensionError(
                f"Expected {len(self.slots)} layer blocks, got {len(blocks)}",
                expected=len(self.slots),
                actual=len(blocks),
            )
        for slot, block in zip(self.slots, blocks):
            if block.shape != (slot.rows, slot.cols):
                raise DimensionError(
                    f"Layer block has shape {block.shape}, expected "
                    f"{(slot.rows, slot.cols)}",
                    expected=(slot.rows, slot.cols),
                    actual=block.shape,
                )
        flat = np.concatenate([block.ravel() for block in blocks])
        self.check(flat)
        return flat

    def init_weights(self, rng: np.random.Generator) -> Array:
        """Draw each layer uniformly from ``[-eps, eps]``, ``eps = sqrt(6 / (rows + cols))``."""

        blocks = []
        for slot in self.slots:
            eps = np.sqrt(6.0 / (slot.rows + slot.cols))
            blocks.append(rng.uniform(-eps, eps, size=(slot.rows, slot.cols)))
        return self.flatten(blocks)


__all__ = ["LayerLayout", "make_rng"]
