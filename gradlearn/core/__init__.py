"""Core numerical primitives for gradlearn."""

from . import activations, costs, criterion, errors, layout, types

__all__ = ["activations", "costs", "criterion", "errors", "layout", "types"]
