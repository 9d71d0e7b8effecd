# NN/errors.py
from __future__ import annotations


class DimensionMismatch(ValueError):
    """Operand shapes violate the algebraic precondition of an operation."""


class InvalidTopology(ValueError):
    """Layer widths cannot describe a network (fewer than two layers, or a width <= 0)."""


class CheckpointError(ValueError):
    """A saved network state cannot be restored (wrong format, version or shapes)."""
