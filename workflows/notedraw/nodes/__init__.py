"""Graph nodes for the note pipeline."""

from .finalize import finalize
from .organize import organize_content
from .paint_units import paint_units

__all__ = [
    "organize_content",
    "paint_units",
    "finalize",
]
