# Host document model: composition interface, in-memory host, undo grouping

from .base import Composition, Layer
from .memory import MemoryComposition, load_composition, save_composition
from .undo import undo_group

__all__ = [
    "Composition",
    "Layer",
    "MemoryComposition",
    "load_composition",
    "save_composition",
    "undo_group",
]
