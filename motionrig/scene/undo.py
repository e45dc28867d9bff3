"""
Undo grouping: every mutating rig action runs inside one host undo group so
the user can undo it as a single step.
"""
from contextlib import contextmanager
from typing import Iterator

from .base import Composition


@contextmanager
def undo_group(comp: Composition, name: str) -> Iterator[Composition]:
    """Begin a host undo group; always end it, also on early return or error."""
    comp.begin_undo_group(name)
    try:
        yield comp
    finally:
        comp.end_undo_group()
