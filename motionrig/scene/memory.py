"""
In-memory composition. Stands in for the host when running the CLI and in
tests; persists to JSON. Undo groups snapshot the whole composition state.
"""
import json
import logging
from copy import deepcopy
from pathlib import Path
from typing import Any

from ..binding.records import BindingTable
from ..errors import HostError, PropertyUnavailable
from .base import Composition, Layer

logger = logging.getLogger(__name__)


class MemoryComposition(Composition):

    def __init__(
        self,
        name: str = "Comp 1",
        width: int = 1920,
        height: int = 1080,
        frame_rate: float = 30.0,
    ):
        self.name = name
        self.width = width
        self.height = height
        self.frame_duration = 1.0 / frame_rate if frame_rate else 0.0
        self.bindings = BindingTable()
        self._layers: list[Layer] = []
        self._selection: list[int] = []
        self._next_id = 1
        self._undo_depth = 0
        self._pending: tuple[str, dict[str, Any]] | None = None
        self.undo_stack: list[tuple[str, dict[str, Any]]] = []

    # --- layers ---

    def layers(self) -> list[Layer]:
        return list(self._layers)

    def add_layer(
        self,
        name: str,
        *,
        position: tuple[float, ...] = (0.0, 0.0),
        three_d: bool = False,
        slots: tuple[str, ...] = ("position", "scale"),
        locked: bool = False,
        at_top: bool = False,
    ) -> Layer:
        """Add a footage/shape layer. Appended at the bottom unless at_top."""
        if three_d and len(position) < 3:
            position = tuple(position) + (0.0,)
        layer = Layer(
            layer_id=self._take_id(),
            name=name,
            three_d=three_d,
            locked=locked,
            position=tuple(float(v) for v in position),
            anchor=(0.0, 0.0, 0.0) if three_d else (0.0, 0.0),
            slots=frozenset(slots),
        )
        if at_top:
            self._layers.insert(0, layer)
        else:
            self._layers.append(layer)
        return layer

    def add_null(self, name: str) -> Layer:
        # Null is placed at the comp center with its anchor at its own origin
        layer = Layer(
            layer_id=self._take_id(),
            name=name,
            is_null=True,
            position=self.center,
        )
        self._layers.insert(0, layer)
        logger.debug("Added null %r to %s", name, self.name)
        return layer

    def remove_layer(self, layer: Layer) -> None:
        if layer.locked:
            raise HostError(f"Layer {layer.name!r} is locked", layer=layer.name)
        try:
            self._layers.remove(layer)
        except ValueError:
            raise HostError(f"Layer {layer.name!r} is not in {self.name!r}", layer=layer.name) from None
        self._selection = [i for i in self._selection if i != layer.layer_id]
        self.bindings.remove(layer.layer_id)

    def _take_id(self) -> int:
        layer_id = self._next_id
        self._next_id += 1
        return layer_id

    # --- selection ---

    def selected_layers(self) -> list[Layer]:
        by_id = {layer.layer_id: layer for layer in self._layers}
        return [by_id[i] for i in self._selection if i in by_id]

    def select(self, layers: list[Layer]) -> None:
        self._selection = [layer.layer_id for layer in layers]

    # --- formulas ---

    def get_formula(self, layer: Layer, slot: str) -> str:
        if not layer.has_slot(slot):
            raise PropertyUnavailable(layer.name, slot)
        return layer.formulas.get(slot, "")

    def set_formula(self, layer: Layer, slot: str, text: str) -> None:
        if not layer.has_slot(slot):
            raise PropertyUnavailable(layer.name, slot)
        if layer.locked:
            raise HostError(f"Layer {layer.name!r} is locked", layer=layer.name)
        if text:
            layer.formulas[slot] = text
        else:
            layer.formulas.pop(slot, None)

    # --- undo ---

    def begin_undo_group(self, name: str) -> None:
        if self._undo_depth == 0:
            self._pending = (name, self._snapshot())
        self._undo_depth += 1

    def end_undo_group(self) -> None:
        if self._undo_depth == 0:
            return
        self._undo_depth -= 1
        if self._undo_depth == 0 and self._pending is not None:
            self.undo_stack.append(self._pending)
            self._pending = None

    def undo(self) -> str | None:
        """Restore the state from before the last undo group. Returns its name."""
        if not self.undo_stack:
            return None
        name, snapshot = self.undo_stack.pop()
        self._restore(snapshot)
        return name

    def _snapshot(self) -> dict[str, Any]:
        return {
            "layers": deepcopy(self._layers),
            "selection": list(self._selection),
            "bindings": list(self.bindings),
            "next_id": self._next_id,
        }

    def _restore(self, snapshot: dict[str, Any]) -> None:
        self._layers = deepcopy(snapshot["layers"])
        self._selection = list(snapshot["selection"])
        self.bindings = BindingTable(snapshot["bindings"])
        self._next_id = snapshot["next_id"]

    # --- persistence ---

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "width": self.width,
            "height": self.height,
            "frame_duration": self.frame_duration,
            "layers": [layer.to_dict() for layer in self._layers],
            "selection": list(self._selection),
            "bindings": self.bindings.to_list(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "MemoryComposition":
        comp = cls(name=d.get("name", "Comp 1"), width=d.get("width", 1920), height=d.get("height", 1080))
        comp.frame_duration = float(d.get("frame_duration", comp.frame_duration))
        comp._layers = [Layer.from_dict(ld) for ld in d.get("layers", [])]
        comp._selection = list(d.get("selection", []))
        comp.bindings = BindingTable.from_list(d.get("bindings", []))
        comp._next_id = max((layer.layer_id for layer in comp._layers), default=0) + 1
        return comp


def load_composition(path: Path) -> MemoryComposition:
    """Load a composition saved with save_composition."""
    with open(path, encoding="utf-8") as f:
        return MemoryComposition.from_dict(json.load(f))


def save_composition(comp: MemoryComposition, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(comp.to_dict(), f, indent=2, ensure_ascii=False)
    return path
