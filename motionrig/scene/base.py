"""
Abstract interface to the host document model (a composition of layers).
Rig code only talks to this; implementations can be the in-memory
composition or a bridge to a real compositing host.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from ..binding.records import BindingTable
from ..controllers.params import ParameterStore


@dataclass(eq=False)
class Layer:
    """
    A layer as seen by the rig. Geometry (position, anchor) is read only here;
    the rig writes formula text and controller parameters, nothing else.
    """
    layer_id: int
    name: str
    label: int = 0
    is_null: bool = False
    three_d: bool = False
    locked: bool = False
    motion_blur: bool = True
    position: tuple[float, ...] = (0.0, 0.0)
    anchor: tuple[float, ...] = (0.0, 0.0)
    slots: frozenset[str] = frozenset(("position", "scale"))
    formulas: dict[str, str] = field(default_factory=dict)
    effects: ParameterStore = field(default_factory=ParameterStore)

    def __post_init__(self) -> None:
        if not self.effects.owner:
            self.effects.owner = self.name

    def has_slot(self, slot: str) -> bool:
        return slot in self.slots

    def to_dict(self) -> dict[str, Any]:
        return {
            "layer_id": self.layer_id,
            "name": self.name,
            "label": self.label,
            "is_null": self.is_null,
            "three_d": self.three_d,
            "locked": self.locked,
            "motion_blur": self.motion_blur,
            "position": list(self.position),
            "anchor": list(self.anchor),
            "slots": sorted(self.slots),
            "formulas": dict(self.formulas),
            "effects": self.effects.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Layer":
        return cls(
            layer_id=int(d["layer_id"]),
            name=d["name"],
            label=d.get("label", 0),
            is_null=d.get("is_null", False),
            three_d=d.get("three_d", False),
            locked=d.get("locked", False),
            motion_blur=d.get("motion_blur", True),
            position=tuple(float(v) for v in d.get("position", (0.0, 0.0))),
            anchor=tuple(float(v) for v in d.get("anchor", (0.0, 0.0))),
            slots=frozenset(d.get("slots", ("position", "scale"))),
            formulas=dict(d.get("formulas", {})),
            effects=ParameterStore.from_dict(d["name"], d.get("effects", [])),
        )


class Composition(ABC):
    """
    Host composition: ordered layers (1-based index, top to bottom), a user
    selection, formula slots, comp constants and undo grouping.
    """

    name: str
    width: int
    height: int
    frame_duration: float
    bindings: BindingTable

    @abstractmethod
    def layers(self) -> list[Layer]:
        """All layers, top to bottom."""
        ...

    def layer(self, index: int) -> Layer:
        """Layer at 1-based index."""
        layers = self.layers()
        if not 1 <= index <= len(layers):
            raise IndexError(f"Layer index {index} out of range 1..{len(layers)}")
        return layers[index - 1]

    def index_of(self, layer: Layer) -> int:
        for i, candidate in enumerate(self.layers(), start=1):
            if candidate is layer:
                return i
        raise ValueError(f"Layer {layer.name!r} is not in composition {self.name!r}")

    def layer_by_name(self, name: str) -> Layer | None:
        """First layer with exactly this name, top to bottom."""
        for layer in self.layers():
            if layer.name == name:
                return layer
        return None

    def layer_by_id(self, layer_id: int) -> Layer | None:
        for layer in self.layers():
            if layer.layer_id == layer_id:
                return layer
        return None

    @property
    def num_layers(self) -> int:
        return len(self.layers())

    @property
    def center(self) -> tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @abstractmethod
    def add_null(self, name: str) -> Layer:
        """Create a null layer at the top of the stack."""
        ...

    @abstractmethod
    def remove_layer(self, layer: Layer) -> None:
        ...

    @abstractmethod
    def selected_layers(self) -> list[Layer]:
        ...

    @abstractmethod
    def select(self, layers: list[Layer]) -> None:
        ...

    @abstractmethod
    def get_formula(self, layer: Layer, slot: str) -> str:
        """Formula text on the slot ("" when none)."""
        ...

    @abstractmethod
    def set_formula(self, layer: Layer, slot: str, text: str) -> None:
        """Write formula text; "" clears it. Raises PropertyUnavailable if the slot is missing."""
        ...

    @abstractmethod
    def begin_undo_group(self, name: str) -> None:
        ...

    @abstractmethod
    def end_undo_group(self) -> None:
        ...
