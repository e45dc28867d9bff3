"""
Binding resolver: ties consumer layers to a controller. Each binding is a
record in the composition's binding table; the formula text written to the
layer is generated from it. Text references are still honoured when
counting, so formulas written by hand or by older tools are found too.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..config import guards_missing_controller
from ..controllers.kinds import ControllerKind, get_kind
from ..controllers.registry import ControllerRegistry
from ..errors import ControllerNotFound, HostError, NoSelection, PropertyUnavailable, RigError
from ..formulas.synth import references, references_prefix, synthesize
from .records import SLOTS, Binding

if TYPE_CHECKING:
    from ..scene.base import Composition, Layer

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^(?P<name>.*) \(\d+ layers?\)$")


@dataclass
class BindResult:
    controller_name: str
    kind: str
    applied: list[str] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)  # (layer name, message)

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    def to_dict(self) -> dict[str, Any]:
        return {
            "controller": self.controller_name,
            "kind": self.kind,
            "applied_count": self.applied_count,
            "applied": list(self.applied),
            "failures": [{"layer": n, "error": m} for n, m in self.failures],
        }


def display_name(name: str, count: int) -> str:
    return f"{name} ({count} layers)"


def strip_label(label: str) -> str:
    """'Controller 2 (3 layers)' -> 'Controller 2'; labels without the suffix pass through."""
    m = _LABEL_RE.match(label)
    return m.group("name") if m else label


class BindingResolver:

    def __init__(self, registry: ControllerRegistry | None = None, config: dict[str, Any] | None = None):
        self.config = config
        self.registry = registry or ControllerRegistry(config)

    def _formula(self, comp: "Composition", layer: "Layer", slot: str) -> str:
        if not layer.has_slot(slot):
            return ""
        return comp.get_formula(layer, slot)

    def _consumers(self, comp: "Composition") -> list["Layer"]:
        return [layer for layer in comp.layers() if not self.registry.is_controller(layer)]

    # --- counting and labels ---

    def count_bound(self, comp: "Composition", controller_name: str) -> int:
        """Non-controller layers whose position is driven by this controller. Display only."""
        count = 0
        for layer in self._consumers(comp):
            record = comp.bindings.get(layer.layer_id, "position")
            if record is not None and record.controller_name == controller_name:
                count += 1
            elif references(self._formula(comp, layer, "position"), controller_name):
                count += 1
        return count

    def display_label(self, comp: "Composition", controller: "Layer") -> str:
        return display_name(controller.name, self.count_bound(comp, controller.name))

    def list_labels(self, comp: "Composition") -> list[str]:
        return [self.display_label(comp, c) for c in self.registry.find_all(comp)]

    def resolve_selection(self, comp: "Composition", label: str) -> "Layer":
        """Controller layer for a dropdown label; ControllerNotFound if no layer has that name."""
        name = strip_label(label)
        layer = comp.layer_by_name(name)
        if layer is None:
            raise ControllerNotFound(name, composition=comp.name)
        return layer

    def selected_consumers(self, comp: "Composition") -> list["Layer"]:
        selected = comp.selected_layers()
        if not selected:
            raise NoSelection(composition=comp.name)
        return selected

    # --- binding ---

    def _required_slots(self, kind: ControllerKind, layer: "Layer") -> list[str]:
        if kind.name == "grid":
            return ["scale", "position"] if layer.three_d else ["scale"]
        return list(kind.slots)

    def bind_one(
        self,
        comp: "Composition",
        layer: "Layer",
        controller: "Layer",
        kind: "str | ControllerKind",
        time_offset: float = 0.0,
    ) -> list[Binding]:
        """Write formulas and records for one consumer. Missing slots raise before anything is written."""
        k = get_kind(kind)
        if layer is controller or self.registry.is_controller(layer):
            raise HostError(f"Layer {layer.name!r} is a controller and cannot be bound", layer=layer.name)
        slots = self._required_slots(k, layer)
        for slot in slots:
            if not layer.has_slot(slot):
                raise PropertyUnavailable(layer.name, slot)
        guard = guards_missing_controller(k.name, self.config)
        written: list[Binding] = []
        for slot in slots:
            text = synthesize(
                k.name,
                slot,
                controller.name,
                time_offset=time_offset,
                guard=guard,
                three_d=layer.three_d,
            )
            if text is None:
                continue
            comp.set_formula(layer, slot, text)
            binding = Binding(
                consumer_id=layer.layer_id,
                controller_name=controller.name,
                slot=slot,
                kind=k.name,
                time_offset=time_offset if k.name == "y_driven" else 0.0,
            )
            previous = comp.bindings.put(binding)
            if previous is not None and previous.controller_name != controller.name:
                logger.debug("Rebound %s.%s from %r to %r", layer.name, slot, previous.controller_name, controller.name)
            written.append(binding)
        return written

    def bind(
        self,
        comp: "Composition",
        consumers: list["Layer"],
        controller: "Layer",
        kind: "str | ControllerKind",
        time_offset: float = 0.0,
    ) -> BindResult:
        """Bind every consumer; one layer's failure is recorded and the rest continue."""
        k = get_kind(kind)
        result = BindResult(controller_name=controller.name, kind=k.name)
        for layer in consumers:
            try:
                self.bind_one(comp, layer, controller, k, time_offset)
            except RigError as e:
                logger.warning("Failed to apply %s formula to %r: %s", k.name, layer.name, e.message)
                result.failures.append((layer.name, e.message))
                continue
            result.applied.append(layer.name)
        return result

    # --- discovery and removal ---

    def is_bound(self, comp: "Composition", layer: "Layer", prefix: str | None = None) -> bool:
        """Layer has a binding record, or position/scale text referencing a controller-prefixed layer."""
        if comp.bindings.for_consumer(layer.layer_id):
            return True
        p = prefix or self.registry.prefix
        return any(references_prefix(self._formula(comp, layer, slot), p) for slot in SLOTS)

    def bound_consumers(self, comp: "Composition") -> list["Layer"]:
        """Bound non-controller layers; a layer whose formulas cannot be read is logged and skipped."""
        bound = []
        for layer in self._consumers(comp):
            try:
                if self.is_bound(comp, layer):
                    bound.append(layer)
            except RigError as e:
                logger.warning("Could not read formulas on %r: %s", layer.name, e.message)
        return bound

    def unbind(self, comp: "Composition", layer: "Layer") -> None:
        """Clear position and scale formulas and drop the layer's records."""
        for slot in SLOTS:
            if layer.has_slot(slot):
                comp.set_formula(layer, slot, "")
        comp.bindings.remove(layer.layer_id)
