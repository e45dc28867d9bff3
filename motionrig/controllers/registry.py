"""
Controller registry: create, find and enumerate controller layers in a
composition. Listeners subscribe to be told when the set of controllers
changes (a panel refreshes its dropdown on these events).
"""
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterator

from ..config import controller_prefix, schema_policy
from ..errors import HostError
from .kinds import ControllerKind, get_kind

if TYPE_CHECKING:
    from ..scene.base import Composition, Layer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryChanged:
    """Notification sent to listeners after controllers are created, upgraded or deleted."""
    composition: str
    reason: str                       # created | upgraded | deleted
    names: tuple[str, ...] = field(default_factory=tuple)


Listener = Callable[[RegistryChanged], None]


class ControllerRegistry:

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config
        self.prefix = controller_prefix(config)
        self.base_name = (config or {}).get("controllers", {}).get("base_name", self.prefix)
        self.policy = schema_policy(config)
        self._listeners: list[Listener] = []

    # --- observers ---

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, comp: "Composition", reason: str, names: list[str]) -> None:
        event = RegistryChanged(composition=comp.name, reason=reason, names=tuple(names))
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Registry listener failed on %s", reason)

    # --- lookup ---

    def is_controller(self, layer: "Layer") -> bool:
        return layer.name.startswith(self.prefix)

    def iter_all(self, comp: "Composition") -> Iterator["Layer"]:
        for layer in comp.layers():
            if self.is_controller(layer):
                yield layer

    def find_all(self, comp: "Composition") -> list["Layer"]:
        """Controller layers (name starts with the prefix), top to bottom."""
        return list(self.iter_all(comp))

    def exists_by_name(self, comp: "Composition", name: str) -> bool:
        return any(layer.name == name for layer in comp.layers())

    def find(self, comp: "Composition", name: str) -> "Layer | None":
        return comp.layer_by_name(name)

    def most_recent(self, comp: "Composition") -> "Layer | None":
        """Last controller in layer order, the default choice in the panel."""
        controllers = self.find_all(comp)
        return controllers[-1] if controllers else None

    def unique_name(self, comp: "Composition", base_name: str | None = None) -> str:
        """base, then "base 1", "base 2", ... until one is not taken."""
        base = base_name or self.base_name
        name = base
        counter = 1
        while self.exists_by_name(comp, name):
            name = f"{base} {counter}"
            counter += 1
        return name

    # --- creation ---

    def _materialize(self, comp: "Composition", name: str, kind: ControllerKind) -> "Layer":
        layer = comp.add_null(name)
        layer.label = kind.label
        layer.motion_blur = kind.motion_blur
        layer.effects.owner = name
        layer.effects.initialize(list(kind.schema))
        logger.info("Created %s controller %r in %s", kind.name, name, comp.name)
        return layer

    def create_unique(
        self,
        comp: "Composition",
        kind: "str | ControllerKind" = "circular",
        base_name: str | None = None,
    ) -> "Layer":
        """New controller with the first free name and the kind's full schema."""
        k = get_kind(kind)
        name = self.unique_name(comp, base_name)
        layer = self._materialize(comp, name, k)
        self._notify(comp, "created", [name])
        return layer

    def find_or_create(
        self,
        comp: "Composition",
        kind: "str | ControllerKind",
        name: str | None = None,
    ) -> "Layer":
        """
        Controller with exactly this name; created if absent. An existing one
        gets any missing parameters of the schema under the configured policy.
        """
        k = get_kind(kind)
        exact = name or k.canonical_name or self.base_name
        layer = self.find(comp, exact)
        if layer is None:
            layer = self._materialize(comp, exact, k)
            self._notify(comp, "created", [exact])
            return layer
        changed = layer.effects.upgrade(list(k.schema), self.policy)
        if changed:
            logger.info("Upgraded controller %r parameters: %s", exact, ", ".join(changed))
            self._notify(comp, "upgraded", [exact])
        return layer

    # --- deletion ---

    def delete(self, comp: "Composition", controller: "str | Layer") -> None:
        """Remove a controller given by name (first match) or as the layer itself."""
        if isinstance(controller, str):
            layer = self.find(comp, controller)
            name = controller
        else:
            layer = controller
            name = controller.name
        if layer is None or not self.is_controller(layer):
            raise HostError(f"No controller named {name!r}", layer=name)
        comp.remove_layer(layer)
        self._notify(comp, "deleted", [name])
