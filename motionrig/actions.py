"""
Rig actions: the operations a panel button (or the CLI) triggers. Each one
validates the composition, runs inside one undo group and returns a result
object; errors are RigError subclasses with a message for the user.
"""
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .binding.resolver import BindingResolver, BindResult
from .cleanup import CleanupCoordinator, SweepReport
from .config import load_config
from .controllers.kinds import get_kind
from .controllers.registry import ControllerRegistry, Listener
from .errors import NoActiveScene, NoControllers, NoSelection
from .log_utils import log_structured
from .scene.undo import undo_group

if TYPE_CHECKING:
    from .scene.base import Composition, Layer

logger = logging.getLogger(__name__)

_UNDO_NAMES = {
    "create": {
        "circular": "Create New Controller",
        "grid": "Create Controller",
        "y_driven": "Create Controller",
    },
    "apply": {
        "circular": "Apply Circular Motion Expression",
        "grid": "Apply Grid Distance Expression",
        "y_driven": "Apply Y-Driven Expression",
    },
    "cleanup": "Clean Up All Controllers",
}


@dataclass
class ControllerRef:
    name: str
    kind: str
    label: int
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass
class ControllerInfo:
    name: str
    bound_count: int

    @property
    def label(self) -> str:
        return f"{self.name} ({self.bound_count} layers)"


ApplyResult = BindResult


def _require_comp(comp: "Composition | None") -> "Composition":
    if comp is None:
        raise NoActiveScene()
    return comp


def _ref(layer: "Layer", kind: str) -> ControllerRef:
    return ControllerRef(
        name=layer.name,
        kind=kind,
        label=layer.label,
        parameters={p.name: p.value for p in layer.effects},
    )


class Rig:
    """Registry, resolver and cleanup wired to one config."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config if config is not None else load_config()
        self.registry = ControllerRegistry(self.config)
        self.resolver = BindingResolver(self.registry, self.config)
        self.cleaner = CleanupCoordinator(self.resolver, self.config)

    def subscribe(self, listener: Listener) -> None:
        self.registry.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self.registry.unsubscribe(listener)

    def create_controller(self, comp: "Composition | None", kind: str = "circular") -> ControllerRef:
        """
        circular: a new numbered controller each time.
        grid, y_driven: the shared "Controller", created or brought up to the
        current schema under the configured policy.
        """
        comp = _require_comp(comp)
        k = get_kind(kind)
        with undo_group(comp, _UNDO_NAMES["create"][k.name]):
            if k.canonical_name is None:
                layer = self.registry.create_unique(comp, k)
            else:
                layer = self.registry.find_or_create(comp, k)
        log_structured("info", action="create_controller", comp=comp.name, kind=k.name, controller=layer.name)
        return _ref(layer, k.name)

    def list_controllers(self, comp: "Composition | None") -> list[ControllerInfo]:
        comp = _require_comp(comp)
        return [
            ControllerInfo(name=c.name, bound_count=self.resolver.count_bound(comp, c.name))
            for c in self.registry.find_all(comp)
        ]

    def _resolve_controller(self, comp: "Composition", controller: "str | Layer | None", kind: str) -> "Layer":
        k = get_kind(kind)
        if k.canonical_name is None and not self.registry.find_all(comp):
            raise NoControllers(composition=comp.name)
        if controller is None:
            if k.canonical_name is None:
                return self.registry.most_recent(comp)
            existing = self.registry.find(comp, k.canonical_name)
            return existing if existing is not None else self.registry.find_or_create(comp, k)
        if isinstance(controller, str):
            return self.resolver.resolve_selection(comp, controller)
        return controller

    def apply_binding(
        self,
        comp: "Composition | None",
        controller: "str | Layer | None" = None,
        kind: str = "circular",
        consumers: "list[Layer] | None" = None,
        offset_frames: int | None = None,
    ) -> ApplyResult:
        """
        Bind consumers (default: the selected layers) to a controller, given
        as a layer, a dropdown label or a name. Without one, circular uses the
        most recent controller; grid and y_driven use the shared "Controller".
        """
        comp = _require_comp(comp)
        k = get_kind(kind)
        if consumers is None:
            consumers = self.resolver.selected_consumers(comp)
        elif not consumers:
            raise NoSelection(composition=comp.name)
        if offset_frames is None:
            offset_frames = int(self.config.get("apply", {}).get("offset_frames", 0))
        offset_seconds = comp.frame_duration * offset_frames

        with undo_group(comp, _UNDO_NAMES["apply"][k.name]):
            ctrl = self._resolve_controller(comp, controller, k.name)
            result = self.resolver.bind(comp, consumers, ctrl, k, time_offset=offset_seconds)

        log_structured(
            "warning" if result.failures else "info",
            action="apply_binding",
            comp=comp.name,
            kind=k.name,
            controller=ctrl.name,
            applied=result.applied_count,
            failed=len(result.failures),
            offset_frames=offset_frames,
        )
        return result

    def cleanup(self, comp: "Composition | None") -> SweepReport:
        comp = _require_comp(comp)
        with undo_group(comp, _UNDO_NAMES["cleanup"]):
            report = self.cleaner.sweep(comp)
        log_structured(
            "warning" if report.failures else "info",
            action="cleanup",
            comp=comp.name,
            cleaned=report.cleaned_count,
            deleted=report.deleted_count,
            failed=len(report.failures),
        )
        return report
