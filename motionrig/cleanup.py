"""
Cleanup: remove every controller and every formula that references one.
Failures on one layer are logged and counted; the sweep carries on.
"""
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .binding.resolver import BindingResolver
from .controllers.registry import ControllerRegistry
from .errors import RigError

if TYPE_CHECKING:
    from .scene.base import Composition

logger = logging.getLogger(__name__)


@dataclass
class SweepReport:
    cleaned_count: int = 0
    deleted_count: int = 0
    failures: list[tuple[str, str]] = field(default_factory=list)  # (layer name, message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "cleaned_count": self.cleaned_count,
            "deleted_count": self.deleted_count,
            "failures": [{"layer": n, "error": m} for n, m in self.failures],
        }

    def summary(self) -> str:
        return (
            f"Cleaned up {self.cleaned_count} layer(s) and deleted {self.deleted_count} controller(s)."
        )


class CleanupCoordinator:

    def __init__(self, resolver: BindingResolver | None = None, config: dict[str, Any] | None = None):
        self.resolver = resolver or BindingResolver(config=config)
        self.registry: ControllerRegistry = self.resolver.registry

    def sweep(self, comp: "Composition") -> SweepReport:
        """
        1. collect controllers, 2. collect bound consumers, 3. clear their
        position and scale formulas, 4. delete the controllers.
        """
        report = SweepReport()
        controllers = self.registry.find_all(comp)
        consumers = self.resolver.bound_consumers(comp)

        for layer in consumers:
            try:
                self.resolver.unbind(comp, layer)
            except RigError as e:
                logger.warning("Could not clear formulas on %r: %s", layer.name, e.message)
                report.failures.append((layer.name, e.message))
                continue
            report.cleaned_count += 1

        for ctrl in controllers:
            try:
                self.registry.delete(comp, ctrl)
            except RigError as e:
                logger.warning("Could not delete controller %r: %s", ctrl.name, e.message)
                report.failures.append((ctrl.name, e.message))
                continue
            report.deleted_count += 1

        logger.info(
            "Sweep of %s: cleaned %d layer(s), deleted %d controller(s), %d failure(s)",
            comp.name, report.cleaned_count, report.deleted_count, len(report.failures),
        )
        return report
