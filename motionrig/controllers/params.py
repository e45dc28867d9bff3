"""
Typed named parameters attached to a controller layer (slider and point controls).
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from ..errors import ParameterNotFound

logger = logging.getLogger(__name__)

PARAM_TYPES = ("scalar", "point2", "point3")

Value = float | tuple[float, ...]


@dataclass(frozen=True)
class ParameterSpec:
    """One schema entry: name, type and the default assigned at creation."""
    name: str
    type: str = "scalar"             # scalar | point2 | point3
    default: Any = 0.0
    legacy_defaults: tuple[Any, ...] = ()  # defaults shipped by earlier schema versions

    def __post_init__(self) -> None:
        if self.type not in PARAM_TYPES:
            raise ValueError(f"Unknown parameter type {self.type!r} for {self.name!r}")


@dataclass
class Parameter:
    name: str
    type: str
    value: Value

    def to_dict(self) -> dict[str, Any]:
        v = list(self.value) if isinstance(self.value, tuple) else self.value
        return {"name": self.name, "type": self.type, "value": v}


def coerce_value(ptype: str, value: Any) -> Value:
    """Normalize a raw value to the parameter type (float, or tuple of 2/3 floats)."""
    if ptype == "scalar":
        if isinstance(value, (list, tuple)):
            raise ValueError(f"Scalar parameter expects a number, got {value!r}")
        return float(value)
    size = 2 if ptype == "point2" else 3
    items = [float(v) for v in value]
    if len(items) < size:
        items += [0.0] * (size - len(items))
    return tuple(items[:size])


@dataclass
class ParameterStore:
    """
    Ordered parameter slots of one controller. The host UI edits values
    independently after initialize(); rig code reads them by name.
    """
    owner: str = ""
    _params: dict[str, Parameter] = field(default_factory=dict)

    def initialize(self, schema: list[ParameterSpec]) -> None:
        """Create one slot per schema entry, in order, each set to its default."""
        for spec in schema:
            self._params[spec.name] = Parameter(spec.name, spec.type, coerce_value(spec.type, spec.default))

    def get(self, name: str) -> Value:
        try:
            return self._params[name].value
        except KeyError:
            raise ParameterNotFound(self.owner, name) from None

    def set(self, name: str, value: Any) -> None:
        param = self._params.get(name)
        if param is None:
            raise ParameterNotFound(self.owner, name)
        param.value = coerce_value(param.type, value)

    def has(self, name: str) -> bool:
        return name in self._params

    def names(self) -> list[str]:
        return list(self._params)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params.values())

    def __len__(self) -> int:
        return len(self._params)

    def set_default_if_missing(self, spec: ParameterSpec, policy: str = "overwrite") -> bool:
        """
        Create the parameter with its default if absent. If present:
        - "overwrite": reset to the default whenever the value differs.
        - "preserve-if-customized": reset only when the value still equals a
          default from an earlier schema version; user edits are kept.
        Returns True if the store changed.
        """
        default = coerce_value(spec.type, spec.default)
        param = self._params.get(spec.name)
        if param is None:
            self._params[spec.name] = Parameter(spec.name, spec.type, default)
            logger.debug("Added parameter %r to %s", spec.name, self.owner)
            return True
        if param.value == default:
            return False
        if policy == "overwrite":
            param.value = default
            return True
        if policy == "preserve-if-customized":
            legacy = {coerce_value(spec.type, v) for v in spec.legacy_defaults}
            if param.value in legacy:
                logger.debug("Upgrading %s.%s from legacy default %r", self.owner, spec.name, param.value)
                param.value = default
                return True
            return False
        raise ValueError(f"Unknown schema policy {policy!r}")

    def upgrade(self, schema: list[ParameterSpec], policy: str = "overwrite") -> list[str]:
        """Apply set_default_if_missing to every entry; returns names that changed."""
        return [spec.name for spec in schema if self.set_default_if_missing(spec, policy)]

    def to_dict(self) -> list[dict[str, Any]]:
        return [p.to_dict() for p in self._params.values()]

    @classmethod
    def from_dict(cls, owner: str, items: list[dict[str, Any]]) -> "ParameterStore":
        store = cls(owner=owner)
        for item in items:
            ptype = item.get("type", "scalar")
            store._params[item["name"]] = Parameter(item["name"], ptype, coerce_value(ptype, item["value"]))
        return store
