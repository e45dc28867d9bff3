# Controllers: parameter store, fixed kind schemas, registry

from .params import Parameter, ParameterSpec, ParameterStore
from .kinds import CIRCULAR, GRID, Y_DRIVEN, KINDS, ControllerKind, get_kind
from .registry import ControllerRegistry, RegistryChanged

__all__ = [
    "Parameter",
    "ParameterSpec",
    "ParameterStore",
    "CIRCULAR",
    "GRID",
    "Y_DRIVEN",
    "KINDS",
    "ControllerKind",
    "get_kind",
    "ControllerRegistry",
    "RegistryChanged",
]
