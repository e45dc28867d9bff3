"""
Controller kinds: each kind has a fixed parameter schema, a label colour and
the formula slots it drives. Creating a controller of a kind always
instantiates the full schema.
"""
from dataclasses import dataclass

from ..errors import UnknownControllerKind
from .params import ParameterSpec

CANONICAL_NAME = "Controller"


@dataclass(frozen=True)
class ControllerKind:
    name: str
    label: int                      # host label colour index
    schema: tuple[ParameterSpec, ...]
    slots: tuple[str, ...]          # formula slots written on consumers
    canonical_name: str | None = None  # single shared controller instead of a numbered family
    motion_blur: bool = True


CIRCULAR = ControllerKind(
    name="circular",
    label=9,  # blue
    schema=(
        ParameterSpec("Grow Duration", default=2),
        ParameterSpec("Max Radius", default=200),
        ParameterSpec("Revolutions Per Second", default=0.1),
        ParameterSpec("Layer Delay", default=0.2),
    ),
    slots=("position", "scale"),
)

GRID = ControllerKind(
    name="grid",
    label=10,
    schema=(
        ParameterSpec("Max Distance", default=500),
        ParameterSpec("Min Scale", default=100),
        ParameterSpec("Max Scale", default=150),
        ParameterSpec("Z Offset", default=500),
    ),
    slots=("scale", "position"),  # position only on 3D layers
    canonical_name=CANONICAL_NAME,
    motion_blur=False,
)

Y_DRIVEN = ControllerKind(
    name="y_driven",
    label=10,  # cyan
    schema=(
        ParameterSpec("Start Pos", "point2", (960, 0)),
        ParameterSpec("End Pos", "point2", (960, 1920)),
        ParameterSpec("Min Value", default=0),
        ParameterSpec("Max Value", default=100),
    ),
    slots=("scale",),
    canonical_name=CANONICAL_NAME,
)

KINDS: dict[str, ControllerKind] = {k.name: k for k in (CIRCULAR, GRID, Y_DRIVEN)}


def get_kind(kind: "str | ControllerKind") -> ControllerKind:
    if isinstance(kind, ControllerKind):
        return kind
    try:
        return KINDS[kind]
    except KeyError:
        raise UnknownControllerKind(kind, list(KINDS)) from None
