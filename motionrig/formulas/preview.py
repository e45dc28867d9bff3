"""
Preview: value a bound slot would take at time t, computed from the binding
record and the controller's current parameters. Layers in the in-memory
composition are not animated, so positions are constant over time.
"""
from typing import TYPE_CHECKING, Any

import numpy as np

from ..config import guards_missing_controller
from . import curves

if TYPE_CHECKING:
    from ..scene.base import Composition, Layer


def _world(layer: "Layer") -> list[float]:
    """Layer origin in comp space (position minus anchor; no parenting)."""
    size = max(len(layer.position), len(layer.anchor))
    pos = list(layer.position) + [0.0] * (size - len(layer.position))
    anchor = list(layer.anchor) + [0.0] * (size - len(layer.anchor))
    return [p - a for p, a in zip(pos, anchor)]


def _static_value(layer: "Layer", slot: str) -> np.ndarray:
    if slot == "position":
        return np.asarray(layer.position, dtype=float)
    return np.full(3 if layer.three_d else 2, 100.0)


def preview_value(
    comp: "Composition",
    layer: "Layer",
    slot: str,
    time: float,
    config: dict[str, Any] | None = None,
) -> np.ndarray:
    """
    Value of the layer's slot at time. Unbound slots return the static value.
    A binding whose controller is gone returns the static value when the kind
    guards against it, otherwise raises LookupError (the host would error).
    """
    binding = comp.bindings.get(layer.layer_id, slot)
    if binding is None:
        return _static_value(layer, slot)
    ctrl = comp.layer_by_name(binding.controller_name)
    if ctrl is None:
        if guards_missing_controller(binding.kind, config):
            return _static_value(layer, slot)
        raise LookupError(f"Layer {binding.controller_name!r} referenced by {layer.name!r} does not exist")
    p = ctrl.effects.get
    if binding.kind == "circular":
        index = comp.index_of(layer)
        if slot == "position":
            return curves.circular_position(
                time,
                index,
                comp.center,
                grow_duration=p("Grow Duration"),
                max_radius=p("Max Radius"),
                revolutions_per_second=p("Revolutions Per Second"),
                layer_delay=p("Layer Delay"),
            )
        return curves.circular_scale(time, index, grow_duration=p("Grow Duration"), layer_delay=p("Layer Delay"))
    if binding.kind == "grid":
        if slot == "scale":
            return curves.grid_scale(
                _world(layer),
                ctrl.position,
                max_distance=p("Max Distance"),
                min_scale=p("Min Scale"),
                max_scale=p("Max Scale"),
            )
        return curves.grid_z_offset(layer.position, _world(layer), ctrl.position, z_offset=p("Z Offset"))
    if binding.kind == "y_driven":
        return curves.y_driven_scale(
            layer.position,
            ctrl.position,
            start_x=p("Start Pos")[0],
            min_value=p("Min Value"),
            max_value=p("Max Value"),
            prior=_static_value(layer, slot),
        )
    raise ValueError(f"Unknown binding kind {binding.kind!r}")
