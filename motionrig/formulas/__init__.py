# Formulas: expression text synthesis, numeric reference curves, previews

from .synth import (
    circular_position,
    circular_scale,
    grid_scale,
    grid_z_position,
    y_driven_scale,
    synthesize,
    layer_ref,
    referenced_layers,
    references,
    references_prefix,
)
from .preview import preview_value

__all__ = [
    "circular_position",
    "circular_scale",
    "grid_scale",
    "grid_z_position",
    "y_driven_scale",
    "synthesize",
    "layer_ref",
    "referenced_layers",
    "references",
    "references_prefix",
    "preview_value",
]
