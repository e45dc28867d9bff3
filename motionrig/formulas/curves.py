"""
Numeric reference for the formulas the host evaluates each frame. Our maths
only; the synthesized expression text computes the same values in the host.
Used by previews and tests.
"""
import math
from typing import Sequence

import numpy as np

Vector = Sequence[float]


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def ease_out(u: float, v1: float = 0.0, v2: float = 1.0) -> float:
    """Quadratic ease-out of u in [0, 1] onto v1→v2; slope is 0 at u=1."""
    u = clamp(u, 0.0, 1.0)
    return v1 + (v2 - v1) * (1.0 - (1.0 - u) ** 2)


def ease(t: float, t_min: float, t_max: float, v1: float, v2: float) -> float:
    """Ease in-out remap of t from [t_min, t_max] onto v1→v2 (smoothstep), clamped."""
    if t_max == t_min:
        return v1 if t < t_min else v2
    u = clamp((t - t_min) / (t_max - t_min), 0.0, 1.0)
    return v1 + (v2 - v1) * (3 * u * u - 2 * u * u * u)


def linear(t: float, t_min: float, t_max: float, v1: float, v2: float) -> float:
    """Linear remap of t from [t_min, t_max] onto v1→v2, clamped."""
    if t_max == t_min:
        return v1 if t < t_min else v2
    u = clamp((t - t_min) / (t_max - t_min), 0.0, 1.0)
    return v1 + (v2 - v1) * u


def _pad(a: Vector, size: int) -> np.ndarray:
    arr = np.zeros(size, dtype=float)
    arr[: len(a)] = np.asarray(a, dtype=float)
    return arr


def distance(a: Vector, b: Vector) -> float:
    """Euclidean distance; a 2D point is treated as z=0 against a 3D one."""
    size = max(len(a), len(b))
    return float(np.linalg.norm(_pad(a, size) - _pad(b, size)))


# --- circular motion ---

def stagger_time(time: float, index: int, layer_delay: float) -> float:
    """Layer 1 starts at time 0; each following layer starts layer_delay later."""
    return time - (index - 1) * layer_delay


def growth(t: float, grow_duration: float) -> float:
    """0 at t<=0, eases out to 1 at t=grow_duration, 1 afterwards."""
    if grow_duration <= 0:
        return 1.0 if t > 0 else 0.0
    return ease_out(clamp(t / grow_duration, 0.0, 1.0))


def circular_position(
    time: float,
    index: int,
    center: Vector,
    *,
    grow_duration: float,
    max_radius: float,
    revolutions_per_second: float,
    layer_delay: float,
) -> np.ndarray:
    t = stagger_time(time, index, layer_delay)
    radius = max_radius * growth(t, grow_duration)
    angle = t * revolutions_per_second * 2 * math.pi
    return np.asarray(center[:2], dtype=float) + np.array([math.cos(angle) * radius, math.sin(angle) * radius])


def circular_scale(time: float, index: int, *, grow_duration: float, layer_delay: float) -> np.ndarray:
    s = growth(stagger_time(time, index, layer_delay), grow_duration) * 100
    return np.array([s, s])


# --- grid distance ---

def distance_scale(dist: float, *, max_distance: float, min_scale: float, max_scale: float) -> float:
    """max_scale at distance 0, min_scale at max_distance and beyond, eased between."""
    return ease(dist, 0.0, max_distance, max_scale, min_scale)


def grid_scale(
    layer_world: Vector,
    controller_world: Vector,
    *,
    max_distance: float,
    min_scale: float,
    max_scale: float,
) -> np.ndarray:
    s = distance_scale(
        distance(layer_world, controller_world),
        max_distance=max_distance,
        min_scale=min_scale,
        max_scale=max_scale,
    )
    return np.array([s, s])


def grid_z_offset(value: Vector, layer_world: Vector, controller_world: Vector, *, z_offset: float) -> np.ndarray:
    """
    Adds distance / z_offset * 100 to the current Z; X and Y are left as they
    are. A Z Offset of 0 leaves Z unchanged.
    """
    out = _pad(value, 3)
    if z_offset == 0:
        return out
    out[2] += distance(layer_world, controller_world) / z_offset * 100
    return out


# --- y driven ---

def y_driven_scale(
    layer_pos: Vector,
    controller_pos: Vector | None,
    *,
    start_x: float,
    min_value: float,
    max_value: float,
    prior: Vector | None = None,
) -> np.ndarray:
    """
    Scale from the controller's distance to the layer, both sampled at the
    offset time. Controller at or right of the layer gives (max_value,
    max_value), also on 3D layers; missing controller gives the prior value
    unchanged.
    """
    dims = 3 if len(layer_pos) > 2 else 2
    if controller_pos is None:
        return np.asarray(prior if prior is not None else [100.0] * dims, dtype=float)
    if controller_pos[0] >= layer_pos[0]:
        return np.array([float(max_value), float(max_value)])
    dist = distance(controller_pos, layer_pos)
    reference = [start_x, layer_pos[1], layer_pos[2] if dims == 3 else 0.0]
    max_dist = distance(reference, layer_pos)
    norm = clamp(dist / max_dist, 0.0, 1.0) if max_dist != 0 else 0.0
    return np.full(dims, linear(norm, 0.0, 1.0, max_value, min_value))
