"""
Formula synthesis: host expression text for each controller kind and slot.
Pure functions of (controller name, kind, time offset, guard). The layer's
index and the clock are read by the host at evaluation time (`index`, `time`).
"""
import json
import re

LAYER_REF = "thisComp.layer({})"
_REF_RE = re.compile(r'thisComp\.layer\(("(?:[^"\\]|\\.)*")\)')


def _quote(name: str) -> str:
    return json.dumps(name, ensure_ascii=False)


def layer_ref(name: str) -> str:
    """Host reference to a layer by name, as it appears in formula text."""
    return LAYER_REF.format(_quote(name))


def _num(x: float) -> str:
    return format(float(x), ".12g")


def _slider(var: str, effect: str) -> str:
    return f'var {var} = ctrl.effect({_quote(effect)})("Slider");\n'


def _guarded(controller_name: str, body: str, guard: bool) -> str:
    """Prefix the controller lookup; with guard, fall back to the property's own value."""
    head = f"var ctrl = {layer_ref(controller_name)};\n"
    if not guard:
        return head + body
    indented = "".join("  " + line + "\n" for line in body.rstrip("\n").split("\n"))
    return head + "if (!ctrl) { value; } else {\n" + indented + "}"


def circular_position(controller_name: str, *, guard: bool = False) -> str:
    """Spiral out from the comp center: radius grows with an ease-out, angle turns with time."""
    body = (
        _slider("growDuration", "Grow Duration")
        + _slider("maxRadius", "Max Radius")
        + _slider("revolutionsPerSecond", "Revolutions Per Second")
        + _slider("layerDelay", "Layer Delay")
        + "var indexOffset = (index - 1) * layerDelay;\n"
        "var t = time - indexOffset;\n"
        "var compCenter = [thisComp.width / 2, thisComp.height / 2];\n"
        "var growthFactor = clamp(t / growDuration, 0, 1);\n"
        "growthFactor = easeOut(growthFactor, 0, 1);\n"
        "var radius = maxRadius * growthFactor;\n"
        "var angle = t * revolutionsPerSecond * 2 * Math.PI;\n"
        "var x = Math.cos(angle) * radius;\n"
        "var y = Math.sin(angle) * radius;\n"
        "compCenter + [x, y];"
    )
    return _guarded(controller_name, body, guard)


def circular_scale(controller_name: str, *, guard: bool = False) -> str:
    """Uniform scale 0→100% on the same growth curve as the position."""
    body = (
        _slider("growDuration", "Grow Duration")
        + _slider("layerDelay", "Layer Delay")
        + "var indexOffset = (index - 1) * layerDelay;\n"
        "var t = time - indexOffset;\n"
        "var scaleFactor = clamp(t / growDuration, 0, 1);\n"
        "scaleFactor = easeOut(scaleFactor, 0, 1);\n"
        "var scale = scaleFactor * 100;\n"
        "[scale, scale];"
    )
    return _guarded(controller_name, body, guard)


def grid_scale(controller_name: str, *, guard: bool = False) -> str:
    body = (
        "var pos = thisLayer.toWorld([0,0]);\n"
        "var ctrlPos = ctrl.toWorld(ctrl.anchorPoint);\n"
        + _slider("maxDist", "Max Distance")
        + _slider("minScale", "Min Scale")
        + _slider("maxScale", "Max Scale")
        + "var dist = length(pos, ctrlPos);\n"
        "var scaleFactor = ease(dist, 0, maxDist, maxScale, minScale);\n"
        "[scaleFactor, scaleFactor];"
    )
    return _guarded(controller_name, body, guard)


def grid_z_position(controller_name: str, *, guard: bool = False) -> str:
    """Pushes Z by distance / Z Offset * 100 on top of the keyed position; 0 leaves Z as is."""
    body = (
        "var pos = thisLayer.toWorld([0,0]);\n"
        "var ctrlPos = ctrl.toWorld(ctrl.anchorPoint);\n"
        + _slider("zOffset", "Z Offset")
        + "var dist = length(pos, ctrlPos);\n"
        "zOffset !== 0 ? value + [0, 0, dist / zOffset * 100] : value;"
    )
    return _guarded(controller_name, body, guard)


def y_driven_scale(controller_name: str, offset_seconds: float = 0.0, *, guard: bool = True) -> str:
    body = (
        _slider("minVal", "Min Value")
        + _slider("maxVal", "Max Value")
        + f"var t = time - {_num(offset_seconds)};\n"
        "var ctrlPos = ctrl.position.valueAtTime(t);\n"
        "var layerPos = thisLayer.position.valueAtTime(t);\n"
        "if (ctrlPos[0] >= layerPos[0]) {\n"
        "  [maxVal, maxVal];\n"
        "} else {\n"
        '  var startX = ctrl.effect("Start Pos")("Point")[0];\n'
        "  var dist = length(ctrlPos - layerPos);\n"
        "  var maxDist = length([startX, layerPos[1], layerPos.length > 2 ? layerPos[2] : 0] - layerPos);\n"
        "  var norm = maxDist !== 0 ? clamp(dist / maxDist, 0, 1) : 0;\n"
        "  var remapped = linear(norm, 0, 1, maxVal, minVal);\n"
        "  [remapped, remapped, layerPos.length > 2 ? remapped : undefined].filter(function(v){return v!==undefined;});\n"
        "}"
    )
    return _guarded(controller_name, body, guard)


def synthesize(
    kind: str,
    slot: str,
    controller_name: str,
    *,
    time_offset: float = 0.0,
    guard: bool = False,
    three_d: bool = False,
) -> str | None:
    """Formula for one (kind, slot), or None when the kind does not drive that slot."""
    if kind == "circular":
        if slot == "position":
            return circular_position(controller_name, guard=guard)
        if slot == "scale":
            return circular_scale(controller_name, guard=guard)
    elif kind == "grid":
        if slot == "scale":
            return grid_scale(controller_name, guard=guard)
        if slot == "position" and three_d:
            return grid_z_position(controller_name, guard=guard)
    elif kind == "y_driven":
        if slot == "scale":
            return y_driven_scale(controller_name, time_offset, guard=guard)
    else:
        raise ValueError(f"Unknown formula kind {kind!r}")
    return None


def referenced_layers(text: str) -> list[str]:
    """Layer names referenced via thisComp.layer("...") in formula text, in order."""
    names: list[str] = []
    for m in _REF_RE.finditer(text or ""):
        try:
            name = json.loads(m.group(1))
        except ValueError:
            continue
        if name not in names:
            names.append(name)
    return names


def references(text: str, controller_name: str) -> bool:
    """True if the text references exactly this controller."""
    return layer_ref(controller_name) in (text or "")


def references_prefix(text: str, prefix: str) -> bool:
    """True if the text references any layer whose name starts with prefix."""
    return any(name.startswith(prefix) for name in referenced_layers(text))
