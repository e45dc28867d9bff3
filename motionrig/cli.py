"""
CLI: drive the rig against a composition saved as JSON.
Usage:
  motionrig new comp.json --width 1920 --height 1080 --fps 30
  motionrig layer comp.json "Dot" --pos 400 300
  motionrig create comp.json circular
  motionrig select comp.json Dot "Dot 2"
  motionrig apply comp.json --kind circular --controller "Controller (0 layers)"
  motionrig list comp.json
  motionrig show comp.json --time 1.5
  motionrig cleanup comp.json
"""
import argparse
import json
import logging
import sys
from pathlib import Path

from .actions import Rig
from .config import load_config
from .controllers.kinds import KINDS
from .errors import RigError
from .formulas.preview import preview_value
from .log_utils import setup_logging
from .scene.memory import MemoryComposition, load_composition, save_composition

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="motionrig",
        description="Controller rigs for layered compositions: create controllers, bind layers, clean up.",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config YAML (default: config/default.yaml).")
    parser.add_argument("--log-level", type=str, default=None, help="Override logging level (e.g. DEBUG).")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create an empty composition file.")
    p.add_argument("comp", type=Path)
    p.add_argument("--name", type=str, default="Comp 1")
    p.add_argument("--width", type=int, default=1920)
    p.add_argument("--height", type=int, default=1080)
    p.add_argument("--fps", type=float, default=30.0)

    p = sub.add_parser("layer", help="Add a layer to the composition.")
    p.add_argument("comp", type=Path)
    p.add_argument("name", type=str)
    p.add_argument("--pos", type=float, nargs="+", default=None, help="Position x y [z].")
    p.add_argument("--3d", dest="three_d", action="store_true", help="Make it a 3D layer.")
    p.add_argument("--no-scale", action="store_true", help="Layer has no Scale property.")
    p.add_argument("--locked", action="store_true")

    p = sub.add_parser("create", help="Create a controller.")
    p.add_argument("comp", type=Path)
    p.add_argument("kind", choices=sorted(KINDS))

    p = sub.add_parser("list", help="List controllers with bound layer counts.")
    p.add_argument("comp", type=Path)

    p = sub.add_parser("select", help="Set the layer selection by name.")
    p.add_argument("comp", type=Path)
    p.add_argument("names", nargs="+")

    p = sub.add_parser("apply", help="Bind the selected layers to a controller.")
    p.add_argument("comp", type=Path)
    p.add_argument("--kind", choices=sorted(KINDS), default="circular")
    p.add_argument("--controller", type=str, default=None, help="Controller name or dropdown label.")
    p.add_argument("--offset", type=int, default=None, help="Time offset in frames (y_driven).")

    p = sub.add_parser("cleanup", help="Delete all controllers and their formulas.")
    p.add_argument("comp", type=Path)

    p = sub.add_parser("show", help="Print layers, formulas and previewed values.")
    p.add_argument("comp", type=Path)
    p.add_argument("--time", type=float, default=0.0)
    p.add_argument("--formulas", action="store_true", help="Print full formula text.")
    return parser


def _cmd_layer(comp: MemoryComposition, args: argparse.Namespace) -> None:
    if args.pos is not None:
        position = tuple(args.pos)
    else:
        position = comp.center
    slots = ("position",) if args.no_scale else ("position", "scale")
    layer = comp.add_layer(args.name, position=position, three_d=args.three_d, slots=slots, locked=args.locked)
    print(f"Added layer {layer.name} (index {comp.index_of(layer)})")


def _cmd_select(comp: MemoryComposition, names: list[str]) -> None:
    layers = []
    for name in names:
        layer = comp.layer_by_name(name)
        if layer is None:
            raise RigError(f"No layer named {name!r}", composition=comp.name)
        layers.append(layer)
    comp.select(layers)
    print(f"Selected {len(layers)} layer(s)")


def _cmd_show(rig: Rig, comp: MemoryComposition, time: float, full: bool) -> None:
    print(f"{comp.name}: {comp.width}x{comp.height}, {comp.num_layers} layer(s), t={time:g}s")
    for index, layer in enumerate(comp.layers(), start=1):
        tag = "controller" if rig.registry.is_controller(layer) else "layer"
        print(f"{index:3d}  {layer.name}  [{tag}]")
        if tag == "controller":
            for param in layer.effects:
                print(f"       {param.name} = {param.value}")
            continue
        for binding in comp.bindings.for_consumer(layer.layer_id):
            try:
                value = preview_value(comp, layer, binding.slot, time, rig.config)
                shown = "[" + ", ".join(f"{v:.2f}" for v in value) + "]"
            except (LookupError, RigError) as e:
                shown = f"error: {e}"
            print(f"       {binding.slot} <- {binding.controller_name} ({binding.kind}) = {shown}")
        if full:
            for slot, text in sorted(layer.formulas.items()):
                print(f"       --- {slot} ---")
                print("       " + text.replace("\n", "\n       "))


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        config = load_config(args.config)
    except RigError as e:
        print(e.message, file=sys.stderr)
        return 1
    setup_logging(config, level=args.log_level)
    rig = Rig(config)

    if args.command == "new":
        comp = MemoryComposition(name=args.name, width=args.width, height=args.height, frame_rate=args.fps)
        save_composition(comp, args.comp)
        print(f"Created {args.comp}")
        return 0

    try:
        comp = load_composition(args.comp)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read composition {args.comp}: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "layer":
            _cmd_layer(comp, args)
        elif args.command == "create":
            ref = rig.create_controller(comp, args.kind)
            print(f"Created new controller: {ref.name}")
        elif args.command == "list":
            controllers = rig.list_controllers(comp)
            if not controllers:
                print("No controllers.")
            for info in controllers:
                print(info.label)
            return 0
        elif args.command == "select":
            _cmd_select(comp, args.names)
        elif args.command == "apply":
            result = rig.apply_binding(comp, args.controller, kind=args.kind, offset_frames=args.offset)
            print(f"Applied {result.kind} formulas to {result.applied_count} layer(s) using controller: {result.controller_name}")
            for name, message in result.failures:
                print(f"  failed: {name}: {message}", file=sys.stderr)
        elif args.command == "cleanup":
            report = rig.cleanup(comp)
            print(report.summary())
            for name, message in report.failures:
                print(f"  failed: {name}: {message}", file=sys.stderr)
        elif args.command == "show":
            _cmd_show(rig, comp, args.time, args.formulas)
            return 0
    except RigError as e:
        print(e.message, file=sys.stderr)
        return 1

    save_composition(comp, args.comp)
    return 0


if __name__ == "__main__":
    sys.exit(main())
