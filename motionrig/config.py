"""
Load and expose rig config (YAML). Used by actions to get the controller
prefix, schema upgrade policy, formula guards and logging settings.
"""
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

SCHEMA_POLICIES = ("overwrite", "preserve-if-customized")


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from YAML. Path is optional; defaults to config/default.yaml."""
    if config_path is None:
        config_path = _project_root() / "config" / "default.yaml"
    path = Path(config_path)
    if not path.exists():
        return _defaults()
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    merged = _merge(_defaults(), data)
    validate_config(merged)
    return merged


def _defaults() -> dict[str, Any]:
    return {
        "controllers": {
            "prefix": "Controller",
            "base_name": "Controller",
            "schema_policy": "overwrite",
        },
        "formulas": {
            "guard_missing_controller": {
                "circular": False,
                "grid": False,
                "y_driven": True,
            },
        },
        "apply": {"offset_frames": 0},
        "logging": {"level": "INFO", "structured": False},
    }


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Nested merge: sections in override replace keys, not whole sections."""
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def validate_config(config: dict[str, Any]) -> None:
    """Raise ConfigError for values the rig cannot act on."""
    policy = config.get("controllers", {}).get("schema_policy")
    if policy not in SCHEMA_POLICIES:
        raise ConfigError(
            f"controllers.schema_policy must be one of {', '.join(SCHEMA_POLICIES)}, got {policy!r}",
            key="controllers.schema_policy",
        )
    prefix = config.get("controllers", {}).get("prefix")
    if not isinstance(prefix, str) or not prefix:
        raise ConfigError("controllers.prefix must be a non-empty string", key="controllers.prefix")
    offset = config.get("apply", {}).get("offset_frames", 0)
    if not isinstance(offset, int) or isinstance(offset, bool):
        raise ConfigError("apply.offset_frames must be an integer", key="apply.offset_frames")


def _section(config: dict[str, Any] | None, name: str) -> dict[str, Any]:
    """Config section with built-in defaults filled in for missing keys."""
    return _merge(_defaults()[name], (config or {}).get(name) or {})


def controller_prefix(config: dict[str, Any] | None = None) -> str:
    return _section(config, "controllers")["prefix"]


def schema_policy(config: dict[str, Any] | None = None) -> str:
    return _section(config, "controllers")["schema_policy"]


def guards_missing_controller(kind: str, config: dict[str, Any] | None = None) -> bool:
    """True if formulas of this kind fall back to the property value when the controller is gone."""
    guards = _section(config, "formulas")["guard_missing_controller"]
    return bool(guards.get(kind, False))
