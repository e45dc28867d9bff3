"""
Logging utilities: basic setup from config and structured (JSON) summaries of rig actions.
"""
import json
import logging
from typing import Any

logger = logging.getLogger(__name__)

_structured = False


def setup_logging(config: dict[str, Any] | None = None, *, level: str | None = None) -> None:
    """Configure root logging from the config's logging section."""
    global _structured
    section = (config or {}).get("logging", {})
    level_name = (level or section.get("level") or "INFO").upper()
    _structured = bool(section.get("structured", False))
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def log_structured(level: str, **kwargs: Any) -> None:
    """Emit a one-line action summary; JSON when structured logging is on."""
    if _structured:
        line = json.dumps({"level": level, **kwargs}, default=str)
    else:
        line = " ".join(f"{k}={v}" for k, v in kwargs.items())
    if level == "error":
        logger.error("%s", line)
    elif level == "warning":
        logger.warning("%s", line)
    else:
        logger.info("%s", line)
