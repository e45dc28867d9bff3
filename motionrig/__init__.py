# motionrig: controller rigs for layered compositions

from .actions import ApplyResult, ControllerInfo, ControllerRef, Rig
from .cleanup import CleanupCoordinator, SweepReport
from .config import load_config
from .errors import (
    ControllerNotFound,
    HostError,
    NoActiveScene,
    NoControllers,
    NoSelection,
    ParameterNotFound,
    PropertyUnavailable,
    RigError,
)
from .scene import MemoryComposition, undo_group

__all__ = [
    "ApplyResult",
    "ControllerInfo",
    "ControllerRef",
    "Rig",
    "CleanupCoordinator",
    "SweepReport",
    "load_config",
    "ControllerNotFound",
    "HostError",
    "NoActiveScene",
    "NoControllers",
    "NoSelection",
    "ParameterNotFound",
    "PropertyUnavailable",
    "RigError",
    "MemoryComposition",
    "undo_group",
]
