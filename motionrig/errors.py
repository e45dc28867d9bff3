"""
Errors raised by rig operations. Each carries a user-facing message; the UI
layer (panel, CLI) shows it as the terminal result of the action.
"""


class RigError(Exception):
    """Base for every error a rig action can surface to the user."""
    def __init__(self, message: str, *, composition: str | None = None):
        super().__init__(message)
        self.message = message
        self.composition = composition


class NoActiveScene(RigError):
    """No composition is active."""
    def __init__(self, message: str = "Please select a composition."):
        super().__init__(message)


class NoSelection(RigError):
    """The action needs at least one selected layer."""
    def __init__(self, message: str = "Please select at least one layer.", *, composition: str | None = None):
        super().__init__(message, composition=composition)


class NoControllers(RigError):
    """Binding requested but the composition has no controllers."""
    def __init__(
        self,
        message: str = "No controllers found. Please create a controller first.",
        *,
        composition: str | None = None,
    ):
        super().__init__(message, composition=composition)


class ControllerNotFound(RigError):
    """A controller label did not resolve to a layer."""
    def __init__(self, name: str, *, composition: str | None = None):
        super().__init__(f"Selected controller not found: {name}", composition=composition)
        self.name = name


class PropertyUnavailable(RigError):
    """A layer lacks the formula slot an operation targets (e.g. no Scale)."""
    def __init__(self, layer: str, slot: str):
        super().__init__(f"Layer {layer!r} has no {slot} property")
        self.layer = layer
        self.slot = slot


class NotFound(RigError, KeyError):
    """Lookup by name failed."""

    def __str__(self) -> str:
        return self.message


class ParameterNotFound(NotFound):
    """A controller has no parameter with the requested name."""
    def __init__(self, controller: str, name: str):
        super().__init__(f"Controller {controller!r} has no parameter {name!r}")
        self.controller = controller
        self.name = name


class UnknownControllerKind(RigError):
    """Controller kind is not one of the registered schemas."""
    def __init__(self, kind: str, known: list[str]):
        super().__init__(f"Unknown controller kind {kind!r} (expected one of: {', '.join(known)})")
        self.kind = kind


class HostError(RigError):
    """The host refused an operation on one layer (locked layer, missing property)."""
    def __init__(self, message: str, *, layer: str | None = None):
        super().__init__(message)
        self.layer = layer


class ConfigError(RigError):
    """Invalid configuration value."""
    def __init__(self, message: str, *, key: str = ""):
        super().__init__(message)
        self.key = key
