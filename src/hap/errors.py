class HapError(Exception):
    """Base error for hap event propagation."""


class CycleError(HapError, ValueError):
    """Raised when attaching a node would make it its own ancestor."""


class InvalidNodeError(HapError, TypeError):
    """Raised when a tree or dispatch operation receives something that is not a Node."""


class SettingsError(HapError):
    """Raised when a settings file cannot be read or parsed."""
