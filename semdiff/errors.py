"""
Exception types raised by the engine and its callers.
"""


class SemdiffError(Exception):
    """Base class for semdiff errors."""


class PresetNotFoundError(SemdiffError, KeyError):
    """No preset with the requested id."""

    def __init__(self, preset_id: str):
        self.preset_id = preset_id
        super().__init__(preset_id)

    def __str__(self) -> str:
        return f"Unknown merge preset: {self.preset_id}"


class InvalidRuleError(SemdiffError, ValueError):
    """A rule definition could not be loaded."""


class InvalidTransitionError(SemdiffError):
    """A change status transition other than pending -> resolved was requested."""
