"""Exception types raised by the stat engine.

Registry and catalog errors are authoring defects: they surface when a table
is built, not while evaluating player input. Missing base attributes and
missing overrides are never errors.
"""

from __future__ import annotations


class StatEngineError(Exception):
    """Base class for all stat engine errors."""


class RegistryError(StatEngineError, ValueError):
    """Raised when a stat registry violates its construction invariants."""


class ConfigOverrideError(StatEngineError, ValueError):
    """Raised when a config override patch does not fit its formula config."""

    def __init__(self, stat_id: str, message: str) -> None:
        """Initialize the error.

        Args:
            stat_id: Id of the stat whose override was rejected.
            message: Human-readable reason.
        """

        super().__init__(f"Invalid override for {stat_id!r}: {message}")
        self.stat_id = stat_id


class ModifierCatalogError(StatEngineError, ValueError):
    """Raised when a modifier effect catalog entry is malformed."""
