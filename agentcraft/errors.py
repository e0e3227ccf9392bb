"""Errors raised where catalog data is turned into engine inputs.

The engine itself does not raise for well-formed input: an incomplete
configuration is a failing verdict, not an exception.
"""

from __future__ import annotations


class CatalogError(ValueError):
    """Base class for content catalog problems."""


class UnknownComponentError(CatalogError):
    """A component id that the catalog does not define."""

    def __init__(self, component_id: str) -> None:
        super().__init__(f"Unknown component id: '{component_id}'")
        self.component_id = component_id


class UnknownLevelError(CatalogError):
    """A level id or number that the catalog does not define."""

    def __init__(self, level: str | int) -> None:
        super().__init__(f"Unknown level: '{level}'")
        self.level = level


class SlotConflictError(CatalogError):
    """Two components requested for the same role."""

    def __init__(self, role: str, first: str, second: str) -> None:
        super().__init__(
            f"Both '{first}' and '{second}' fill the '{role}' slot; "
            f"a configuration holds one component per role"
        )
        self.role = role


class ConfigError(ValueError):
    """An engine config file that cannot be parsed into settings."""
