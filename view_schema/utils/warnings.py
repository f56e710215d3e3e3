"""
Warning system for schema changes.

This module defines warning collection functionality for the schema
registry, allowing schema events to be recorded while changes are applied
and reported to users afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

VALID_LEVELS = ("INFO", "WARNING", "ERROR")


@dataclass
class SchemaWarning:
    """Warning or informational message about a schema change.

    Attributes:
        level: Severity level ("INFO", "WARNING", "ERROR").
        message: Message text.
        context: Optional context information (e.g. a view name).

    Example:
        >>> warning = SchemaWarning(level="INFO", message="View rewritten")
        >>> warning.level
        'INFO'
    """

    level: str
    message: str
    context: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate warning level."""
        if self.level not in VALID_LEVELS:
            raise ValueError(
                f"Invalid warning level: {self.level}. "
                f"Must be one of {list(VALID_LEVELS)}"
            )


class WarningCollector:
    """Collects warnings raised while the schema is changed.

    Attributes:
        warnings: List of SchemaWarning objects, in the order they were added.

    Example:
        >>> collector = WarningCollector()
        >>> collector.add("WARNING", "View redefined")
        >>> collector.has_errors()
        False
    """

    def __init__(self) -> None:
        """Initialize a WarningCollector."""
        self.warnings: list[SchemaWarning] = []

    def add(self, level: str, message: str, context: Optional[str] = None) -> None:
        """Add a message.

        Args:
            level: Severity level ("INFO", "WARNING", "ERROR").
            message: Message text.
            context: Optional context information.
        """
        self.warnings.append(SchemaWarning(level=level, message=message, context=context))

    def has_errors(self) -> bool:
        """Check if any error-level warnings exist."""
        return any(warning.level == "ERROR" for warning in self.warnings)

    def get_all(self) -> list[SchemaWarning]:
        """Get all collected warnings, in order."""
        return self.warnings.copy()

    def get_by_level(self, level: str) -> list[SchemaWarning]:
        """Get warnings of a given severity level, in order."""
        return [warning for warning in self.warnings if warning.level == level]

    def clear(self) -> None:
        """Clear all collected warnings."""
        self.warnings.clear()

    def add_redefinition_warning(self, kind: str, name: str) -> None:
        """Record that a table or view definition was replaced."""
        self.add(
            "WARNING",
            f"{kind.capitalize()} '{name}' is being redefined; "
            f"the previous definition will be overwritten.",
            name,
        )

    def add_view_rewrite(self, view_name: str, from_name: str, to_name: str) -> None:
        """Record that a view was rewritten by a cascading column rename."""
        self.add(
            "INFO",
            f"Materialized view '{view_name}' renamed column '{from_name}' to '{to_name}'.",
            view_name,
        )

    def add_view_skip(self, view_name: str, column_name: str) -> None:
        """Record that a cascading column rename left a view unchanged."""
        self.add(
            "INFO",
            f"Materialized view '{view_name}' does not include column '{column_name}'; "
            f"left unchanged.",
            view_name,
        )

    def get_summary(self) -> dict[str, int]:
        """Get counts of warnings by level."""
        summary: dict[str, int] = {level: 0 for level in VALID_LEVELS}
        for warning in self.warnings:
            summary[warning.level] += 1
        return summary
