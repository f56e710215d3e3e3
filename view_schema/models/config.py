"""
Configuration model for view schema management.

This module defines the SchemaConfig class and ErrorMode enum, which control
how predicates are parsed, how strictly renames are verified and how the
schema registry reacts to redefinitions.
"""

from dataclasses import dataclass
from enum import Enum


class ErrorMode(str, Enum):
    """Enumeration of error handling modes.

    Attributes:
        FAIL: Raise an exception immediately.
        WARN: Record a warning and continue.
        IGNORE: Continue silently.

    Example:
        >>> ErrorMode.values()
        ['fail', 'warn', 'ignore']
    """

    FAIL = "fail"
    WARN = "warn"
    IGNORE = "ignore"

    @classmethod
    def values(cls) -> list[str]:
        """Return a list of all possible error mode values."""
        return [member.value for member in cls]


@dataclass
class SchemaConfig:
    """Configuration settings for view schema management.

    Attributes:
        dialect: sqlglot dialect used to parse and render predicate and
            statement text. The generic dialect ("") quotes identifiers
            with double quotes, which matches CQL. Defaults to "".
        strict_mode: If True, a rename verifies that every column the
            rewritten predicate references is defined by the renamed
            metadata. Defaults to True.
        on_redefinition: What the schema registry does when a table or view
            is registered under a name that is already taken. Defaults to
            ErrorMode.WARN.
        pretty_statements: If True, the CLI pretty-prints query statements.
            Defaults to False.

    Example:
        >>> config = SchemaConfig(on_redefinition=ErrorMode.FAIL)
        >>> config.strict_mode
        True
    """

    dialect: str = ""
    strict_mode: bool = True
    on_redefinition: ErrorMode = ErrorMode.WARN
    pretty_statements: bool = False

    def __post_init__(self) -> None:
        """Validate configuration settings."""
        if not isinstance(self.dialect, str):
            raise TypeError("dialect must be a string")
        if not isinstance(self.strict_mode, bool):
            raise TypeError("strict_mode must be a boolean")
        if not isinstance(self.on_redefinition, ErrorMode):
            raise TypeError("on_redefinition must be an ErrorMode instance")
        if not isinstance(self.pretty_statements, bool):
            raise TypeError("pretty_statements must be a boolean")
