"""
Custom exception classes for view schema management.

This module defines all custom exceptions used throughout the view_schema
package. Every error raised by the library derives from ViewSchemaError so
callers driving a schema alteration can catch a single type.
"""

from typing import Optional


class ViewSchemaError(Exception):
    """Base exception class for all view schema errors.

    Attributes:
        message: Human-readable error message describing the error.
    """

    def __init__(self, message: str) -> None:
        """Initialize a ViewSchemaError with a message.

        Args:
            message: Error message describing what went wrong.
        """
        self.message = message
        super().__init__(self.message)


class PredicateSyntaxError(ViewSchemaError):
    """Exception raised when predicate or statement text fails to parse.

    The message is enriched with a highlighted excerpt of the offending text
    when the position of the failure is known.

    Attributes:
        message: Error message describing the failure.
        sql: The text that failed to parse.
        line: 1-based line of the failure, if known.
        column: 1-based column of the failure, if known.
    """

    def __init__(
        self,
        message: str,
        sql: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.sql = sql
        self.line = line
        self.column = column

        if sql and line is not None and column is not None:
            message = self._build_message(message)

        super().__init__(message)

    def _build_message(self, message: str) -> str:
        """Build detailed error message with the failing position marked."""
        from view_schema.utils.sql_formatter import highlight_position

        lines = self.sql.split("\n")
        offset = sum(len(text) + 1 for text in lines[: self.line - 1])
        position = offset + max(self.column - 1, 0)

        return "\n".join(
            [message, "", highlight_position(self.sql, position, context_lines=0)]
        )


class UnsupportedRelationError(PredicateSyntaxError):
    """Exception raised when a predicate contains something that is not a relation.

    The text parsed as SQL, but a conjunct is not of the form
    ``<columns> <operator> <value>`` (for example an OR, a reversed
    comparison such as ``1 = a``, or a table-qualified column).
    """


class UnknownColumnError(ViewSchemaError):
    """Exception raised when a column is not present in table metadata.

    Attributes:
        column_name: Name of the missing column.
        table_name: Name of the table that was searched.
    """

    def __init__(self, message: str, column_name: str, table_name: str) -> None:
        super().__init__(message)
        self.column_name = column_name
        self.table_name = table_name


class DuplicateColumnError(ViewSchemaError):
    """Exception raised when a rename target already names another column.

    Attributes:
        column_name: The conflicting column name.
        table_name: Name of the table holding both columns.
    """

    def __init__(self, message: str, column_name: str, table_name: str) -> None:
        super().__init__(message)
        self.column_name = column_name
        self.table_name = table_name


class ConsistencyViolationError(ViewSchemaError):
    """Exception raised when a view predicate references an unknown column.

    A view whose predicate names a column that its own metadata does not
    define cannot be represented. Reaching this error after a rename means
    the metadata and the predicate disagreed about the column set.

    Attributes:
        view_name: Name of the inconsistent view.
        missing_columns: Columns referenced by the predicate but undefined.
    """

    def __init__(
        self, message: str, view_name: str, missing_columns: list[str]
    ) -> None:
        super().__init__(message)
        self.view_name = view_name
        self.missing_columns = missing_columns


class ViewRenameError(ViewSchemaError):
    """Unrecoverable internal error raised while renaming a view column.

    The texts re-parsed during a rename are generated programmatically from
    a definition that was valid before, so a parse failure is never a user
    input error. The underlying PredicateSyntaxError is chained as
    ``__cause__``.

    Attributes:
        view_name: Qualified name of the view being renamed.
    """

    def __init__(self, message: str, view_name: str) -> None:
        super().__init__(message)
        self.view_name = view_name


class UnknownTableError(ViewSchemaError):
    """Exception raised when a table cannot be found in the schema registry."""

    def __init__(self, message: str, table: str) -> None:
        super().__init__(message)
        self.table = table


class UnknownViewError(ViewSchemaError):
    """Exception raised when a view cannot be found in the schema registry."""

    def __init__(self, message: str, view: str) -> None:
        super().__init__(message)
        self.view = view


class InvalidViewDefinitionError(ViewSchemaError):
    """Exception raised when a materialized view cannot be built.

    Attributes:
        view_name: Name of the rejected view.
    """

    def __init__(self, message: str, view_name: str) -> None:
        super().__init__(message)
        self.view_name = view_name
