"""
Query text builder for materialized views.

Builds the canonical text of a view's defining SELECT statement from its base
table name, its column list and its predicate text.
"""

from typing import Iterable, Union

from view_schema.models.column import ColumnDefinition, ColumnIdentifier, quote_if_needed


def build_select_statement(
    table_name: str,
    columns: Iterable[Union[ColumnDefinition, ColumnIdentifier]],
    where_clause: str,
    dialect: str = "",
) -> str:
    """Build the defining query text of a view.

    Args:
        table_name: Base table name.
        columns: Columns to select, in order. Column definitions and bare
            identifiers are both accepted.
        where_clause: Predicate text; omitted from the statement when blank.
        dialect: sqlglot dialect whose identifier quoting is used.

    Returns:
        Statement text of the form ``SELECT <columns> FROM <table> WHERE <predicate>``.

    Raises:
        ValueError: If no column is given.

    Example:
        >>> build_select_statement("users", [ColumnIdentifier("id")], "id IS NOT NULL")
        'SELECT id FROM users WHERE id IS NOT NULL'
    """
    names = [
        (c.name if isinstance(c, ColumnDefinition) else c).to_cql(dialect)
        for c in columns
    ]
    if not names:
        raise ValueError("a view statement must select at least one column")

    statement = f"SELECT {', '.join(names)} FROM {quote_if_needed(table_name, dialect)}"
    if where_clause and where_clause.strip():
        statement += f" WHERE {where_clause}"
    return statement
