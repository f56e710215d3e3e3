"""
SQL formatting and highlighting utilities.

This module provides functionality to format view query statements and to
highlight specific positions in predicate text for error reporting.
"""

from __future__ import annotations

import sqlglot
from sqlglot.errors import SqlglotError


def format_sql(sql: str, dialect: str = "") -> str:
    """Format SQL statement.

    Uses sqlglot's built-in formatter to generate readable SQL.

    Args:
        sql: Original SQL.
        dialect: SQL dialect.

    Returns:
        Formatted SQL, or the original text if it cannot be parsed.

    Example:
        Input: "SELECT id,name FROM users WHERE age>18"
        Output:
        SELECT
          id,
          name
        FROM users
        WHERE
          age > 18
    """
    try:
        ast = sqlglot.parse_one(sql, dialect=dialect)
        return ast.sql(pretty=True, dialect=dialect)
    except SqlglotError:
        return sql


def highlight_position(
    sql: str,
    position: int,
    length: int = 1,
    context_lines: int = 2,
) -> str:
    """Highlight a specific position in SQL.

    Used to mark error positions in predicate and statement text.

    Args:
        sql: SQL statement.
        position: Character position (0-based).
        length: Highlight length.
        context_lines: Number of context lines.

    Returns:
        SQL text with highlighting.

    Example:
        Input: "a = 1 AND AND b = 2", position=10
        Output:
          1 | a = 1 AND AND b = 2
                        ^
    """
    lines = sql.split("\n")

    current_pos = 0
    target_line = len(lines) - 1
    col_in_line = len(lines[-1])

    for i, line in enumerate(lines):
        line_len = len(line) + 1  # +1 for newline
        if current_pos + line_len > position:
            target_line = i
            col_in_line = position - current_pos
            break
        current_pos += line_len

    result = []

    start_line = max(0, target_line - context_lines)
    end_line = min(len(lines), target_line + context_lines + 1)

    for i in range(start_line, end_line):
        result.append(f"{i+1:3d} | {lines[i]}")

        if i == target_line:
            pointer = " " * (col_in_line + 6)  # 6 = "xxx | " length
            pointer += "^" * length
            result.append(pointer)

    return "\n".join(result)
