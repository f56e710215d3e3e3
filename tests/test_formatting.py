"""
Test cases for SQL formatting and error highlighting.
"""

import pytest

from view_schema import PredicateSyntaxError, SqlGlotGrammar
from view_schema.utils.sql_formatter import format_sql, highlight_position


class TestSQLFormatter:
    """Test cases for SQL formatting."""

    def test_format_statement(self):
        """Test formatting a view statement."""
        formatted = format_sql("SELECT k, a FROM readings WHERE a = 1")

        assert "SELECT" in formatted
        assert "\n" in formatted

    def test_format_invalid_sql(self):
        """Test formatting invalid SQL (should return original)."""
        sql = "SELECT FROM WHERE ((("

        assert format_sql(sql) == sql


class TestHighlighting:
    """Test cases for position highlighting."""

    def test_highlight_position(self):
        """Test position highlighting."""
        highlighted = highlight_position("SELECT id FROM users", position=7, length=2)

        assert "SELECT id FROM users" in highlighted
        assert "       ^^" in highlighted.split("\n")[1]

    def test_highlight_multiline(self):
        """Test highlighting on the second line."""
        highlighted = highlight_position("a = 1\nAND b = (", position=14, context_lines=0)

        assert highlighted.split("\n")[0] == "  2 | AND b = ("

    def test_highlight_past_end(self):
        """Test that a position past the end marks the end of the text."""
        highlighted = highlight_position("a = (", position=50, context_lines=0)

        assert highlighted.endswith("^")

    def test_syntax_error_message_has_excerpt(self):
        """Test that parse errors embed a marked excerpt."""
        with pytest.raises(PredicateSyntaxError) as exc_info:
            SqlGlotGrammar().parse_predicate("a = (1")

        error = exc_info.value
        if error.line is not None:
            assert "a = (1" in error.message
            assert "^" in error.message
