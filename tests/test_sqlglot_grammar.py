"""
Tests for the sqlglot grammar engine and the query text builder.
"""

import pytest

from view_schema import (
    ColumnIdentifier,
    GrammarEngine,
    PredicateSyntaxError,
    Relation,
    RelationKind,
    SqlGlotGrammar,
    UnsupportedRelationError,
    build_select_statement,
    default_grammar,
)


class TestParsePredicate:
    """Tests for SqlGlotGrammar.parse_predicate."""

    def setup_method(self):
        """Initialize before each test."""
        self.grammar = SqlGlotGrammar()

    def test_implements_protocol(self):
        """Test that the sqlglot engine satisfies GrammarEngine."""
        assert isinstance(self.grammar, GrammarEngine)

    def test_empty_predicate(self):
        """Test that blank text is the empty predicate."""
        assert self.grammar.parse_predicate("") == ()
        assert self.grammar.parse_predicate("   ") == ()

    def test_conjunction_order(self):
        """Test that relations keep their written order."""
        relations = self.grammar.parse_predicate("a = 1 AND b = 2 AND a < 10")

        assert [r.columns[0].name for r in relations] == ["a", "b", "a"]
        assert [r.operator for r in relations] == ["=", "=", "<"]
        assert [r.value for r in relations] == ["1", "2", "10"]

    def test_parenthesized_conjuncts(self):
        """Test that parentheses around conjunctions are transparent."""
        relations = self.grammar.parse_predicate("(a = 1 AND b = 2) AND c = 3")

        assert [r.columns[0].name for r in relations] == ["a", "b", "c"]

    def test_comparison_operators(self):
        """Test every comparison operator."""
        relations = self.grammar.parse_predicate(
            "a = 1 AND b != 2 AND c < 3 AND d <= 4 AND e > 5 AND f >= 6"
        )

        assert [r.operator for r in relations] == ["=", "!=", "<", "<=", ">", ">="]

    def test_not_equal_spellings(self):
        """Test that <> is rendered as !=."""
        relations = self.grammar.parse_predicate("a <> 1")

        assert self.grammar.render_predicate(relations) == "a != 1"

    def test_is_not_null(self):
        """Test IS NOT NULL restrictions."""
        (relation,) = self.grammar.parse_predicate("a IS NOT NULL")

        assert relation == Relation(
            RelationKind.SINGLE_COLUMN, (ColumnIdentifier("a"),), "IS NOT", "NULL"
        )

    def test_in_list(self):
        """Test IN restrictions."""
        (relation,) = self.grammar.parse_predicate("a IN (1, 2, 3)")

        assert relation.operator == "IN"
        assert relation.value == "(1, 2, 3)"
        assert relation.to_cql() == "a IN (1, 2, 3)"

    def test_like(self):
        """Test LIKE restrictions."""
        (relation,) = self.grammar.parse_predicate("name LIKE 'ab%'")

        assert relation.operator == "LIKE"
        assert relation.value == "'ab%'"

    def test_string_literal(self):
        """Test that string values keep their quotes."""
        (relation,) = self.grammar.parse_predicate("v1 = 'x'")

        assert relation.to_cql() == "v1 = 'x'"

    def test_multi_column_relation(self):
        """Test tuple restrictions."""
        (relation,) = self.grammar.parse_predicate("(c1, c2) > (1, 'a')")

        assert relation.kind is RelationKind.MULTI_COLUMN
        assert relation.columns == (ColumnIdentifier("c1"), ColumnIdentifier("c2"))
        assert relation.to_cql() == "(c1, c2) > (1, 'a')"

    def test_token_relation(self):
        """Test partition token restrictions."""
        (relation,) = self.grammar.parse_predicate("token(p1, p2) > 0")

        assert relation.kind is RelationKind.TOKEN
        assert relation.columns == (ColumnIdentifier("p1"), ColumnIdentifier("p2"))
        assert relation.to_cql() == "token(p1, p2) > 0"

    def test_identifier_case_rules(self):
        """Test that unquoted names fold to lower case and quoted names do not."""
        relations = self.grammar.parse_predicate('Foo = 1 AND "Bar" = 2')

        assert relations[0].columns == (ColumnIdentifier("foo"),)
        assert relations[1].columns == (ColumnIdentifier("Bar"),)

    def test_render_is_stable(self):
        """Test that rendering parsed text and parsing it again is stable."""
        text = 'a = 1 AND "Bar" IN (1, 2) AND (c1, c2) >= (1, 2) AND d IS NOT NULL'
        rendered = self.grammar.render_predicate(self.grammar.parse_predicate(text))

        assert rendered == text
        assert self.grammar.render_predicate(self.grammar.parse_predicate(rendered)) == rendered

    def test_render_empty(self):
        """Test rendering the empty predicate."""
        assert self.grammar.render_predicate(()) == ""


class TestParsePredicateErrors:
    """Tests for predicate parse failures."""

    def setup_method(self):
        """Initialize before each test."""
        self.grammar = SqlGlotGrammar()

    def test_syntax_error(self):
        """Test that malformed text raises PredicateSyntaxError."""
        with pytest.raises(PredicateSyntaxError) as exc_info:
            self.grammar.parse_predicate("a = (1")

        assert exc_info.value.sql == "a = (1"

    def test_unterminated_string(self):
        """Test that tokenizer failures raise PredicateSyntaxError."""
        with pytest.raises(PredicateSyntaxError):
            self.grammar.parse_predicate("a = 'x")

    def test_or_is_unsupported(self):
        """Test that disjunctions are rejected."""
        with pytest.raises(UnsupportedRelationError, match="OR"):
            self.grammar.parse_predicate("a = 1 OR b = 2")

    def test_reversed_comparison(self):
        """Test that the column must be on the left side."""
        with pytest.raises(UnsupportedRelationError):
            self.grammar.parse_predicate("1 = a")

    def test_qualified_column(self):
        """Test that table-qualified columns are rejected."""
        with pytest.raises(UnsupportedRelationError, match="Qualified"):
            self.grammar.parse_predicate("t.a = 1")

    def test_unsupported_is_a_syntax_error(self):
        """Test that UnsupportedRelationError is a PredicateSyntaxError."""
        assert issubclass(UnsupportedRelationError, PredicateSyntaxError)


class TestParseQueryStatement:
    """Tests for SqlGlotGrammar.parse_query_statement."""

    def setup_method(self):
        """Initialize before each test."""
        self.grammar = SqlGlotGrammar()

    def test_parse_statement(self):
        """Test parsing a view's defining statement."""
        statement = self.grammar.parse_query_statement(
            'SELECT k, "Val" FROM readings WHERE k IS NOT NULL AND "Val" > 3'
        )

        assert statement.table_name == "readings"
        assert statement.columns == (ColumnIdentifier("k"), ColumnIdentifier("Val"))
        assert [r.operator for r in statement.relations] == ["IS NOT", ">"]
        assert statement.where_clause == 'k IS NOT NULL AND "Val" > 3'
        assert statement.expression is not None

    def test_statement_without_where(self):
        """Test a statement with no WHERE clause."""
        statement = self.grammar.parse_query_statement("SELECT k FROM readings")

        assert statement.relations == ()
        assert statement.to_cql() == "SELECT k FROM readings"

    def test_statement_equality_ignores_tree(self):
        """Test that formatting differences do not affect equality."""
        first = self.grammar.parse_query_statement("SELECT k FROM t WHERE k = 1")
        second = self.grammar.parse_query_statement("select   k from t where (k = 1)")

        assert first == second

    def test_rejects_non_select(self):
        """Test that only SELECT statements are accepted."""
        with pytest.raises(PredicateSyntaxError, match="SELECT"):
            self.grammar.parse_query_statement("DELETE FROM t WHERE k = 1")

    def test_rejects_expressions_in_select_list(self):
        """Test that the select list may only name columns."""
        with pytest.raises(PredicateSyntaxError, match="plain columns"):
            self.grammar.parse_query_statement("SELECT k + 1 FROM t")

    def test_rejects_joins(self):
        """Test that a statement must read exactly one table."""
        with pytest.raises(PredicateSyntaxError, match="exactly one table"):
            self.grammar.parse_query_statement("SELECT k FROM a JOIN b ON a.k = b.k")

    def test_rejects_empty(self):
        """Test that empty statement text is rejected."""
        with pytest.raises(PredicateSyntaxError):
            self.grammar.parse_query_statement("")


class TestBuildSelectStatement:
    """Tests for build_select_statement."""

    def test_build(self):
        """Test the canonical statement shape."""
        text = build_select_statement(
            "readings",
            [ColumnIdentifier("k"), ColumnIdentifier("Val")],
            "k IS NOT NULL",
        )

        assert text == 'SELECT k, "Val" FROM readings WHERE k IS NOT NULL'

    def test_build_without_predicate(self):
        """Test that a blank predicate omits the WHERE clause."""
        assert build_select_statement("t", [ColumnIdentifier("k")], "") == "SELECT k FROM t"

    def test_build_accepts_definitions(self, small_table):
        """Test building from column definitions."""
        text = build_select_statement("small", small_table.all_columns(), "")

        assert text == "SELECT p1, c1, v1, v2 FROM small"

    def test_build_quotes_reserved_names(self):
        """Test that reserved words are quoted."""
        text = build_select_statement("Order", [ColumnIdentifier("key")], "")

        assert text == 'SELECT "key" FROM "Order"'

    def test_build_requires_columns(self):
        """Test that a statement needs at least one column."""
        with pytest.raises(ValueError):
            build_select_statement("t", [], "")


class TestDefaultGrammar:
    """Tests for default_grammar."""

    def test_cached_per_dialect(self):
        """Test that the default grammar is shared."""
        assert default_grammar() is default_grammar()
        assert default_grammar().dialect == ""


class TestDialectRendering:
    """Tests for identifier quoting in non-default dialects."""

    def setup_method(self):
        """Create a MySQL grammar."""
        self.grammar = SqlGlotGrammar("mysql")

    def test_render_predicate(self):
        """Test that renamed columns are quoted with the dialect's quotes."""
        relations = self.grammar.parse_predicate("v = 1")
        renamed = relations[0].rename_identifier(
            ColumnIdentifier("v"), ColumnIdentifier("Mixed")
        )

        assert self.grammar.render_predicate([renamed]) == "`Mixed` = 1"

    def test_render_and_parse_statement(self):
        """Test that a rendered statement parses back to the same columns."""
        text = self.grammar.render_query_statement(
            "t", [ColumnIdentifier("k"), ColumnIdentifier("Mixed")], "`Mixed` = 1"
        )
        statement = self.grammar.parse_query_statement(text)

        assert text == "SELECT k, `Mixed` FROM t WHERE `Mixed` = 1"
        assert statement.columns == (ColumnIdentifier("k"), ColumnIdentifier("Mixed"))
        assert statement.to_cql() == text
