"""
Tests for the materialized view builder.
"""

import uuid

import pytest

from view_schema import (
    ColumnIdentifier,
    ColumnKind,
    InvalidViewDefinitionError,
    PredicateSyntaxError,
    TableMetadata,
    build_view_definition,
)


class TestBuildViewDefinition:
    """Tests for build_view_definition."""

    def test_selected_columns(self, keyed_view, keyed_table):
        """Test a view selecting some base columns."""
        assert not keyed_view.include_all_columns
        assert keyed_view.base_table_id == keyed_table.id
        assert keyed_view.base_table_name == "events"
        assert keyed_view.metadata.is_view
        assert [d.name.name for d in keyed_view.metadata.all_columns()] == [
            "p1",
            "p2",
            "c1",
            "c2",
            "v1",
        ]

    def test_statement_matches_parts(self, keyed_view):
        """Test that the statement is derived from the other fields."""
        statement = keyed_view.query_statement

        assert statement.table_name == "events"
        assert statement.columns == tuple(
            d.name for d in keyed_view.metadata.all_columns()
        )
        assert statement.where_clause == keyed_view.predicate_text

    def test_include_all_columns(self, small_table):
        """Test a view selecting every base column."""
        view = build_view_definition(
            small_table,
            "small_by_v2",
            partition_key=["v2"],
            clustering_key=["p1", "c1"],
            where_clause="v2 IS NOT NULL AND p1 IS NOT NULL AND c1 IS NOT NULL",
        )

        assert view.include_all_columns
        assert [d.name.name for d in view.metadata.all_columns()] == [
            "v2",
            "p1",
            "c1",
            "v1",
        ]
        assert view.metadata.get_column_definition("p1").kind is ColumnKind.CLUSTERING

    def test_predicate_is_canonicalized(self, filter_table):
        """Test that the stored predicate is in canonical form."""
        view = build_view_definition(
            filter_table,
            "canon",
            partition_key=["k"],
            where_clause="(a=1)   and b<>2",
            selected=["a", "b"],
        )

        assert view.predicate_text == "a = 1 AND b != 2"

    def test_clustering_order(self, keyed_table):
        """Test inherited and explicit clustering order."""
        view = build_view_definition(
            keyed_table,
            "ordered",
            partition_key=["p1", "p2"],
            clustering_key=["c1", "c2"],
            clustering_order={"c1": "DESC"},
        )

        orders = [d.clustering_order for d in view.metadata.clustering_columns]
        assert orders == ["DESC", "DESC"]

    def test_view_id(self, small_table):
        """Test that an explicit view id is kept."""
        view_id = uuid.uuid4()
        view = build_view_definition(
            small_table, "v", ["p1"], ["c1"], view_id=view_id
        )

        assert view.metadata.id == view_id

    def test_unknown_column(self, small_table):
        """Test selecting a column the base table lacks."""
        with pytest.raises(InvalidViewDefinitionError, match="unknown column"):
            build_view_definition(small_table, "v", ["p1"], ["c1"], selected=["nope"])

    def test_missing_base_primary_key(self, small_table):
        """Test that every base primary key column is required."""
        with pytest.raises(InvalidViewDefinitionError, match="c1"):
            build_view_definition(small_table, "v", ["p1"], ["v1"])

    def test_repeated_key_column(self, small_table):
        """Test that a primary key column cannot repeat."""
        with pytest.raises(InvalidViewDefinitionError, match="twice"):
            build_view_definition(small_table, "v", ["p1"], ["c1", "p1"])

    def test_missing_partition_key(self, small_table):
        """Test that a partition key is required."""
        with pytest.raises(InvalidViewDefinitionError):
            build_view_definition(small_table, "v", [], ["p1", "c1"])

    def test_predicate_on_unselected_column(self, small_table):
        """Test that the predicate may only restrict view columns."""
        with pytest.raises(InvalidViewDefinitionError, match="v2"):
            build_view_definition(
                small_table,
                "v",
                ["p1"],
                ["c1"],
                where_clause="v2 = 'x'",
                selected=["v1"],
            )

    def test_invalid_predicate(self, small_table):
        """Test that a malformed WHERE clause is a user-facing syntax error."""
        with pytest.raises(PredicateSyntaxError):
            build_view_definition(small_table, "v", ["p1"], ["c1"], where_clause="p1 = (")

    def test_quoted_columns(self):
        """Test a base table with case-sensitive column names."""
        table = TableMetadata("ks", "Mixed")
        table.add_partition_key("Id", "int")
        table.add_regular_column("Value", "text")

        view = build_view_definition(
            table, "mixed_view", ["Id"], where_clause='"Id" IS NOT NULL'
        )

        assert view.query_statement.to_cql() == (
            'SELECT "Id", "Value" FROM "Mixed" WHERE "Id" IS NOT NULL'
        )
        assert view.query_statement.columns[0] == ColumnIdentifier("Id")
        assert view.query_statement.table_name == "Mixed"

    def test_keyword_columns(self):
        """Test a base table whose column names are SQL keywords."""
        table = TableMetadata("ks", "t")
        table.add_partition_key("k", "int")
        table.add_regular_column("union", "int")

        view = build_view_definition(table, "t_by_k", ["k"], where_clause='"union" = 1')

        assert view.predicate_text == '"union" = 1'
        assert view.query_statement.to_cql() == 'SELECT k, "union" FROM t WHERE "union" = 1'
        assert view.query_statement.columns == (
            ColumnIdentifier("k"),
            ColumnIdentifier("union"),
        )
