"""
Shared fixtures for view schema tests.
"""

import pytest

from view_schema import SchemaRegistry, TableMetadata, build_view_definition


@pytest.fixture
def keyed_table():
    """Base table with a composite partition key and two clustering columns."""
    table = TableMetadata("ks", "events")
    table.add_partition_key("p1", "int")
    table.add_partition_key("p2", "int")
    table.add_clustering_column("c1", "int")
    table.add_clustering_column("c2", "text", "DESC")
    table.add_regular_column("v1", "text")
    table.add_regular_column("v2", "int")
    return table


@pytest.fixture
def keyed_view(keyed_table):
    """View over keyed_table keeping the base key and selecting v1."""
    return build_view_definition(
        keyed_table,
        "events_by_key",
        partition_key=["p1", "p2"],
        clustering_key=["c1", "c2"],
        where_clause=(
            "p1 IS NOT NULL AND p2 IS NOT NULL AND c1 IS NOT NULL AND c2 IS NOT NULL"
        ),
        selected=["v1"],
    )


@pytest.fixture
def small_table():
    """Base table with columns p1, c1, v1 and v2."""
    table = TableMetadata("ks", "small")
    table.add_partition_key("p1", "int")
    table.add_clustering_column("c1", "int")
    table.add_regular_column("v1", "text")
    table.add_regular_column("v2", "text")
    return table


@pytest.fixture
def small_view(small_table):
    """View over small_table with columns p1, c1 and v1."""
    return build_view_definition(
        small_table,
        "small_by_key",
        partition_key=["p1"],
        clustering_key=["c1"],
        where_clause="p1 IS NOT NULL AND c1 IS NOT NULL",
        selected=["v1"],
    )


@pytest.fixture
def filter_table():
    """Base table keyed by k with regular columns a and b."""
    table = TableMetadata("ks", "readings")
    table.add_partition_key("k", "int")
    table.add_regular_column("a", "int")
    table.add_regular_column("b", "int")
    return table


@pytest.fixture
def filter_view(filter_table):
    """View whose predicate references column a twice."""
    return build_view_definition(
        filter_table,
        "filtered",
        partition_key=["k"],
        where_clause="a = 1 AND b = 2 AND a < 10",
        selected=["a", "b"],
    )


@pytest.fixture
def registry(keyed_table, keyed_view, filter_table, filter_view):
    """Registry holding both keyed and filter tables with their views."""
    registry = SchemaRegistry()
    registry.register_table(keyed_table)
    registry.register_table(filter_table)
    registry.register_view(keyed_view)
    registry.register_view(filter_view)
    return registry
