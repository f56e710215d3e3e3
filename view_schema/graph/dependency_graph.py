"""
Dependency graph between base tables and materialized views.

This module defines the ViewDependencyGraph class, which uses networkx to
track which views are built on which base table.
"""

from __future__ import annotations

import uuid

import networkx as nx


def _table_node(table_id: uuid.UUID) -> str:
    return f"table:{table_id}"


def _view_node(keyspace: str, view_name: str) -> str:
    return f"view:{keyspace}.{view_name}"


class ViewDependencyGraph:
    """Directed graph from base tables to the views built on them.

    Tables are keyed by their stable id, so the edges survive a rename of
    the base table.

    Attributes:
        graph: networkx DiGraph object holding the dependencies.

    Example:
        >>> graph = ViewDependencyGraph()
        >>> graph.add_view(table_id, "ks", "users_by_email")
        >>> graph.views_of(table_id)
        [('ks', 'users_by_email')]
    """

    def __init__(self) -> None:
        """Initialize a ViewDependencyGraph."""
        self.graph = nx.DiGraph()

    def add_table(self, table_id: uuid.UUID) -> None:
        self.graph.add_node(_table_node(table_id), node_type="table", table_id=table_id)

    def add_view(self, table_id: uuid.UUID, keyspace: str, view_name: str) -> None:
        """Record that a view is built on a base table.

        A view depends on exactly one base table; re-adding a view replaces
        its previous edge.
        """
        view_node = _view_node(keyspace, view_name)
        if view_node in self.graph:
            self.graph.remove_node(view_node)

        self.add_table(table_id)
        self.graph.add_node(
            view_node, node_type="view", keyspace=keyspace, view_name=view_name
        )
        self.graph.add_edge(_table_node(table_id), view_node)

    def remove_view(self, keyspace: str, view_name: str) -> bool:
        """Remove a view. Returns whether it was present."""
        view_node = _view_node(keyspace, view_name)
        if view_node not in self.graph:
            return False
        self.graph.remove_node(view_node)
        return True

    def views_of(self, table_id: uuid.UUID) -> list[tuple[str, str]]:
        """Return ``(keyspace, view_name)`` of every view built on a table, sorted."""
        table_node = _table_node(table_id)
        if table_node not in self.graph:
            return []
        return sorted(
            (self.graph.nodes[n]["keyspace"], self.graph.nodes[n]["view_name"])
            for n in self.graph.successors(table_node)
        )

    def base_table_of(self, keyspace: str, view_name: str) -> uuid.UUID | None:
        """Return the id of the table a view is built on, or None."""
        view_node = _view_node(keyspace, view_name)
        if view_node not in self.graph:
            return None
        for predecessor in self.graph.predecessors(view_node):
            return self.graph.nodes[predecessor]["table_id"]
        return None

    def get_statistics(self) -> dict[str, int]:
        """Return node and edge counts."""
        tables = sum(
            1 for _, data in self.graph.nodes(data=True) if data.get("node_type") == "table"
        )
        return {
            "tables": tables,
            "views": self.graph.number_of_nodes() - tables,
            "dependencies": self.graph.number_of_edges(),
        }
