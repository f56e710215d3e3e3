"""
Graph module for view dependencies.
"""

from view_schema.graph.dependency_graph import ViewDependencyGraph

__all__ = ["ViewDependencyGraph"]
