"""
Registry module for view schema management.

This module provides the registry that holds table metadata and view
definitions and applies schema changes across them.
"""

from view_schema.registry.schema_registry import SchemaRegistry

__all__ = ["SchemaRegistry"]
