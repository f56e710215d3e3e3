"""
Data models for view schema management.

This package contains the core data structures: column identifiers and
definitions, table metadata, predicate relations, parsed statements,
configuration and the materialized view definition itself.
"""

from view_schema.models.column import ColumnDefinition, ColumnIdentifier, ColumnKind
from view_schema.models.config import ErrorMode, SchemaConfig
from view_schema.models.relation import Relation, RelationKind
from view_schema.models.statement import SelectStatement
from view_schema.models.table_metadata import TableMetadata
from view_schema.models.view_definition import ViewDefinition

__all__ = [
    "ColumnDefinition",
    "ColumnIdentifier",
    "ColumnKind",
    "ErrorMode",
    "Relation",
    "RelationKind",
    "SchemaConfig",
    "SelectStatement",
    "TableMetadata",
    "ViewDefinition",
]
