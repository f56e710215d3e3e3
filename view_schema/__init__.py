"""
Materialized view schema management.

Models materialized view definitions over CQL-style tables and keeps their
structural metadata, WHERE clause and defining statement in agreement when
columns are renamed.

Example:
    >>> from view_schema import SchemaRegistry, TableMetadata, build_view_definition
    >>> registry = SchemaRegistry()
    >>> registry.register_table(users)
    >>> registry.register_view(build_view_definition(users, "by_email", ["email"], ["id"]))
    >>> registry.rename_column("ks", "users", "email", "mail")
"""

from view_schema.version import __version__, __version_info__

__author__ = "View Schema Contributors"

from view_schema.builder.view_builder import build_view_definition
from view_schema.exceptions import (
    ConsistencyViolationError,
    DuplicateColumnError,
    InvalidViewDefinitionError,
    PredicateSyntaxError,
    UnknownColumnError,
    UnknownTableError,
    UnknownViewError,
    UnsupportedRelationError,
    ViewRenameError,
    ViewSchemaError,
)
from view_schema.graph.dependency_graph import ViewDependencyGraph
from view_schema.models.column import ColumnDefinition, ColumnIdentifier, ColumnKind
from view_schema.models.config import ErrorMode, SchemaConfig
from view_schema.models.relation import Relation, RelationKind
from view_schema.models.statement import SelectStatement
from view_schema.models.table_metadata import TableMetadata
from view_schema.models.view_definition import ViewDefinition
from view_schema.parser.grammar import GrammarEngine
from view_schema.parser.query_builder import build_select_statement
from view_schema.parser.sqlglot_grammar import SqlGlotGrammar, default_grammar
from view_schema.registry.schema_registry import SchemaRegistry
from view_schema.rewriter.relation_rewriter import referenced_columns, rename_identifier

__all__ = [
    # Version info
    "__version__",
    "__version_info__",
    # Core entities
    "ViewDefinition",
    "TableMetadata",
    "build_view_definition",
    # Configuration
    "SchemaConfig",
    "ErrorMode",
    # Data models
    "ColumnIdentifier",
    "ColumnDefinition",
    "ColumnKind",
    "Relation",
    "RelationKind",
    "SelectStatement",
    # Grammar
    "GrammarEngine",
    "SqlGlotGrammar",
    "default_grammar",
    "build_select_statement",
    # Rewriting
    "rename_identifier",
    "referenced_columns",
    # Registry
    "SchemaRegistry",
    "ViewDependencyGraph",
    # Exceptions
    "ViewSchemaError",
    "PredicateSyntaxError",
    "UnsupportedRelationError",
    "UnknownColumnError",
    "DuplicateColumnError",
    "ConsistencyViolationError",
    "ViewRenameError",
    "UnknownTableError",
    "UnknownViewError",
    "InvalidViewDefinitionError",
]
