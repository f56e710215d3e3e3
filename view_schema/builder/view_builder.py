"""
Materialized view builder.

This module builds a ViewDefinition from a base table and the parts of a
CREATE MATERIALIZED VIEW statement: the view's primary key, the columns it
selects and its WHERE clause.
"""

import uuid
from typing import List, Optional, Sequence, Union

from view_schema.exceptions import InvalidViewDefinitionError
from view_schema.models.column import ColumnDefinition, ColumnIdentifier, ColumnKind
from view_schema.models.config import SchemaConfig
from view_schema.models.table_metadata import TableMetadata
from view_schema.models.view_definition import ViewDefinition
from view_schema.parser.grammar import GrammarEngine
from view_schema.parser.sqlglot_grammar import default_grammar
from view_schema.rewriter.relation_rewriter import referenced_columns

ColumnName = Union[ColumnIdentifier, str]


def build_view_definition(
    base_table: TableMetadata,
    view_name: str,
    partition_key: Sequence[ColumnName],
    clustering_key: Sequence[ColumnName] = (),
    where_clause: str = "",
    selected: Optional[Sequence[ColumnName]] = None,
    grammar: Optional[GrammarEngine] = None,
    config: Optional[SchemaConfig] = None,
    view_id: Optional[uuid.UUID] = None,
    clustering_order: Optional[dict] = None,
) -> ViewDefinition:
    """Build the definition of a materialized view over a base table.

    Column types are taken from the base table. Columns of the view that are
    not part of its primary key become regular columns (static base columns
    stay static).

    Args:
        base_table: Metadata of the base table.
        view_name: Name of the new view.
        partition_key: View partition key columns, in order.
        clustering_key: View clustering columns, in order.
        where_clause: Predicate text of the view.
        selected: Columns selected by the view. None selects every base
            table column and marks the view as including all columns.
        grammar: Grammar engine. Defaults to the sqlglot engine.
        config: Schema configuration. Defaults to SchemaConfig().
        view_id: Identifier of the view. A random one is generated if None.
        clustering_order: Optional mapping of clustering column name to
            "ASC" or "DESC". Columns not listed keep the base table's
            clustering order.

    Returns:
        The new view definition.

    Raises:
        InvalidViewDefinitionError: If a column is unknown to the base
            table, a base primary key column is missing from the view's
            primary key, a primary key column is repeated, or the predicate
            restricts a column the view does not select.
        PredicateSyntaxError: If the WHERE clause is not a valid predicate.

    Example:
        >>> view = build_view_definition(
        ...     users, "users_by_email", ["email"], ["user_id"],
        ...     "email IS NOT NULL AND user_id IS NOT NULL",
        ... )
        >>> view.query_statement.table_name
        'users'
    """
    config = config or SchemaConfig()
    grammar = grammar or default_grammar(config.dialect)
    clustering_order = clustering_order or {}

    def fail(message: str) -> InvalidViewDefinitionError:
        return InvalidViewDefinitionError(
            f"Cannot create materialized view {base_table.keyspace}.{view_name}: {message}",
            view_name=view_name,
        )

    def base_column(name: ColumnName) -> ColumnDefinition:
        definition = base_table.get_column_definition(name)
        if definition is None:
            raise fail(
                f"unknown column {ColumnIdentifier.of(name).to_cql()} "
                f"in base table {base_table.qualified_name}"
            )
        return definition

    if not partition_key:
        raise fail("a view needs at least one partition key column")

    key_ids: List[ColumnIdentifier] = [
        ColumnIdentifier.of(c) for c in list(partition_key) + list(clustering_key)
    ]
    if len(set(key_ids)) != len(key_ids):
        raise fail("a column cannot appear twice in the primary key")

    for definition in base_table.primary_key_columns():
        if definition.name not in key_ids:
            raise fail(
                f"base table primary key column {definition.name.to_cql()} "
                f"is missing from the view primary key"
            )

    include_all_columns = selected is None
    if include_all_columns:
        selected_ids = [d.name for d in base_table.all_columns()]
    else:
        selected_ids = [ColumnIdentifier.of(c) for c in selected]

    metadata = TableMetadata(base_table.keyspace, view_name, view_id, is_view=True)
    for name in partition_key:
        metadata.add_partition_key(name, base_column(name).cql_type)
    for name in clustering_key:
        column_id = ColumnIdentifier.of(name)
        definition = base_column(column_id)
        default_order = (
            definition.clustering_order
            if definition.kind is ColumnKind.CLUSTERING
            else "ASC"
        )
        order = clustering_order.get(column_id.name, default_order)
        metadata.add_clustering_column(column_id, definition.cql_type, order)
    for column_id in selected_ids:
        if metadata.has_column(column_id):
            continue
        definition = base_column(column_id)
        metadata.add_regular_column(
            column_id,
            definition.cql_type,
            static=definition.kind is ColumnKind.STATIC,
        )

    relations = grammar.parse_predicate(where_clause)
    missing = [c for c in referenced_columns(relations) if not metadata.has_column(c)]
    if missing:
        raise fail(
            "the WHERE clause restricts columns the view does not select: "
            + ", ".join(c.to_cql() for c in missing)
        )

    predicate_text = grammar.render_predicate(relations)
    statement = grammar.parse_query_statement(
        grammar.render_query_statement(
            base_table.name, metadata.all_columns(), predicate_text
        )
    )

    return ViewDefinition(
        keyspace_name=base_table.keyspace,
        view_name=view_name,
        base_table_id=base_table.id,
        base_table_name=base_table.name,
        include_all_columns=include_all_columns,
        query_statement=statement,
        predicate_text=predicate_text,
        metadata=metadata,
    )
