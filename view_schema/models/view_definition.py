"""
Materialized view definition model.

This module defines the ViewDefinition class. A view definition holds three
representations of the same columns: its structural metadata, its predicate
text and its parsed defining statement. Every operation keeps the three in
agreement.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Optional, Tuple, Union

from view_schema.exceptions import (
    ConsistencyViolationError,
    PredicateSyntaxError,
    ViewRenameError,
)
from view_schema.models.column import ColumnIdentifier
from view_schema.models.config import SchemaConfig
from view_schema.models.relation import Relation
from view_schema.models.statement import SelectStatement
from view_schema.models.table_metadata import TableMetadata
from view_schema.parser.grammar import GrammarEngine
from view_schema.parser.sqlglot_grammar import default_grammar
from view_schema.rewriter.relation_rewriter import referenced_columns, rename_identifier

if TYPE_CHECKING:
    from view_schema.registry.schema_registry import SchemaRegistry


@dataclass(frozen=True)
class ViewDefinition:
    """Definition of a materialized view.

    Equality and hashing cover the keyspace, view name, base table id,
    ``include_all_columns``, the predicate text and the metadata.
    ``base_table_name`` is a denormalized display name and
    ``query_statement`` is derived, so neither takes part.

    Attributes:
        keyspace_name: Keyspace of the view.
        view_name: Name of the view.
        base_table_id: Stable identifier of the base table; survives renames
            of the base table.
        base_table_name: Current name of the base table.
        include_all_columns: Whether the view mirrors every base table column.
        query_statement: Parsed defining statement, derived from the base
            table name, the metadata columns and the predicate text.
        predicate_text: Canonical WHERE clause of the view.
        metadata: Structural description of the view's own columns. Owned
            exclusively by this definition.

    Example:
        >>> renamed = view.rename_column("a", "z")
        >>> renamed.includes("z"), view.includes("z")
        (True, False)
    """

    keyspace_name: str
    view_name: str
    base_table_id: uuid.UUID
    base_table_name: str = field(compare=False)
    include_all_columns: bool
    query_statement: SelectStatement = field(compare=False, repr=False)
    predicate_text: str
    metadata: TableMetadata

    @property
    def qualified_name(self) -> str:
        return f"{self.keyspace_name}.{self.view_name}"

    def includes(self, column: Union[ColumnIdentifier, str]) -> bool:
        """Check if the view includes a column."""
        return self.metadata.get_column_definition(column) is not None

    def copy(self) -> ViewDefinition:
        """Return a definition with its own copy of the metadata.

        Everything else is immutable and shared.
        """
        return replace(self, metadata=self.metadata.copy())

    def base_table_metadata(self, registry: SchemaRegistry) -> TableMetadata:
        """Resolve the base table through a schema registry.

        Raises:
            UnknownTableError: If the registry does not know the base table.
        """
        return registry.resolve(self.base_table_id)

    def relations(self, grammar: Optional[GrammarEngine] = None) -> Tuple[Relation, ...]:
        """Return the predicate as parsed relations."""
        grammar = grammar or default_grammar(self.query_statement.dialect)
        return grammar.parse_predicate(self.predicate_text)

    def rename_column(
        self,
        from_name: Union[ColumnIdentifier, str],
        to_name: Union[ColumnIdentifier, str],
        grammar: Optional[GrammarEngine] = None,
        config: Optional[SchemaConfig] = None,
    ) -> ViewDefinition:
        """Rename a column in the view's partition, clustering or included columns.

        The rename is applied to the metadata, to every relation of the
        predicate and to the regenerated defining statement. A new definition
        is returned once all of these succeeded; this definition is never
        modified, so a failure leaves no half-renamed view behind.

        Args:
            from_name: Current column name (exact, case preserved).
            to_name: New column name (exact, case preserved).
            grammar: Grammar engine used to parse and render text. Defaults
                to the sqlglot engine for the configured dialect.
            config: Schema configuration. Defaults to SchemaConfig().

        Returns:
            The renamed view definition.

        Raises:
            UnknownColumnError: If the view has no column ``from_name``.
            DuplicateColumnError: If ``to_name`` names another view column.
            ViewRenameError: If the predicate or the regenerated statement
                fails to parse.
            ConsistencyViolationError: In strict mode, if the rewritten
                predicate references a column the metadata does not define.
        """
        config = config or SchemaConfig()
        grammar = grammar or default_grammar(config.dialect)
        from_id = ColumnIdentifier.of(from_name)
        to_id = ColumnIdentifier.of(to_name)

        metadata = self.metadata.copy()
        metadata.rename_column(from_id, to_id)

        try:
            relations = grammar.parse_predicate(self.predicate_text)
        except PredicateSyntaxError as e:
            raise ViewRenameError(
                f"Unexpected error parsing the where clause of materialized view "
                f"{self.qualified_name} while handling column rename: {e.message}",
                view_name=self.qualified_name,
            ) from e

        relations = rename_identifier(relations, from_id, to_id)

        if config.strict_mode:
            missing = [c for c in referenced_columns(relations) if not metadata.has_column(c)]
            if missing:
                raise ConsistencyViolationError(
                    f"Predicate of materialized view {self.qualified_name} references "
                    f"undefined columns: {', '.join(c.to_cql() for c in missing)}",
                    view_name=self.qualified_name,
                    missing_columns=[c.name for c in missing],
                )

        predicate_text = grammar.render_predicate(relations)
        statement_text = grammar.render_query_statement(
            self.base_table_name, metadata.all_columns(), predicate_text
        )

        try:
            statement = grammar.parse_query_statement(statement_text)
        except PredicateSyntaxError as e:
            raise ViewRenameError(
                f"Unexpected error parsing the regenerated statement of materialized view "
                f"{self.qualified_name} while handling column rename: {e.message}",
                view_name=self.qualified_name,
            ) from e

        return replace(
            self,
            metadata=metadata,
            predicate_text=predicate_text,
            query_statement=statement,
        )
