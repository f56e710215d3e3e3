"""
Query statement model.

This module defines SelectStatement, the validated structured form of a
view's defining query: the base table it reads, the columns it selects and
the relations of its WHERE clause.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from sqlglot import expressions

from view_schema.models.column import ColumnIdentifier
from view_schema.models.relation import Relation


@dataclass(frozen=True)
class SelectStatement:
    """Parsed defining query of a materialized view.

    Attributes:
        table_name: Base table the query reads from.
        columns: Selected columns, in select-list order.
        relations: Relations of the WHERE clause, in written order.
        expression: The sqlglot tree the statement was extracted from.
            Not part of equality.
        dialect: sqlglot dialect the statement was read in, used to render
            it back. Not part of equality.
    """

    table_name: str
    columns: Tuple[ColumnIdentifier, ...]
    relations: Tuple[Relation, ...] = ()
    expression: Optional[expressions.Expression] = field(
        default=None, compare=False, repr=False
    )
    dialect: str = field(default="", compare=False, repr=False)

    @property
    def where_clause(self) -> str:
        return " AND ".join(relation.to_cql(self.dialect) for relation in self.relations)

    def to_cql(self) -> str:
        """Render the statement in canonical form."""
        from view_schema.parser.query_builder import build_select_statement

        return build_select_statement(
            self.table_name, self.columns, self.where_clause, dialect=self.dialect
        )
