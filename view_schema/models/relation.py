"""
Relation model.

This module defines the Relation class and RelationKind enum. A relation is
one restriction of a view's WHERE clause: a left-hand side naming one or
more columns, an operator, and a right-hand value.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from view_schema.models.column import ColumnIdentifier

SUPPORTED_OPERATORS = ("=", "!=", "<", "<=", ">", ">=", "IN", "LIKE", "IS NOT")


class RelationKind(Enum):
    """Shape of a relation's left-hand side.

    Attributes:
        SINGLE_COLUMN: ``col op value``.
        MULTI_COLUMN: ``(col1, col2) op value``.
        TOKEN: ``token(col1, col2) op value``.
    """

    SINGLE_COLUMN = "single_column"
    MULTI_COLUMN = "multi_column"
    TOKEN = "token"


@dataclass(frozen=True)
class Relation:
    """One restriction of a predicate.

    Relations are immutable; renaming produces a new relation. The value is
    kept as rendered text because it never references the restricted
    columns.

    Attributes:
        kind: Shape of the left-hand side.
        columns: Columns named on the left-hand side, in written order.
        operator: Comparison operator, one of SUPPORTED_OPERATORS.
        value: Rendered right-hand operand (a literal, tuple, function call
            or ``NULL`` for ``IS NOT``).

    Example:
        >>> rel = Relation(RelationKind.SINGLE_COLUMN, (ColumnIdentifier("a"),), "=", "1")
        >>> rel.to_cql()
        'a = 1'
        >>> rel.rename_identifier(ColumnIdentifier("a"), ColumnIdentifier("Z")).to_cql()
        '"Z" = 1'
    """

    kind: RelationKind
    columns: Tuple[ColumnIdentifier, ...]
    operator: str
    value: str

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("a relation must restrict at least one column")
        if self.kind is RelationKind.SINGLE_COLUMN and len(self.columns) != 1:
            raise ValueError("a single-column relation restricts exactly one column")
        if self.operator not in SUPPORTED_OPERATORS:
            raise ValueError(f"unsupported relation operator: {self.operator}")

    def rename_identifier(
        self, from_id: ColumnIdentifier, to_id: ColumnIdentifier
    ) -> "Relation":
        """Return this relation with every ``from_id`` column replaced by ``to_id``.

        The same instance is returned when the relation does not reference
        ``from_id``.
        """
        if from_id not in self.columns:
            return self
        columns = tuple(to_id if c == from_id else c for c in self.columns)
        return replace(self, columns=columns)

    def to_cql(self, dialect: str = "") -> str:
        """Render the relation as canonical predicate text.

        Column names are quoted for ``dialect`` where needed; the value is
        kept as rendered by the parser.
        """
        names = ", ".join(c.to_cql(dialect) for c in self.columns)
        if self.kind is RelationKind.MULTI_COLUMN:
            lhs = f"({names})"
        elif self.kind is RelationKind.TOKEN:
            lhs = f"token({names})"
        else:
            lhs = names
        return f"{lhs} {self.operator} {self.value}"

    def __str__(self) -> str:
        return self.to_cql()
