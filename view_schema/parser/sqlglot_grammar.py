"""
sqlglot-backed grammar engine.

This module defines SqlGlotGrammar, which converts view predicate text into
Relation objects and back, and parses a view's defining SELECT statement into
a SelectStatement, using sqlglot as the parser.
"""

from functools import lru_cache
from typing import Iterable, List, Sequence, Tuple, Union

import sqlglot
from sqlglot import expressions
from sqlglot.errors import ParseError, SqlglotError

from view_schema.exceptions import PredicateSyntaxError, UnsupportedRelationError
from view_schema.models.column import ColumnDefinition, ColumnIdentifier
from view_schema.models.relation import Relation, RelationKind
from view_schema.models.statement import SelectStatement
from view_schema.parser.query_builder import build_select_statement

_COMPARISON_OPERATORS = {
    expressions.EQ: "=",
    expressions.NEQ: "!=",
    expressions.LT: "<",
    expressions.LTE: "<=",
    expressions.GT: ">",
    expressions.GTE: ">=",
    expressions.Like: "LIKE",
}


def identifier_from_node(node: expressions.Identifier) -> ColumnIdentifier:
    """Convert a sqlglot identifier, applying CQL case rules.

    Unquoted identifiers are case-insensitive and folded to lower case;
    quoted identifiers are kept exactly.
    """
    return ColumnIdentifier.from_surface(node.this, quoted=bool(node.args.get("quoted")))


class SqlGlotGrammar:
    """Grammar engine for view predicates and statements.

    A predicate is a conjunction of relations. Each relation restricts a
    single column (``a = 1``, ``a IN (1, 2)``, ``a IS NOT NULL``), a tuple of
    columns (``(a, b) > (1, 2)``) or a partition token (``token(a) > 0``),
    with the column side on the left.

    Attributes:
        dialect: sqlglot dialect used to read and write SQL.

    Example:
        >>> grammar = SqlGlotGrammar()
        >>> relations = grammar.parse_predicate("a = 1 AND b IS NOT NULL")
        >>> [r.operator for r in relations]
        ['=', 'IS NOT']
        >>> grammar.render_predicate(relations)
        'a = 1 AND b IS NOT NULL'
    """

    def __init__(self, dialect: str = "") -> None:
        self.dialect = dialect

    def parse_predicate(self, text: str) -> Tuple[Relation, ...]:
        if not text or not text.strip():
            return ()
        tree = self._parse(text, "predicate")
        return tuple(
            self._to_relation(conjunct, text) for conjunct in self._conjuncts(tree)
        )

    def render_predicate(self, relations: Sequence[Relation]) -> str:
        return " AND ".join(relation.to_cql(self.dialect) for relation in relations)

    def render_query_statement(
        self,
        table_name: str,
        columns: Iterable[Union[ColumnDefinition, ColumnIdentifier]],
        predicate_text: str,
    ) -> str:
        return build_select_statement(
            table_name, columns, predicate_text, dialect=self.dialect
        )

    def parse_query_statement(self, text: str) -> SelectStatement:
        if not text or not text.strip():
            raise PredicateSyntaxError("View statement cannot be empty")

        tree = self._parse(text, "statement")
        if not isinstance(tree, expressions.Select):
            raise PredicateSyntaxError(
                f"Expected a SELECT statement, got {type(tree).__name__}: {text[:100]}"
            )

        tables = list(tree.find_all(expressions.Table))
        if len(tables) != 1:
            raise PredicateSyntaxError(
                f"A view statement must read exactly one table: {text[:100]}"
            )
        table = tables[0]
        if table.args.get("db") or table.args.get("catalog"):
            raise PredicateSyntaxError(
                f"A view statement must name its base table without a keyspace: {text[:100]}"
            )

        columns: List[ColumnIdentifier] = []
        for projection in tree.expressions:
            if not isinstance(projection, expressions.Column) or not isinstance(
                projection.this, expressions.Identifier
            ):
                raise PredicateSyntaxError(
                    f"A view statement may only select plain columns, got: "
                    f"{projection.sql(dialect=self.dialect)}"
                )
            columns.append(identifier_from_node(projection.this))

        where = tree.args.get("where")
        relations: Tuple[Relation, ...] = ()
        if where is not None:
            relations = tuple(
                self._to_relation(conjunct, text)
                for conjunct in self._conjuncts(where.this)
            )

        return SelectStatement(
            table_name=identifier_from_node(table.this).name,
            columns=tuple(columns),
            relations=relations,
            expression=tree,
            dialect=self.dialect,
        )

    def _parse(self, text: str, what: str) -> expressions.Expression:
        """Parse text with sqlglot, converting its errors to PredicateSyntaxError."""
        try:
            tree = sqlglot.parse_one(text, dialect=self.dialect)
        except ParseError as e:
            error = e.errors[0] if e.errors else {}
            description = error.get("description") or str(e)
            raise PredicateSyntaxError(
                f"Invalid {what}: {description}",
                sql=text,
                line=error.get("line"),
                column=error.get("col"),
            ) from e
        except SqlglotError as e:
            raise PredicateSyntaxError(f"Invalid {what}: {e}", sql=text) from e

        if tree is None:
            raise PredicateSyntaxError(f"Invalid {what}: nothing to parse", sql=text)
        return tree

    def _conjuncts(self, node: expressions.Expression) -> List[expressions.Expression]:
        """Split a conjunction into its operands, left to right."""
        while isinstance(node, expressions.Paren):
            node = node.this
        if isinstance(node, expressions.And):
            return self._conjuncts(node.left) + self._conjuncts(node.right)
        return [node]

    def _to_relation(self, node: expressions.Expression, text: str) -> Relation:
        """Classify one conjunct as a Relation."""
        operator = _COMPARISON_OPERATORS.get(type(node))
        if operator is not None:
            kind, columns = self._left_hand_side(node.this, node, text)
            value = node.expression.sql(dialect=self.dialect)
            return Relation(kind, columns, operator, value)

        if isinstance(node, expressions.In):
            values = node.expressions
            if not values:
                raise UnsupportedRelationError(
                    f"IN restrictions need an explicit value list: {node.sql(dialect=self.dialect)}",
                    sql=text,
                )
            kind, columns = self._left_hand_side(node.this, node, text)
            value = "(" + ", ".join(v.sql(dialect=self.dialect) for v in values) + ")"
            return Relation(kind, columns, "IN", value)

        if (
            isinstance(node, expressions.Not)
            and isinstance(node.this, expressions.Is)
            and isinstance(node.this.expression, expressions.Null)
        ):
            kind, columns = self._left_hand_side(node.this.this, node, text)
            return Relation(kind, columns, "IS NOT", "NULL")

        if isinstance(node, expressions.Or):
            raise UnsupportedRelationError(
                f"OR is not supported in view predicates: {node.sql(dialect=self.dialect)}",
                sql=text,
            )

        raise UnsupportedRelationError(
            f"Unsupported restriction: {node.sql(dialect=self.dialect)}", sql=text
        )

    def _left_hand_side(
        self, lhs: expressions.Expression, relation: expressions.Expression, text: str
    ) -> Tuple[RelationKind, Tuple[ColumnIdentifier, ...]]:
        if isinstance(lhs, expressions.Column):
            return RelationKind.SINGLE_COLUMN, (self._column(lhs, relation, text),)

        if isinstance(lhs, expressions.Tuple):
            columns = tuple(self._column(c, relation, text) for c in lhs.expressions)
            return RelationKind.MULTI_COLUMN, columns

        if isinstance(lhs, expressions.Anonymous) and lhs.name.lower() == "token":
            columns = tuple(self._column(c, relation, text) for c in lhs.expressions)
            return RelationKind.TOKEN, columns

        raise UnsupportedRelationError(
            f"The left side of a restriction must name columns: "
            f"{relation.sql(dialect=self.dialect)}",
            sql=text,
        )

    def _column(
        self, node: expressions.Expression, relation: expressions.Expression, text: str
    ) -> ColumnIdentifier:
        if not isinstance(node, expressions.Column) or not isinstance(
            node.this, expressions.Identifier
        ):
            raise UnsupportedRelationError(
                f"Expected a column in restriction: {relation.sql(dialect=self.dialect)}",
                sql=text,
            )
        if node.table:
            raise UnsupportedRelationError(
                f"Qualified columns are not supported in view predicates: "
                f"{relation.sql(dialect=self.dialect)}",
                sql=text,
            )
        return identifier_from_node(node.this)


@lru_cache(maxsize=None)
def default_grammar(dialect: str = "") -> SqlGlotGrammar:
    """Return the shared grammar engine for a dialect."""
    return SqlGlotGrammar(dialect)
