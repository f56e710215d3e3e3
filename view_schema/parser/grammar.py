"""
Grammar engine protocol.

View definitions depend on this interface, never on a concrete parser. Any
implementation able to turn predicate text into relations and back, and to
render and parse a view's defining statement, can be plugged in.
"""

from __future__ import annotations

from typing import Iterable, Protocol, Sequence, Tuple, Union, runtime_checkable

from view_schema.models.column import ColumnDefinition, ColumnIdentifier
from view_schema.models.relation import Relation
from view_schema.models.statement import SelectStatement


@runtime_checkable
class GrammarEngine(Protocol):
    """Parse and render view predicates and statements."""

    def parse_predicate(self, text: str) -> Tuple[Relation, ...]:
        """Parse predicate text into relations, in written order.

        Blank text is the empty predicate.

        Raises:
            PredicateSyntaxError: If the text is not a valid predicate.
        """
        ...

    def render_predicate(self, relations: Sequence[Relation]) -> str:
        """Render relations as canonical predicate text (a conjunction)."""
        ...

    def render_query_statement(
        self,
        table_name: str,
        columns: Iterable[Union[ColumnDefinition, ColumnIdentifier]],
        predicate_text: str,
    ) -> str:
        """Render the defining statement of a view over ``table_name``."""
        ...

    def parse_query_statement(self, text: str) -> SelectStatement:
        """Parse the defining statement of a view.

        Raises:
            PredicateSyntaxError: If the text is not a valid view statement.
        """
        ...
