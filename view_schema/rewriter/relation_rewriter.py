"""
Relation rewriting.

Pure functions over relation sequences. Nothing here parses or renders text;
callers go through a GrammarEngine for that.
"""

from typing import Iterable, List, Tuple, Union

from view_schema.models.column import ColumnIdentifier
from view_schema.models.relation import Relation


def rename_identifier(
    relations: Iterable[Relation],
    from_name: Union[ColumnIdentifier, str],
    to_name: Union[ColumnIdentifier, str],
) -> Tuple[Relation, ...]:
    """Rename a column in every relation of a predicate.

    Every left-hand occurrence of ``from_name`` is replaced, in a single
    pass. Relation order, kind, operator and value are preserved.

    Args:
        relations: Parsed predicate.
        from_name: Column to rename.
        to_name: New column name.

    Returns:
        The rewritten predicate.

    Example:
        >>> grammar = SqlGlotGrammar()
        >>> relations = grammar.parse_predicate("a = 1 AND b = 2 AND a < 10")
        >>> grammar.render_predicate(rename_identifier(relations, "a", "z"))
        'z = 1 AND b = 2 AND z < 10'
    """
    from_id = ColumnIdentifier.of(from_name)
    to_id = ColumnIdentifier.of(to_name)
    return tuple(relation.rename_identifier(from_id, to_id) for relation in relations)


def referenced_columns(relations: Iterable[Relation]) -> List[ColumnIdentifier]:
    """Return the columns a predicate restricts, in first-seen order."""
    seen: List[ColumnIdentifier] = []
    for relation in relations:
        for column in relation.columns:
            if column not in seen:
                seen.append(column)
    return seen
