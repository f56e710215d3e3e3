"""
Column identifier and column definition models.

This module defines ColumnIdentifier, the exact (case-preserving) name of a
column, together with ColumnDefinition and ColumnKind which describe the
slot a column occupies in a table's primary key.
"""

import re
from dataclasses import dataclass, replace
from enum import Enum
from functools import lru_cache
from typing import FrozenSet, Union

from sqlglot import expressions
from sqlglot.dialects.dialect import Dialect

_UNQUOTED_IDENTIFIER = re.compile(r"[a-z][a-z0-9_]*")

# CQL words that must be quoted when used as column names, on top of the
# keywords of the sqlglot dialect that parses view text.
CQL_RESERVED_KEYWORDS = frozenset(
    {
        "ADD",
        "ALL",
        "ALLOW",
        "AND",
        "AS",
        "ASC",
        "BETWEEN",
        "BY",
        "CASE",
        "CREATE",
        "DATE",
        "DELETE",
        "DESC",
        "DISTINCT",
        "DROP",
        "END",
        "EXISTS",
        "FROM",
        "IN",
        "INSERT",
        "INTERVAL",
        "INTO",
        "IS",
        "JOIN",
        "KEY",
        "LIKE",
        "LIMIT",
        "NOT",
        "NULL",
        "ON",
        "OR",
        "ORDER",
        "PRIMARY",
        "SELECT",
        "SET",
        "TABLE",
        "TIME",
        "TIMESTAMP",
        "TOKEN",
        "UPDATE",
        "USE",
        "USING",
        "VIEW",
        "WHERE",
        "WITH",
    }
)


@lru_cache(maxsize=None)
def reserved_keywords(dialect: str = "") -> FrozenSet[str]:
    """Return the upper-cased words that cannot be used as bare identifiers.

    This is the set of single-word keywords known to the dialect's tokenizer
    plus CQL_RESERVED_KEYWORDS.
    """
    tokenizer = Dialect.get_or_raise(dialect).tokenizer_class
    words = {
        keyword.upper()
        for keyword in tokenizer.KEYWORDS
        if keyword.replace("_", "").isalnum()
    }
    return frozenset(words) | CQL_RESERVED_KEYWORDS


def quote_if_needed(name: str, dialect: str = "") -> str:
    """Render a name as an identifier of a dialect, quoting it only when required.

    Example:
        >>> quote_if_needed("user_id")
        'user_id'
        >>> quote_if_needed("UserId")
        '"UserId"'
        >>> quote_if_needed("UserId", dialect="mysql")
        '`UserId`'
    """
    quoted = (
        not _UNQUOTED_IDENTIFIER.fullmatch(name)
        or name.upper() in reserved_keywords(dialect)
    )
    return expressions.to_identifier(name, quoted=quoted).sql(dialect=dialect)


@dataclass(frozen=True)
class ColumnIdentifier:
    """The exact name of a column.

    Unquoted surface identifiers are case-insensitive and stored lower-cased;
    quoted identifiers keep their exact characters. Two identifiers are equal
    only when their stored names are identical.

    Attributes:
        name: Exact internal column name.

    Example:
        >>> ColumnIdentifier.from_cql("UserId")
        ColumnIdentifier(name='userid')
        >>> ColumnIdentifier.from_cql('"UserId"').to_cql()
        '"UserId"'
    """

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("column name cannot be empty")

    @classmethod
    def of(cls, name: Union["ColumnIdentifier", str]) -> "ColumnIdentifier":
        """Return an identifier for an exact name, keeping its case."""
        if isinstance(name, ColumnIdentifier):
            return name
        return cls(name)

    @classmethod
    def from_surface(cls, name: str, quoted: bool = False) -> "ColumnIdentifier":
        """Return the identifier for a name as written, folding it unless quoted."""
        return cls(name if quoted else name.lower())

    @classmethod
    def from_cql(cls, text: str) -> "ColumnIdentifier":
        """Parse a surface identifier, honouring CQL quoting rules."""
        text = text.strip()
        if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
            return cls.from_surface(text[1:-1].replace('""', '"'), quoted=True)
        return cls.from_surface(text)

    def to_cql(self, dialect: str = "") -> str:
        """Render the identifier, quoted only if needed to preserve it."""
        return quote_if_needed(self.name, dialect)

    def __str__(self) -> str:
        return self.name


class ColumnKind(Enum):
    """Role a column plays in a table definition."""

    PARTITION_KEY = "partition_key"
    CLUSTERING = "clustering"
    REGULAR = "regular"
    STATIC = "static"

    def is_primary_key(self) -> bool:
        """Check if columns of this kind belong to the primary key."""
        return self in (ColumnKind.PARTITION_KEY, ColumnKind.CLUSTERING)


@dataclass(frozen=True)
class ColumnDefinition:
    """Definition of a single column of a table or view.

    Attributes:
        name: Column identifier.
        cql_type: Column type as written in CQL (e.g. "int", "text").
        kind: Role of the column.
        position: Index within its partition key or clustering key (0 for
            regular and static columns).
        clustering_order: "ASC" or "DESC"; only meaningful for clustering
            columns.
    """

    name: ColumnIdentifier
    cql_type: str
    kind: ColumnKind = ColumnKind.REGULAR
    position: int = 0
    clustering_order: str = "ASC"

    def __post_init__(self) -> None:
        if self.clustering_order not in ("ASC", "DESC"):
            raise ValueError(
                f"clustering_order must be 'ASC' or 'DESC', got {self.clustering_order!r}"
            )
        if self.position < 0:
            raise ValueError("position cannot be negative")

    def with_name(self, name: ColumnIdentifier) -> "ColumnDefinition":
        """Return a copy of this definition in the same slot under a new name."""
        return replace(self, name=name)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {"name": self.name.name, "type": self.cql_type}
        if self.kind is ColumnKind.CLUSTERING:
            data["order"] = self.clustering_order
        if self.kind is ColumnKind.STATIC:
            data["static"] = True
        return data
