"""
Table metadata model.

This module defines the TableMetadata class, the structural description of a
table or materialized view: its identity and its columns, split into the
ordered partition key, the ordered clustering key and the unordered set of
remaining columns.
"""

import uuid
from typing import Any, Dict, List, Optional, Union

from view_schema.exceptions import DuplicateColumnError, UnknownColumnError
from view_schema.models.column import ColumnDefinition, ColumnIdentifier, ColumnKind

ColumnName = Union[ColumnIdentifier, str]


class TableMetadata:
    """Structural description of a table or view.

    The order of partition key and clustering columns is significant: it
    determines physical layout and sort order, so it is kept as a list and
    never altered by a rename. Regular and static columns are unordered.

    Attributes:
        keyspace: Keyspace the table belongs to.
        name: Table name.
        id: Stable identifier of the table; survives renames of the table.
        is_view: Whether this metadata describes a materialized view.

    Example:
        >>> meta = TableMetadata("ks", "users")
        >>> meta.add_partition_key("user_id", "uuid")
        >>> meta.add_regular_column("email", "text")
        >>> [c.name.name for c in meta.all_columns()]
        ['user_id', 'email']
        >>> meta.rename_column("email", "mail")
        >>> meta.get_column_definition("mail") is not None
        True
    """

    def __init__(
        self,
        keyspace: str,
        name: str,
        table_id: Optional[uuid.UUID] = None,
        is_view: bool = False,
    ) -> None:
        if not keyspace:
            raise ValueError("keyspace cannot be empty")
        if not name:
            raise ValueError("table name cannot be empty")

        self.keyspace = keyspace
        self.name = name
        self.id = table_id or uuid.uuid4()
        self.is_view = is_view
        self._partition_key_columns: List[ColumnDefinition] = []
        self._clustering_columns: List[ColumnDefinition] = []
        self._columns: Dict[ColumnIdentifier, ColumnDefinition] = {}

    @property
    def qualified_name(self) -> str:
        return f"{self.keyspace}.{self.name}"

    @property
    def partition_key_columns(self) -> List[ColumnDefinition]:
        return list(self._partition_key_columns)

    @property
    def clustering_columns(self) -> List[ColumnDefinition]:
        return list(self._clustering_columns)

    @property
    def regular_columns(self) -> Dict[ColumnIdentifier, ColumnDefinition]:
        """Regular and static columns, keyed by identifier."""
        return {
            column_id: definition
            for column_id, definition in self._columns.items()
            if not definition.kind.is_primary_key()
        }

    def add_column(self, definition: ColumnDefinition) -> None:
        """Add a column definition.

        Partition key and clustering columns are appended to their key, and
        their position is set to the slot they land in.

        Raises:
            DuplicateColumnError: If a column of that name already exists.
        """
        if definition.name in self._columns:
            raise DuplicateColumnError(
                f"Column {definition.name.to_cql()} already exists in table {self.qualified_name}",
                column_name=definition.name.name,
                table_name=self.qualified_name,
            )

        if definition.kind is ColumnKind.PARTITION_KEY:
            definition = ColumnDefinition(
                definition.name,
                definition.cql_type,
                ColumnKind.PARTITION_KEY,
                position=len(self._partition_key_columns),
            )
            self._partition_key_columns.append(definition)
        elif definition.kind is ColumnKind.CLUSTERING:
            definition = ColumnDefinition(
                definition.name,
                definition.cql_type,
                ColumnKind.CLUSTERING,
                position=len(self._clustering_columns),
                clustering_order=definition.clustering_order,
            )
            self._clustering_columns.append(definition)

        self._columns[definition.name] = definition

    def add_partition_key(self, name: ColumnName, cql_type: str) -> None:
        self.add_column(
            ColumnDefinition(ColumnIdentifier.of(name), cql_type, ColumnKind.PARTITION_KEY)
        )

    def add_clustering_column(
        self, name: ColumnName, cql_type: str, order: str = "ASC"
    ) -> None:
        self.add_column(
            ColumnDefinition(
                ColumnIdentifier.of(name),
                cql_type,
                ColumnKind.CLUSTERING,
                clustering_order=order,
            )
        )

    def add_regular_column(
        self, name: ColumnName, cql_type: str, static: bool = False
    ) -> None:
        kind = ColumnKind.STATIC if static else ColumnKind.REGULAR
        self.add_column(ColumnDefinition(ColumnIdentifier.of(name), cql_type, kind))

    def get_column_definition(self, name: ColumnName) -> Optional[ColumnDefinition]:
        """Get a column definition, or None if the column does not exist."""
        return self._columns.get(ColumnIdentifier.of(name))

    def has_column(self, name: ColumnName) -> bool:
        return ColumnIdentifier.of(name) in self._columns

    def primary_key_columns(self) -> List[ColumnDefinition]:
        """Partition key columns followed by clustering columns, in order."""
        return self._partition_key_columns + self._clustering_columns

    def all_columns(self) -> List[ColumnDefinition]:
        """Return every column: primary key in key order, then the rest by name."""
        others = sorted(
            (d for d in self._columns.values() if not d.kind.is_primary_key()),
            key=lambda d: d.name.name,
        )
        return self.primary_key_columns() + others

    def rename_column(self, from_name: ColumnName, to_name: ColumnName) -> None:
        """Rename a column in place.

        A partition key or clustering column keeps its slot; only the name
        within the slot changes. Renaming a column to itself does nothing.

        Args:
            from_name: Current column name.
            to_name: New column name.

        Raises:
            UnknownColumnError: If ``from_name`` is not a column of this table.
            DuplicateColumnError: If ``to_name`` already names another column.
        """
        from_id = ColumnIdentifier.of(from_name)
        to_id = ColumnIdentifier.of(to_name)

        definition = self._columns.get(from_id)
        if definition is None:
            raise UnknownColumnError(
                f"Cannot rename unknown column {from_id.to_cql()} in table {self.qualified_name}",
                column_name=from_id.name,
                table_name=self.qualified_name,
            )
        if from_id == to_id:
            return
        if to_id in self._columns:
            raise DuplicateColumnError(
                f"Cannot rename column {from_id.to_cql()} to {to_id.to_cql()} in table "
                f"{self.qualified_name}; another column of that name already exists",
                column_name=to_id.name,
                table_name=self.qualified_name,
            )

        renamed = definition.with_name(to_id)
        if definition.kind is ColumnKind.PARTITION_KEY:
            self._partition_key_columns[definition.position] = renamed
        elif definition.kind is ColumnKind.CLUSTERING:
            self._clustering_columns[definition.position] = renamed

        del self._columns[from_id]
        self._columns[to_id] = renamed

    def copy(self) -> "TableMetadata":
        """Return an independent copy sharing no mutable state with this one."""
        clone = TableMetadata(self.keyspace, self.name, self.id, self.is_view)
        # ColumnDefinition is immutable, so copying the containers is enough.
        clone._partition_key_columns = list(self._partition_key_columns)
        clone._clustering_columns = list(self._clustering_columns)
        clone._columns = dict(self._columns)
        return clone

    def _key(self) -> tuple:
        return (
            self.keyspace,
            self.name,
            self.id,
            self.is_view,
            tuple(self._partition_key_columns),
            tuple(self._clustering_columns),
            frozenset(self.regular_columns.items()),
        )

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, TableMetadata):
            return False
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        columns = ", ".join(d.name.to_cql() for d in self.all_columns())
        kind = "view" if self.is_view else "table"
        return f"TableMetadata({kind} {self.qualified_name} [{columns}])"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (schema file format)."""
        return {
            "keyspace": self.keyspace,
            "name": self.name,
            "id": str(self.id),
            "partition_key": [d.to_dict() for d in self._partition_key_columns],
            "clustering": [d.to_dict() for d in self._clustering_columns],
            "columns": [
                d.to_dict() for d in self.all_columns() if not d.kind.is_primary_key()
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], is_view: bool = False) -> "TableMetadata":
        """Build table metadata from its dictionary form.

        Raises:
            ValueError: If a required key is missing.
        """
        try:
            keyspace = data["keyspace"]
            name = data["name"]
        except KeyError as e:
            raise ValueError(f"Table definition is missing required key {e}") from e

        table_id = uuid.UUID(data["id"]) if data.get("id") else None
        meta = cls(keyspace, name, table_id, is_view=is_view)

        for column in data.get("partition_key", []):
            meta.add_partition_key(column["name"], column["type"])
        for column in data.get("clustering", []):
            meta.add_clustering_column(
                column["name"], column["type"], column.get("order", "ASC")
            )
        for column in data.get("columns", []):
            meta.add_regular_column(
                column["name"], column["type"], column.get("static", False)
            )
        return meta
