"""
Schema registry for tables and materialized views.

This module defines the SchemaRegistry class, which holds table metadata and
view definitions, resolves base tables by their stable id and applies column
renames to a base table together with every view built on it.
"""

import uuid
import warnings
from typing import Any, Dict, List, Optional, Tuple, Union

from view_schema.builder.view_builder import build_view_definition
from view_schema.exceptions import UnknownTableError, UnknownViewError, ViewSchemaError
from view_schema.graph.dependency_graph import ViewDependencyGraph
from view_schema.models.column import ColumnIdentifier
from view_schema.models.config import ErrorMode, SchemaConfig
from view_schema.models.table_metadata import TableMetadata
from view_schema.models.view_definition import ViewDefinition
from view_schema.parser.grammar import GrammarEngine
from view_schema.parser.sqlglot_grammar import default_grammar
from view_schema.utils.warnings import WarningCollector

ColumnName = Union[ColumnIdentifier, str]


class SchemaRegistry:
    """Schema registry: holds every table and view definition.

    Responsibilities:
    1. Register tables and views
    2. Resolve a base table from its stable id
    3. Track which views are built on which table
    4. Rename columns across a table and its views

    Usage:
        registry = SchemaRegistry()
        registry.register_table(users)
        registry.register_view(users_by_email)

        renamed = registry.rename_column("ks", "users", "email", "mail")
    """

    def __init__(
        self,
        config: Optional[SchemaConfig] = None,
        grammar: Optional[GrammarEngine] = None,
    ) -> None:
        """Initialize a SchemaRegistry.

        Args:
            config: Schema configuration. Defaults to SchemaConfig().
            grammar: Grammar engine used for views. Defaults to the sqlglot
                engine for the configured dialect.
        """
        self.config = config or SchemaConfig()
        self.grammar = grammar or default_grammar(self.config.dialect)
        self.tables: Dict[uuid.UUID, TableMetadata] = {}
        self.views: Dict[Tuple[str, str], ViewDefinition] = {}
        self.dependencies = ViewDependencyGraph()
        self.warnings = WarningCollector()
        self._table_ids: Dict[Tuple[str, str], uuid.UUID] = {}

    def register_table(self, metadata: TableMetadata) -> None:
        """Register table metadata.

        Raises:
            ViewSchemaError: If the name is taken and redefinition is
                configured to fail.
        """
        key = self._key(metadata.keyspace, metadata.name)
        previous_id = self._table_ids.get(key)
        if previous_id is not None:
            self._handle_redefinition("table", metadata.qualified_name)
            if previous_id != metadata.id:
                del self.tables[previous_id]

        self.tables[metadata.id] = metadata
        self._table_ids[key] = metadata.id
        self.dependencies.add_table(metadata.id)

    def register_view(self, view: ViewDefinition) -> None:
        """Register a view definition.

        Raises:
            UnknownTableError: If the base table is not registered.
            ViewSchemaError: If the name is taken and redefinition is
                configured to fail.
        """
        if view.base_table_id not in self.tables:
            raise UnknownTableError(
                f"Cannot register materialized view {view.qualified_name}: base table "
                f"{view.base_table_name} ({view.base_table_id}) is not registered",
                table=view.base_table_name,
            )

        key = self._key(view.keyspace_name, view.view_name)
        if key in self.views:
            self._handle_redefinition("view", view.qualified_name)

        self.views[key] = view
        self.dependencies.add_view(view.base_table_id, *key)

    def resolve(self, table_id: uuid.UUID) -> TableMetadata:
        """Resolve a table from its stable id.

        Raises:
            UnknownTableError: If no table has this id.
        """
        metadata = self.tables.get(table_id)
        if metadata is None:
            raise UnknownTableError(f"Unknown table id {table_id}", table=str(table_id))
        return metadata

    def get_table_by_id(self, table_id: uuid.UUID) -> Optional[TableMetadata]:
        return self.tables.get(table_id)

    def get_table(self, keyspace: str, name: str) -> Optional[TableMetadata]:
        table_id = self._table_ids.get(self._key(keyspace, name))
        return self.tables.get(table_id) if table_id is not None else None

    def has_table(self, keyspace: str, name: str) -> bool:
        return self._key(keyspace, name) in self._table_ids

    def get_view(self, keyspace: str, name: str) -> Optional[ViewDefinition]:
        return self.views.get(self._key(keyspace, name))

    def has_view(self, keyspace: str, name: str) -> bool:
        return self._key(keyspace, name) in self.views

    def resolve_view(self, keyspace: str, name: str) -> ViewDefinition:
        """Get a view definition.

        Raises:
            UnknownViewError: If the view is not registered.
        """
        view = self.get_view(keyspace, name)
        if view is None:
            raise UnknownViewError(
                f"Unknown materialized view {keyspace}.{name}", view=f"{keyspace}.{name}"
            )
        return view

    def get_all_tables(self) -> List[TableMetadata]:
        return list(self.tables.values())

    def get_all_views(self) -> List[ViewDefinition]:
        return list(self.views.values())

    def views_of(self, table_id: uuid.UUID) -> List[ViewDefinition]:
        """Return the views built on a table, sorted by keyspace and name."""
        return [self.views[key] for key in self.dependencies.views_of(table_id)]

    def remove_view(self, keyspace: str, name: str) -> bool:
        """Remove a view. Returns whether it was registered."""
        key = self._key(keyspace, name)
        if key not in self.views:
            return False
        del self.views[key]
        self.dependencies.remove_view(*key)
        return True

    def rename_column(
        self,
        keyspace: str,
        table_name: str,
        from_name: ColumnName,
        to_name: ColumnName,
    ) -> List[ViewDefinition]:
        """Rename a base table column and every view column derived from it.

        The renamed table and views are all computed before any of them is
        installed, so the registry is unchanged if any rename fails.

        Args:
            keyspace: Keyspace of the base table.
            table_name: Name of the base table.
            from_name: Current column name.
            to_name: New column name.

        Returns:
            The rewritten view definitions.

        Raises:
            UnknownTableError: If the table is not registered.
            UnknownColumnError: If the table has no column ``from_name``.
            DuplicateColumnError: If ``to_name`` already names a column of
                the table or of an affected view.
            ViewRenameError: If a view's text cannot be re-parsed.
        """
        table = self.get_table(keyspace, table_name)
        if table is None:
            raise UnknownTableError(
                f"Unknown table {keyspace}.{table_name}", table=f"{keyspace}.{table_name}"
            )

        from_id = ColumnIdentifier.of(from_name)
        to_id = ColumnIdentifier.of(to_name)

        renamed_table = table.copy()
        renamed_table.rename_column(from_id, to_id)

        renamed_views = []
        skipped_views = []
        for view in self.views_of(table.id):
            if view.includes(from_id):
                renamed_views.append(
                    view.rename_column(from_id, to_id, grammar=self.grammar, config=self.config)
                )
            else:
                skipped_views.append(view)

        self.tables[table.id] = renamed_table
        for view in renamed_views:
            self.views[self._key(view.keyspace_name, view.view_name)] = view
            self.warnings.add_view_rewrite(view.qualified_name, from_id.name, to_id.name)
        for view in skipped_views:
            self.warnings.add_view_skip(view.qualified_name, from_id.name)

        return renamed_views

    def reset(self) -> None:
        """Remove every table, view and collected warning."""
        self.tables.clear()
        self.views.clear()
        self._table_ids.clear()
        self.dependencies = ViewDependencyGraph()
        self.warnings.clear()

    def _handle_redefinition(self, kind: str, name: str) -> None:
        mode = self.config.on_redefinition
        if mode is ErrorMode.FAIL:
            raise ViewSchemaError(f"Cannot redefine {kind} '{name}': it already exists.")
        if mode is ErrorMode.WARN:
            self.warnings.add_redefinition_warning(kind, name)
            warnings.warn(
                f"{kind.capitalize()} '{name}' is being redefined. "
                f"The previous definition will be overwritten.",
                UserWarning,
            )

    def _key(self, keyspace: str, name: str) -> Tuple[str, str]:
        return keyspace.strip(), name.strip()

    def to_dict(self) -> Dict[str, Any]:
        """Export to dictionary (schema file format)."""
        views = []
        for view in self.views.values():
            meta = view.metadata
            views.append(
                {
                    "keyspace": view.keyspace_name,
                    "name": view.view_name,
                    "id": str(meta.id),
                    "base_table": view.base_table_name,
                    "partition_key": [d.name.name for d in meta.partition_key_columns],
                    "clustering": [
                        {"name": d.name.name, "order": d.clustering_order}
                        for d in meta.clustering_columns
                    ],
                    "columns": None
                    if view.include_all_columns
                    else [d.name.name for d in meta.all_columns()],
                    "where": view.predicate_text,
                }
            )
        return {
            "tables": [table.to_dict() for table in self.tables.values()],
            "views": views,
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[SchemaConfig] = None,
        grammar: Optional[GrammarEngine] = None,
    ) -> "SchemaRegistry":
        """Build a registry from its dictionary form.

        Views name their base table by name within their own keyspace.

        Raises:
            UnknownTableError: If a view names an unregistered base table.
            InvalidViewDefinitionError: If a view cannot be built.
            ValueError: If an entry is missing a required key.
        """
        registry = cls(config=config, grammar=grammar)

        for entry in data.get("tables", []):
            registry.register_table(TableMetadata.from_dict(entry))

        for entry in data.get("views", []):
            try:
                keyspace = entry["keyspace"]
                base_name = entry["base_table"]
                view_name = entry["name"]
            except KeyError as e:
                raise ValueError(f"View definition is missing required key {e}") from e

            base_table = registry.get_table(keyspace, base_name)
            if base_table is None:
                raise UnknownTableError(
                    f"Materialized view {keyspace}.{view_name} is built on unknown "
                    f"table {keyspace}.{base_name}",
                    table=f"{keyspace}.{base_name}",
                )

            clustering = [
                c if isinstance(c, dict) else {"name": c} for c in entry.get("clustering", [])
            ]
            view = build_view_definition(
                base_table,
                view_name,
                partition_key=entry.get("partition_key", []),
                clustering_key=[c["name"] for c in clustering],
                where_clause=entry.get("where", ""),
                selected=entry.get("columns"),
                grammar=registry.grammar,
                config=registry.config,
                view_id=uuid.UUID(entry["id"]) if entry.get("id") else None,
                clustering_order={c["name"]: c["order"] for c in clustering if "order" in c},
            )
            registry.register_view(view)

        return registry
