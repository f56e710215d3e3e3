"""
Command-line interface for view schema management.

This module provides a command-line interface to inspect the tables and
materialized views of a JSON schema file and to apply cascading column
renames to them.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from colorama import Fore, Style, init
from tabulate import tabulate

from view_schema import ErrorMode, SchemaConfig, SchemaRegistry, __version__
from view_schema.exceptions import ViewSchemaError
from view_schema.models.column import ColumnIdentifier, ColumnKind
from view_schema.models.view_definition import ViewDefinition
from view_schema.utils.sql_formatter import format_sql

USE_COLOR = True


def _paint(color: str, msg: str) -> str:
    if USE_COLOR:
        return f"{color}{msg}{Style.RESET_ALL}"
    return msg


def print_success(msg: str) -> None:
    """Print success message."""
    print(_paint(Fore.GREEN, f"[OK] {msg}"))


def print_error(msg: str) -> None:
    """Print error message."""
    print(_paint(Fore.RED, f"[ERROR] {msg}"), file=sys.stderr)


def print_warning(msg: str) -> None:
    """Print warning message."""
    print(_paint(Fore.YELLOW, f"[WARN] {msg}"))


def print_info(msg: str) -> None:
    """Print info message."""
    print(_paint(Fore.CYAN, msg))


def main(argv: Optional[List[str]] = None) -> None:
    """
    CLI main entry point.

    Supported commands:
        # List tables and views
        view-schema schema.json --list

        # Show a view definition
        view-schema schema.json --show ks.view

        # Rename a base table column and every view column derived from it
        view-schema schema.json --rename ks.table.column=new_name

        # Write the resulting schema
        view-schema schema.json --rename ks.t.a=b --export renamed.json
    """
    parser = argparse.ArgumentParser(
        prog="view-schema",
        description=f"Materialized view schema tool - v{__version__}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List tables and views
  %(prog)s schema.json --list

  # Show a view
  %(prog)s schema.json --show shop.orders_by_customer

  # Cascading column rename
  %(prog)s schema.json --rename shop.orders.customer_id=buyer_id --export out.json
        """,
    )

    parser.add_argument("schema_file", help="Schema definition file (JSON format)")

    query_group = parser.add_argument_group("Commands")
    query_group.add_argument(
        "--list", "-l", action="store_true", help="List tables and views"
    )
    query_group.add_argument(
        "--show", "-s", metavar="KEYSPACE.VIEW", help="Show a materialized view"
    )
    query_group.add_argument(
        "--rename",
        "-r",
        metavar="KEYSPACE.TABLE.COLUMN=NEW",
        help="Rename a base table column and its view columns (quote to keep case)",
    )

    output_group = parser.add_argument_group("Output Options")
    output_group.add_argument(
        "--format",
        "-f",
        choices=["pretty", "table", "json"],
        default="pretty",
        help="Output format (default: pretty)",
    )
    output_group.add_argument(
        "--export", "-o", metavar="FILE", help="Write the resulting schema to a file"
    )
    output_group.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )

    config_group = parser.add_argument_group("Configuration")
    config_group.add_argument(
        "--dialect", default="", help="sqlglot dialect for predicates (default: generic)"
    )
    config_group.add_argument(
        "--lenient",
        action="store_true",
        help="Skip the predicate/metadata consistency check on rename",
    )
    config_group.add_argument(
        "--fail-on-redefinition",
        action="store_true",
        help="Fail when the schema file defines a table or view twice",
    )

    args = parser.parse_args(argv)

    global USE_COLOR
    USE_COLOR = not args.no_color
    if USE_COLOR:
        init(autoreset=True)

    rename = None
    if args.rename:
        try:
            rename = parse_rename(args.rename)
        except ValueError as e:
            parser.error(str(e))

    show = None
    if args.show:
        try:
            show = parse_view_ref(args.show)
        except ValueError as e:
            parser.error(str(e))

    schema_path = Path(args.schema_file)
    if not schema_path.exists():
        print_error(f"Schema file not found: {args.schema_file}")
        sys.exit(1)

    config = SchemaConfig(
        dialect=args.dialect,
        strict_mode=not args.lenient,
        on_redefinition=ErrorMode.FAIL if args.fail_on_redefinition else ErrorMode.WARN,
    )

    try:
        data = json.loads(schema_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print_error(f"Invalid schema file {schema_path}: {e}")
        sys.exit(1)

    try:
        registry = SchemaRegistry.from_dict(data, config=config)

        if rename:
            handle_rename(registry, *rename, output_format=args.format)
        if show:
            handle_show(registry, *show, output_format=args.format)
        if args.list or not (rename or show):
            handle_list(registry, args.format)

        if args.export:
            Path(args.export).write_text(
                json.dumps(registry.to_dict(), indent=2), encoding="utf-8"
            )
            print_success(f"Schema written to {args.export}")

        for warning in registry.warnings.get_by_level("WARNING"):
            print_warning(warning.message)

    except (ViewSchemaError, ValueError) as e:
        print_error(str(e))
        sys.exit(1)


def parse_view_ref(ref: str) -> tuple[str, str]:
    """
    Parse a view reference.

    Args:
        ref: Format "keyspace.view"

    Raises:
        ValueError: If format is incorrect
    """
    parts = ref.split(".")
    if len(parts) != 2 or not all(parts):
        raise ValueError(
            f"Invalid view reference: '{ref}'. Expected format: 'keyspace.view'"
        )
    return parts[0], parts[1]


def parse_rename(ref: str) -> tuple[str, str, str, str]:
    """
    Parse a rename request.

    Args:
        ref: Format "keyspace.table.column=new_column"

    Returns:
        (keyspace, table, column, new_column)

    Raises:
        ValueError: If format is incorrect
    """
    target, sep, new_name = ref.partition("=")
    parts = target.split(".")
    if not sep or not new_name or len(parts) != 3 or not all(parts):
        raise ValueError(
            f"Invalid rename: '{ref}'. Expected format: 'keyspace.table.column=new_column'"
        )
    return parts[0], parts[1], parts[2], new_name


def handle_rename(
    registry: SchemaRegistry,
    keyspace: str,
    table: str,
    column: str,
    new_name: str,
    output_format: str = "pretty",
) -> None:
    """Handle --rename command.

    Column names follow CQL rules: unquoted names fold to lower case and
    double-quoted names keep their exact case.
    """
    from_id = ColumnIdentifier.from_cql(column)
    to_id = ColumnIdentifier.from_cql(new_name)
    views = registry.rename_column(keyspace, table, from_id, to_id)
    print_success(f"Renamed {keyspace}.{table}.{from_id.to_cql()} to {to_id.to_cql()}")

    if not views:
        print_info("No materialized view includes this column.")
        return

    if output_format == "json":
        print(json.dumps([view_to_dict(v) for v in views], indent=2))
        return

    print_info(f"Rewrote {len(views)} materialized view(s):")
    for view in views:
        print(f"  {view.qualified_name}: WHERE {view.predicate_text}")


def handle_show(
    registry: SchemaRegistry,
    keyspace: str,
    name: str,
    output_format: str = "pretty",
) -> None:
    """Handle --show command."""
    view = registry.resolve_view(keyspace, name)

    if output_format == "json":
        print(json.dumps(view_to_dict(view), indent=2))
        return

    print_info(f"Materialized view {view.qualified_name}")
    print(f"  Base table: {view.keyspace_name}.{view.base_table_name}")
    print(f"  Includes all columns: {view.include_all_columns}")
    rows = [
        [
            d.name.to_cql(),
            d.cql_type,
            d.kind.value,
            d.clustering_order if d.kind is ColumnKind.CLUSTERING else "",
        ]
        for d in view.metadata.all_columns()
    ]
    print(tabulate(rows, headers=["Column", "Type", "Kind", "Order"], tablefmt="simple"))

    statement = view.query_statement.to_cql()
    if registry.config.pretty_statements or output_format == "table":
        statement = format_sql(statement, dialect=registry.config.dialect)
    print("\nDefining statement:")
    print(statement)


def handle_list(registry: SchemaRegistry, output_format: str = "pretty") -> None:
    """Handle --list command."""
    if output_format == "json":
        print(json.dumps(registry.to_dict(), indent=2))
        return

    table_rows = [
        [t.qualified_name, len(t.all_columns()), len(registry.views_of(t.id))]
        for t in sorted(registry.get_all_tables(), key=lambda t: t.qualified_name)
    ]
    view_rows = [
        [v.qualified_name, v.base_table_name, v.predicate_text or "-"]
        for v in sorted(registry.get_all_views(), key=lambda v: v.qualified_name)
    ]

    print_info("Tables:")
    print(tabulate(table_rows, headers=["Table", "Columns", "Views"], tablefmt="simple"))
    print()
    print_info("Materialized views:")
    print(tabulate(view_rows, headers=["View", "Base table", "Where"], tablefmt="simple"))


def view_to_dict(view: ViewDefinition) -> dict:
    """Summarize a view for JSON output."""
    return {
        "view": view.qualified_name,
        "base_table": view.base_table_name,
        "include_all_columns": view.include_all_columns,
        "columns": [d.name.name for d in view.metadata.all_columns()],
        "where": view.predicate_text,
        "statement": view.query_statement.to_cql(),
    }


if __name__ == "__main__":
    main()
