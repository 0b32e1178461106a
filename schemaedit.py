#!/usr/bin/env python3
"""
SchemaEdit - Command Line Entry Point

Applies one schema mutation (or lists the schema) against the configured
database and prints the outcome:

    schemaedit tables
    schemaedit add-column posts status "VARCHAR(255)"
    schemaedit reorder posts id,body,title --json
    schemaedit --driver sqlite --db app.db rename-table drafts posts

Connection settings come from SCHEMAEDIT_* environment variables or a .env
file; the global options below override them for one invocation.
"""

import argparse
import copy
import json
import logging
import sys
from typing import List, Optional

from config.settings import get_settings, resolve_dialect_name, DEFAULT_PORTS, EditorSettings
from core.connection import open_connection
from core.dialects import get_dialect
from core.errors import SchemaEditError
from core.schema_editor import SchemaEditor
from core.schema_ir import (
    AddTable, RenameTable, AddColumn, RenameColumn, ChangeColumnType, ReorderColumns,
    MutationResult, parse_column_order
)

logger = logging.getLogger(__name__)

SCHEMAEDIT_VERSION = "1.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='schemaedit',
        description='SchemaEdit - dialect-aware schema mutations for MySQL, PostgreSQL and SQLite',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schemaedit tables
  schemaedit add-table drafts
  schemaedit change-type posts title "VARCHAR(500)"
  schemaedit reorder posts id,body,title

Column reordering is available on MySQL/MariaDB connections only.
        """
    )

    # Connection options
    parser.add_argument('--driver', type=str, default=None,
                        help='Database driver (mysql, pgsql, sqlite)')
    parser.add_argument('--db', '-d', type=str, default=None,
                        help='Database name, or file path for sqlite')
    parser.add_argument('--host', type=str, default=None, help='Database host')
    parser.add_argument('--port', type=int, default=None, help='Database port')
    parser.add_argument('--user', '-u', type=str, default=None, help='Database user')

    # Output options
    parser.add_argument('--json', '-j', action='store_true',
                        help='Output the result envelope as JSON')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Log issued DDL and introspection queries')
    parser.add_argument('--version', action='version', version=f"SchemaEdit {SCHEMAEDIT_VERSION}")

    commands = parser.add_subparsers(dest='command', metavar='command')

    commands.add_parser('tables', help='List tables with their columns')
    commands.add_parser('types', help='List suggested column types for the driver')

    add_table = commands.add_parser('add-table', help='Create a table with an id primary key')
    add_table.add_argument('table')

    rename_table = commands.add_parser('rename-table', help='Rename a table')
    rename_table.add_argument('table')
    rename_table.add_argument('new_name')

    add_column = commands.add_parser('add-column', help='Add a column to a table')
    add_column.add_argument('table')
    add_column.add_argument('column')
    add_column.add_argument('column_type')

    rename_column = commands.add_parser('rename-column', help='Rename a column')
    rename_column.add_argument('table')
    rename_column.add_argument('column')
    rename_column.add_argument('new_name')

    change_type = commands.add_parser('change-type', help='Change a column type (MySQL, PostgreSQL)')
    change_type.add_argument('table')
    change_type.add_argument('column')
    change_type.add_argument('new_type')

    reorder = commands.add_parser('reorder', help='Reorder every column of a table (MySQL)')
    reorder.add_argument('table')
    reorder.add_argument('order', help='Comma separated column names in the new order')

    return parser


def resolve_settings(args: argparse.Namespace) -> EditorSettings:
    """Apply command line overrides on top of the environment settings"""
    settings = copy.copy(get_settings())

    if args.driver:
        settings.driver = resolve_dialect_name(args.driver)
        if args.port is None:
            settings.db_port = DEFAULT_PORTS.get(settings.driver)
    if args.db:
        settings.db_name = args.db
    if args.host:
        settings.db_host = args.host
    if args.port is not None:
        settings.db_port = args.port
    if args.user:
        settings.db_user = args.user

    return settings


def build_request(args: argparse.Namespace):
    command = args.command

    if command == 'add-table':
        return AddTable(name=args.table)
    if command == 'rename-table':
        return RenameTable(current=args.table, new=args.new_name)
    if command == 'add-column':
        return AddColumn(table=args.table, column=args.column, column_type=args.column_type)
    if command == 'rename-column':
        return RenameColumn(table=args.table, column=args.column, new_name=args.new_name)
    if command == 'change-type':
        return ChangeColumnType(table=args.table, column=args.column, new_type=args.new_type)
    if command == 'reorder':
        return ReorderColumns(table=args.table, order=parse_column_order(args.order))
    return None


def print_result(result: MutationResult, as_json: bool):
    if as_json:
        print(json.dumps(result.to_envelope(), indent=2))
        return

    if result.ok:
        print(result.message)
        for statement in result.statements:
            print(f"  {statement}")
    else:
        print(f"Error: {result.message}", file=sys.stderr)


def main(argv: Optional[List[str]] = None):
    """Command-line interface for SchemaEdit."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    settings = resolve_settings(args)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, settings.log_level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    logger.debug(f"Settings: {settings.get_safe_dict()}")

    if args.command == 'types':
        options = get_dialect(settings.driver).column_type_options()
        if args.json:
            print(json.dumps(options, indent=2))
        else:
            for option in options:
                print(option)
        return

    try:
        connection = open_connection(settings)
    except Exception as e:
        print(f"Error connecting to database: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        editor = SchemaEditor(connection, settings.driver)

        if args.command == 'tables':
            try:
                listing = editor.list_tables_with_columns()
            except SchemaEditError as e:
                print(f"Error: {e.message}", file=sys.stderr)
                sys.exit(1)

            if args.json:
                print(json.dumps(
                    {table: [column.to_dict() for column in columns] for table, columns in listing},
                    indent=2, default=str
                ))
            else:
                for table, columns in listing:
                    print(table)
                    for column in columns:
                        nullable = 'NULL' if column.nullable else 'NOT NULL'
                        extra = f" {column.extra}" if column.extra else ''
                        print(f"  {column.name} {column.type} {nullable}{extra}")
            return

        result = editor.apply_mutation(build_request(args))
        print_result(result, args.json)
        if not result.ok:
            sys.exit(1)

    finally:
        connection.close()


__all__ = ['main', 'build_parser', 'SCHEMAEDIT_VERSION']


if __name__ == '__main__':
    main()
