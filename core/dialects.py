#!/usr/bin/env python3
"""
SchemaEdit Dialect Adapters - Per-Driver DDL Builders

Each adapter knows how one SQL dialect quotes identifiers, lists tables and
columns, and spells the DDL verbs the editor needs. The planner talks only
to the DialectAdapter interface; the concrete adapter is picked once from
configuration by get_dialect().

Supported dialects:
- MySQL / MariaDB (backtick quoting, column reordering)
- PostgreSQL (double-quote quoting, in-place type change)
- SQLite (double-quote quoting, no type change, no reordering)

Usage:
    dialect = get_dialect('mysql')
    sql = dialect.add_column_statement('posts', 'status', 'VARCHAR(255)')
"""

import logging
from typing import Dict, List, Any, Optional, Tuple, Sequence, Union

from config.settings import resolve_dialect_name
from core.errors import UnsupportedOperationError
from core.schema_ir import ColumnDescriptor, Dialect
from core.validation import require_identifier, require_type_expression

logger = logging.getLogger(__name__)

Statement = Tuple[str, Optional[tuple]]


class DialectAdapter:
    """Base class for dialect adapters"""

    dialect: Dialect = None
    display_name: str = ""
    quote_char: str = '"'
    supports_reorder: bool = False
    supports_type_change: bool = True
    # Column names compare case-insensitively (MySQL, SQLite); PostgreSQL quoted names do not
    case_insensitive_columns: bool = True

    # Column type suggestions offered by the editor UI
    TYPE_OPTIONS: List[str] = []

    @property
    def name(self) -> str:
        return self.dialect.value

    def quote_identifier(self, identifier: str) -> str:
        """Quote a validated identifier; invalid input never produces a string"""
        require_identifier(identifier, 'Invalid identifier for quoting.')
        return f"{self.quote_char}{identifier}{self.quote_char}"

    def column_type_options(self) -> List[str]:
        return list(self.TYPE_OPTIONS)

    # ===== Introspection statements =====

    def list_tables_statement(self) -> str:
        raise NotImplementedError("Subclasses must implement list_tables_statement")

    def list_columns_statement(self, table: str) -> Statement:
        raise NotImplementedError("Subclasses must implement list_columns_statement")

    def table_from_row(self, row: Dict[str, Any]) -> Optional[str]:
        """Extract the table name from one row of the table listing"""
        for value in row.values():
            if isinstance(value, str):
                return value
        return None

    def column_from_row(self, row: Dict[str, Any]) -> ColumnDescriptor:
        raise NotImplementedError("Subclasses must implement column_from_row")

    def show_create_table_statement(self, table: str) -> str:
        raise UnsupportedOperationError(
            f'Reading table definitions is not supported for {self.display_name} connections.', self.name
        )

    # ===== DDL statements =====

    def create_table_statement(self, name: str) -> str:
        raise NotImplementedError("Subclasses must implement create_table_statement")

    def rename_table_statement(self, current: str, new: str) -> str:
        return f"ALTER TABLE {self.quote_identifier(current)} RENAME TO {self.quote_identifier(new)}"

    def add_column_statement(self, table: str, column: str, column_type: str) -> str:
        require_type_expression(column_type, 'Column type contains unsupported characters.')
        return (
            f"ALTER TABLE {self.quote_identifier(table)} "
            f"ADD COLUMN {self.quote_identifier(column)} {column_type}"
        )

    def rename_column_statement(self, table: str, column: str, new_name: str) -> str:
        return (
            f"ALTER TABLE {self.quote_identifier(table)} "
            f"RENAME COLUMN {self.quote_identifier(column)} TO {self.quote_identifier(new_name)}"
        )

    def change_column_type_statement(self, table: str, column: str, new_type: str) -> str:
        raise NotImplementedError("Subclasses must implement change_column_type_statement")

    def reorder_columns_statement(self, table: str, ordered_columns: Sequence[str],
                                  clauses: Dict[str, str]) -> str:
        raise UnsupportedOperationError(
            'Column reordering is currently supported only for MySQL connections.', self.name
        )


class MySQLDialect(DialectAdapter):
    """MySQL / MariaDB dialect"""

    dialect = Dialect.MYSQL
    display_name = "MySQL"
    quote_char = '`'
    supports_reorder = True

    TYPE_OPTIONS = [
        'BIGINT', 'BINARY(255)', 'BIT', 'BOOLEAN', 'CHAR(36)', 'DATE', 'DATETIME',
        'DECIMAL(10,2)', 'DOUBLE', 'FLOAT', 'INT', 'JSON', 'LONGTEXT', 'MEDIUMTEXT',
        'SMALLINT', 'TEXT', 'TIME', 'TIMESTAMP', 'TINYINT', 'TINYINT(1)', 'VARCHAR(255)'
    ]

    def list_tables_statement(self) -> str:
        # Native SHOW TABLES order is kept as-is
        return "SHOW TABLES"

    def list_columns_statement(self, table: str) -> Statement:
        return f"SHOW FULL COLUMNS FROM {self.quote_identifier(table)}", None

    def column_from_row(self, row: Dict[str, Any]) -> ColumnDescriptor:
        default = row.get('Default')
        return ColumnDescriptor(
            name=str(row.get('Field') or ''),
            type=str(row.get('Type') or ''),
            nullable=row.get('Null') == 'YES',
            default=str(default) if default is not None else None,
            extra=str(row.get('Extra') or '')
        )

    def show_create_table_statement(self, table: str) -> str:
        return f"SHOW CREATE TABLE {self.quote_identifier(table)}"

    def create_table_statement(self, name: str) -> str:
        return f"CREATE TABLE {self.quote_identifier(name)} (`id` INT UNSIGNED AUTO_INCREMENT PRIMARY KEY)"

    def change_column_type_statement(self, table: str, column: str, new_type: str) -> str:
        require_type_expression(new_type, 'Column type contains unsupported characters.')
        return (
            f"ALTER TABLE {self.quote_identifier(table)} "
            f"MODIFY {self.quote_identifier(column)} {new_type}"
        )

    def reorder_columns_statement(self, table: str, ordered_columns: Sequence[str],
                                  clauses: Dict[str, str]) -> str:
        """
        Build one ALTER TABLE that moves every column into place.

        Args:
            table: Table name
            ordered_columns: Column names in the requested order
            clauses: Verbatim column clauses from SHOW CREATE TABLE, keyed by name

        Returns:
            ALTER TABLE t MODIFY COLUMN a <clause> FIRST, MODIFY COLUMN b <clause> AFTER a, ...
        """
        modifications = []
        previous = None
        for column in ordered_columns:
            # KeyError here is a planner bug: clauses are checked before this call
            clause = clauses[column]
            position = 'FIRST' if previous is None else f"AFTER {self.quote_identifier(previous)}"
            modifications.append(f"MODIFY COLUMN {self.quote_identifier(column)} {clause} {position}")
            previous = column

        return f"ALTER TABLE {self.quote_identifier(table)} " + ", ".join(modifications)


class PostgreSQLDialect(DialectAdapter):
    """PostgreSQL dialect"""

    dialect = Dialect.POSTGRESQL
    display_name = "PostgreSQL"
    case_insensitive_columns = False

    TYPE_OPTIONS = [
        'BIGINT', 'BIGSERIAL', 'BOOLEAN', 'DATE', 'DECIMAL(10,2)', 'DOUBLE PRECISION',
        'INTEGER', 'JSON', 'JSONB', 'NUMERIC(10,2)', 'SERIAL', 'SMALLINT', 'TEXT',
        'TIMESTAMP', 'UUID', 'VARCHAR(255)'
    ]

    def list_tables_statement(self) -> str:
        return "SELECT tablename FROM pg_tables WHERE schemaname = current_schema() ORDER BY tablename"

    def list_columns_statement(self, table: str) -> Statement:
        require_identifier(table, 'Invalid identifier for quoting.')
        query = """
            SELECT column_name, data_type, is_nullable, column_default
            FROM information_schema.columns
            WHERE table_schema = current_schema()
            AND table_name = %s
            ORDER BY ordinal_position
        """
        return query, (table,)

    def column_from_row(self, row: Dict[str, Any]) -> ColumnDescriptor:
        default = row.get('column_default')
        return ColumnDescriptor(
            name=str(row.get('column_name') or ''),
            type=str(row.get('data_type') or ''),
            nullable=row.get('is_nullable') == 'YES',
            default=str(default) if default is not None else None,
            extra=''
        )

    def create_table_statement(self, name: str) -> str:
        return f'CREATE TABLE {self.quote_identifier(name)} ("id" SERIAL PRIMARY KEY)'

    def change_column_type_statement(self, table: str, column: str, new_type: str) -> str:
        require_type_expression(new_type, 'Column type contains unsupported characters.')
        return (
            f"ALTER TABLE {self.quote_identifier(table)} "
            f"ALTER COLUMN {self.quote_identifier(column)} TYPE {new_type}"
        )


class SQLiteDialect(DialectAdapter):
    """SQLite dialect"""

    dialect = Dialect.SQLITE
    display_name = "SQLite"
    supports_type_change = False

    TYPE_OPTIONS = ['INTEGER', 'REAL', 'TEXT', 'BLOB', 'NUMERIC']

    def list_tables_statement(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"

    def list_columns_statement(self, table: str) -> Statement:
        return f"PRAGMA table_info({self.quote_identifier(table)})", None

    def column_from_row(self, row: Dict[str, Any]) -> ColumnDescriptor:
        default = row.get('dflt_value')
        return ColumnDescriptor(
            name=str(row.get('name') or ''),
            type=str(row.get('type') or ''),
            nullable=int(row.get('notnull') or 0) == 0,
            default=str(default) if default is not None else None,
            extra='PRIMARY KEY' if int(row.get('pk') or 0) == 1 else ''
        )

    def create_table_statement(self, name: str) -> str:
        return f'CREATE TABLE {self.quote_identifier(name)} ("id" INTEGER PRIMARY KEY AUTOINCREMENT)'

    def change_column_type_statement(self, table: str, column: str, new_type: str) -> str:
        # SQLite would need a rebuild-and-copy of the whole table
        raise UnsupportedOperationError(
            'Changing column types is not supported for SQLite via this editor.', self.name
        )


_DIALECTS = {
    Dialect.MYSQL: MySQLDialect,
    Dialect.POSTGRESQL: PostgreSQLDialect,
    Dialect.SQLITE: SQLiteDialect,
}


def get_dialect(dialect: Union[str, Dialect, None]) -> DialectAdapter:
    """
    Get the adapter for a dialect.

    Args:
        dialect: Dialect enum or configuration value (mysql, pgsql, sqlite).
                 Unknown or empty values fall back to MySQL.

    Returns:
        DialectAdapter instance
    """
    if not isinstance(dialect, Dialect):
        dialect = Dialect(resolve_dialect_name(dialect))

    adapter = _DIALECTS[dialect]()
    logger.debug(f"Using {adapter.name} dialect adapter")
    return adapter
