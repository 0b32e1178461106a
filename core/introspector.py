#!/usr/bin/env python3
"""
SchemaEdit Schema Introspector

Reads live table and column metadata through the active connection. All
reads are fresh; nothing is cached between requests, so a reorder right
after another DDL change always sees the current definition.
"""

import logging
from typing import List, Tuple

from core.connection import DatabaseConnection
from core.dialects import DialectAdapter
from core.errors import IntrospectionError
from core.schema_ir import ColumnDescriptor

logger = logging.getLogger(__name__)

# MariaDB labels the SHOW CREATE TABLE column with a trailing space on some versions
CREATE_TABLE_KEYS = ('Create Table', 'Create Table ')


class SchemaIntrospector:
    """Read-only view of the connected database schema"""

    def __init__(self, connection: DatabaseConnection, dialect: DialectAdapter):
        self.connection = connection
        self.dialect = dialect

    def _fetch(self, sql: str, params=None, what: str = "schema metadata") -> List[dict]:
        result = self.connection.execute_query(sql, params)
        if not result.get('success'):
            logger.error(f"Failed to read {what}: {result.get('error')}")
            raise IntrospectionError(
                f"Unable to read {what}: {result.get('error')}",
                {'sql': sql}
            )
        return list(result.get('data') or [])

    def list_tables(self) -> List[str]:
        """
        List tables in the current database/schema.

        Returns:
            Table names, alphabetical for PostgreSQL/SQLite and in the
            server's native order for MySQL
        """
        rows = self._fetch(self.dialect.list_tables_statement(), what="table list")

        tables = []
        for row in rows:
            name = self.dialect.table_from_row(row)
            if name:
                tables.append(name)

        logger.debug(f"Found {len(tables)} tables: {tables}")
        return tables

    def list_columns(self, table: str) -> List[ColumnDescriptor]:
        """
        List a table's columns in ordinal order.

        Args:
            table: Table name

        Returns:
            Column descriptors; empty when the table has no columns or does
            not exist (PostgreSQL/SQLite report no rows for unknown tables)
        """
        sql, params = self.dialect.list_columns_statement(table)
        rows = self._fetch(sql, params, what=f'columns for "{table}"')

        columns = [self.dialect.column_from_row(row) for row in rows]
        logger.debug(f"Introspected {table}: {[c.name for c in columns]}")
        return columns

    def list_tables_with_columns(self) -> List[Tuple[str, List[ColumnDescriptor]]]:
        return [(table, self.list_columns(table)) for table in self.list_tables()]

    def fetch_table_definition_text(self, table: str) -> str:
        """
        Fetch the server's CREATE TABLE text for a table (MySQL only).

        Raises:
            UnsupportedOperationError: On dialects without SHOW CREATE TABLE
            IntrospectionError: If the definition cannot be read or is empty
        """
        sql = self.dialect.show_create_table_statement(table)
        rows = self._fetch(sql, what=f'table definition for "{table}"')

        if not rows:
            raise IntrospectionError('Unable to read table definition for reordering.', {'table': table})

        row = rows[0]
        definition = ''
        for key in CREATE_TABLE_KEYS:
            if row.get(key):
                definition = str(row[key])
                break

        definition = definition.strip()
        if not definition:
            raise IntrospectionError('Received empty table definition while reordering columns.', {'table': table})

        return definition
