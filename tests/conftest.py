#!/usr/bin/env python3
"""
SchemaEdit Test Configuration - PyTest Configuration and Fixtures

Provides an in-memory stand-in for a MySQL server (enough of SHOW TABLES,
SHOW FULL COLUMNS, SHOW CREATE TABLE and ALTER TABLE to exercise the
planner end to end), real SQLite connections, and a clean settings
environment.
"""

import os
import re
import sys
from typing import Dict, List, Any, Optional

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import SettingsManager
from core.connection import DatabaseConnection
from extensions.plugins.sqlite_adapter import SQLiteConnection


class FakeServerError(Exception):
    pass


def mysql_column(name: str, column_type: str, clause: str, null: str = 'YES',
                 default: Optional[str] = None, extra: str = '') -> Dict[str, Any]:
    return {
        'name': name, 'type': column_type, 'clause': clause,
        'null': null, 'default': default, 'extra': extra
    }


MODIFY_CHAIN_PATTERN = re.compile(
    r'MODIFY COLUMN `(\w+)` (.+?) (FIRST|AFTER `(\w+)`)(?=, MODIFY COLUMN |$)'
)


class FakeMySQLConnection(DatabaseConnection):
    """
    Stateful MySQL double.

    Tables keep their columns in physical order together with the clause
    SHOW CREATE TABLE would print for each one. Every query is appended to
    `queries`; statements that change the schema also go to `ddl`.
    """

    def __init__(self, tables: Dict[str, List[Dict[str, Any]]] = None, database: str = 'app'):
        self.database = database
        self.tables = {name: [dict(c) for c in columns] for name, columns in (tables or {}).items()}
        self.queries: List[str] = []
        self.ddl: List[str] = []
        self.definition_overrides: Dict[str, str] = {}
        self.ddl_error: Optional[str] = None
        self.closed = False

    def execute_query(self, sql: str, params: Optional[tuple] = None,
                      fetch: bool = True) -> Dict[str, Any]:
        self.queries.append(sql)
        try:
            data = self._dispatch(sql.strip())
        except FakeServerError as e:
            return {'success': False, 'data': [], 'rows_affected': 0, 'error': f"MySQL error: {e}"}
        return {'success': True, 'data': data, 'rows_affected': 0, 'error': None}

    def close(self):
        self.closed = True

    def column_names(self, table: str) -> List[str]:
        return [c['name'] for c in self.tables[table]]

    def clauses(self, table: str) -> Dict[str, str]:
        return {c['name']: c['clause'] for c in self.tables[table]}

    def _require_table(self, table: str) -> List[Dict[str, Any]]:
        if table not in self.tables:
            raise FakeServerError(f"(1146, \"Table '{self.database}.{table}' doesn't exist\")")
        return self.tables[table]

    def _find_column(self, table: str, name: str) -> Dict[str, Any]:
        for column in self._require_table(table):
            if column['name'] == name:
                return column
        raise FakeServerError(f"(1054, \"Unknown column '{name}' in '{table}'\")")

    def _dispatch(self, sql: str) -> List[Dict[str, Any]]:
        if sql == 'SHOW TABLES':
            return [{f'Tables_in_{self.database}': name} for name in self.tables]

        match = re.fullmatch(r'SHOW FULL COLUMNS FROM `(\w+)`', sql)
        if match:
            return [
                {
                    'Field': c['name'], 'Type': c['type'], 'Collation': None, 'Null': c['null'],
                    'Key': 'PRI' if c['name'] == 'id' else '', 'Default': c['default'],
                    'Extra': c['extra'], 'Privileges': 'select,insert,update,references', 'Comment': ''
                }
                for c in self._require_table(match.group(1))
            ]

        match = re.fullmatch(r'SHOW CREATE TABLE `(\w+)`', sql)
        if match:
            table = match.group(1)
            columns = self._require_table(table)
            if table in self.definition_overrides:
                return [{'Table': table, 'Create Table': self.definition_overrides[table]}]
            lines = [f"  `{c['name']}` {c['clause']}" for c in columns]
            if any(c['name'] == 'id' for c in columns):
                lines.append("  PRIMARY KEY (`id`)")
            text = f"CREATE TABLE `{table}` (\n" + ",\n".join(lines) + \
                "\n) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci"
            return [{'Table': table, 'Create Table': text}]

        return self._apply_ddl(sql)

    def _apply_ddl(self, sql: str) -> List[Dict[str, Any]]:
        self.ddl.append(sql)
        if self.ddl_error:
            raise FakeServerError(self.ddl_error)

        match = re.fullmatch(r'CREATE TABLE `(\w+)` \(`id` INT UNSIGNED AUTO_INCREMENT PRIMARY KEY\)', sql)
        if match:
            if match.group(1) in self.tables:
                raise FakeServerError(f"(1050, \"Table '{match.group(1)}' already exists\")")
            self.tables[match.group(1)] = [mysql_column(
                'id', 'int(10) unsigned', 'int(10) unsigned NOT NULL AUTO_INCREMENT',
                null='NO', extra='auto_increment'
            )]
            return []

        match = re.fullmatch(r'ALTER TABLE `(\w+)` RENAME TO `(\w+)`', sql)
        if match:
            self.tables[match.group(2)] = self.tables.pop(match.group(1))
            return []

        match = re.fullmatch(r'ALTER TABLE `(\w+)` ADD COLUMN `(\w+)` (.+)', sql)
        if match:
            table, name, column_type = match.groups()
            self._require_table(table).append(
                mysql_column(name, column_type.lower(), f"{column_type.lower()} DEFAULT NULL")
            )
            return []

        match = re.fullmatch(r'ALTER TABLE `(\w+)` RENAME COLUMN `(\w+)` TO `(\w+)`', sql)
        if match:
            self._find_column(match.group(1), match.group(2))['name'] = match.group(3)
            return []

        match = re.fullmatch(r'ALTER TABLE `(\w+)` MODIFY `(\w+)` (.+)', sql)
        if match:
            column = self._find_column(match.group(1), match.group(2))
            column['type'] = match.group(3).lower()
            column['clause'] = f"{match.group(3).lower()} DEFAULT NULL"
            return []

        match = re.fullmatch(r'ALTER TABLE `(\w+)` (MODIFY COLUMN .+)', sql)
        if match:
            table = match.group(1)
            columns = self._require_table(table)
            for move in MODIFY_CHAIN_PATTERN.finditer(match.group(2)):
                name, clause, _, after = move.groups()
                column = self._find_column(table, name)
                columns.remove(column)
                column['clause'] = clause
                if after is None:
                    columns.insert(0, column)
                else:
                    columns.insert(columns.index(self._find_column(table, after)) + 1, column)
            return []

        raise FakeServerError(f"(1064, 'You have an error in your SQL syntax near \"{sql[:30]}\"')")


def posts_table() -> List[Dict[str, Any]]:
    return [
        mysql_column('id', 'int(10) unsigned', 'int(10) unsigned NOT NULL AUTO_INCREMENT',
                     null='NO', extra='auto_increment'),
        mysql_column('title', 'varchar(255)', "varchar(255) NOT NULL DEFAULT ''",
                     null='NO', default=''),
        mysql_column('body', 'text', 'text COLLATE utf8mb4_unicode_ci'),
        mysql_column('created_at', 'timestamp',
                     "timestamp NOT NULL DEFAULT current_timestamp() COMMENT 'Created, in UTC'",
                     null='NO', default='current_timestamp()'),
    ]


@pytest.fixture
def mysql_connection():
    """Fake MySQL server holding `posts (id, title, body, created_at)` and `authors (id, name)`"""
    return FakeMySQLConnection({
        'posts': posts_table(),
        'authors': [
            mysql_column('id', 'int(10) unsigned', 'int(10) unsigned NOT NULL AUTO_INCREMENT',
                         null='NO', extra='auto_increment'),
            mysql_column('name', 'varchar(100)', 'varchar(100) DEFAULT NULL'),
        ],
    })


@pytest.fixture
def sqlite_connection():
    """In-memory SQLite database with a `posts` table"""
    connection = SQLiteConnection(database=':memory:')
    connection.execute_script(
        "CREATE TABLE posts (id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "title TEXT NOT NULL DEFAULT '', body TEXT);"
    )
    yield connection
    connection.close()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Remove SCHEMAEDIT_* variables and point SCHEMAEDIT_HOME at an empty directory"""
    for key in list(os.environ):
        if key.startswith('SCHEMAEDIT_'):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv('SCHEMAEDIT_HOME', str(tmp_path))
    SettingsManager.reset()
    yield tmp_path
    SettingsManager.reset()
