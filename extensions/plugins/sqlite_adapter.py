#!/usr/bin/env python3
"""
SchemaEdit SQLite Connection Provider

sqlite3 connection used by the schema editor. Rows come back as plain dicts
through sqlite3.Row; anything other than SELECT/PRAGMA is committed right
away so each DDL statement stands alone.

Usage:
    connection = SQLiteConnection(database='data/app.db')
    result = connection.execute_query('PRAGMA table_info("posts")')
"""

import sqlite3
import logging
import time
from typing import Dict, Any, Optional
from dataclasses import dataclass
from pathlib import Path

from core.connection import DatabaseConnection

logger = logging.getLogger(__name__)

READ_ONLY_PREFIXES = ('SELECT', 'PRAGMA')


@dataclass
class ConnectionConfig:
    """SQLite connection configuration"""
    database: str = ":memory:"
    timeout: float = 30.0

    @property
    def in_memory(self) -> bool:
        return self.database == ':memory:'

    def to_connection_params(self) -> Dict[str, Any]:
        """Convert to sqlite3.connect parameters"""
        return {
            'database': self.database,
            'timeout': self.timeout,
            'check_same_thread': False
        }


class SQLiteConnection(DatabaseConnection):
    """sqlite3-backed connection provider"""

    def __init__(self, config: Optional[ConnectionConfig] = None, **kwargs):
        """Initialize and connect"""
        self.config = config or ConnectionConfig(**kwargs)

        if not self.config.database:
            raise ValueError('A database path or :memory: value is required for the sqlite driver.')

        self._connection: Optional[sqlite3.Connection] = None
        self._connect()
        logger.info(f"SQLite connection initialized for {self.config.database}")

    def _connect(self) -> None:
        if not self.config.in_memory:
            Path(self.config.database).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._connection = sqlite3.connect(**self.config.to_connection_params())
            self._connection.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            logger.error(f"Failed to open SQLite database {self.config.database}: {e}")
            raise

    def execute_query(self, sql: str, params: Optional[tuple] = None,
                      fetch: bool = True) -> Dict[str, Any]:
        """
        Run one statement and report it in the provider result dictionary.

        Args:
            sql: SQL statement
            params: Positional parameters, if any
            fetch: Collect result rows when the statement returns any
        """
        started = time.time()
        result = self.new_result()

        if self._connection is None:
            result['error'] = "Connection is closed"
            return result

        try:
            cursor = self._connection.execute(sql, params or ())

            if fetch and cursor.description:
                result['data'] = [dict(row) for row in cursor.fetchall()]
            result['rows_affected'] = max(cursor.rowcount, 0)

            if not sql.lstrip().upper().startswith(READ_ONLY_PREFIXES):
                self._connection.commit()

            result['success'] = True

        except sqlite3.IntegrityError as e:
            result['error'] = f"Integrity error: {e}"
        except sqlite3.Error as e:
            result['error'] = f"SQLite error: {e}"

        result['execution_time'] = time.time() - started
        return result

    def execute_script(self, script: str) -> Dict[str, Any]:
        """Run a multi-statement script (fixtures and seeding)"""
        result = self.new_result()

        try:
            self._connection.executescript(script)
            self._connection.commit()
            result['success'] = True
        except sqlite3.Error as e:
            result['error'] = f"SQLite error: {e}"

        return result

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.info("SQLite connection closed")
