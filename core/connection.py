#!/usr/bin/env python3
"""
SchemaEdit Connection Contract

The engine never opens or closes connections itself. It talks to any object
implementing DatabaseConnection, whose execute_query() returns the adapter
result dictionary:

    {'success': bool, 'data': [row dicts], 'rows_affected': int, 'error': str or None}

open_connection() builds the plugin connection for the configured driver; it
is used by the command line entry point and by embedding applications that
do not bring their own connection.
"""

import logging
from typing import Dict, Any, Optional

from config.settings import EditorSettings

logger = logging.getLogger(__name__)


class DatabaseConnection:
    """Base class for connection providers"""

    @staticmethod
    def new_result() -> Dict[str, Any]:
        """Blank result dictionary shared by every provider"""
        return {'success': False, 'data': [], 'rows_affected': 0, 'execution_time': 0.0, 'error': None}

    def execute_query(self, sql: str, params: Optional[tuple] = None,
                      fetch: bool = True) -> Dict[str, Any]:
        """Execute a query - to be implemented by subclasses"""
        raise NotImplementedError("Subclasses must implement execute_query")

    def close(self):
        """Close connections - to be implemented by subclasses"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def open_connection(settings: EditorSettings) -> DatabaseConnection:
    """
    Open a connection for the configured driver.

    Args:
        settings: Resolved editor settings

    Returns:
        Connected DatabaseConnection

    Raises:
        ValueError: If the settings lack the database name or path
    """
    driver = settings.driver

    if not settings.db_name:
        if driver == 'sqlite':
            raise ValueError('A database path or :memory: value is required for the sqlite driver.')
        raise ValueError(f'A database name is required for the {driver} driver.')

    if driver == 'sqlite':
        from extensions.plugins.sqlite_adapter import SQLiteConnection
        connection = SQLiteConnection(database=settings.db_name)
    elif driver == 'pgsql':
        from extensions.plugins.postgresql_adapter import PostgreSQLConnection, ConnectionConfig
        connection = PostgreSQLConnection(ConnectionConfig(
            host=settings.db_host,
            port=settings.db_port or 5432,
            database=settings.db_name,
            user=settings.db_user or 'postgres',
            password=settings.db_password or ''
        ))
    else:
        from extensions.plugins.mysql_adapter import MySQLConnection, ConnectionConfig
        connection = MySQLConnection(ConnectionConfig(
            host=settings.db_host,
            port=settings.db_port or 3306,
            database=settings.db_name,
            user=settings.db_user or 'root',
            password=settings.db_password or '',
            charset=settings.db_charset
        ))

    logger.info(f"Opened {driver} connection to {settings.db_name}")
    return connection
