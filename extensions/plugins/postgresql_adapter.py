#!/usr/bin/env python3
"""
SchemaEdit PostgreSQL Connection Provider

Thin psycopg2 connection used by the schema editor:
- One shared connection per editor (no pooling)
- RealDictCursor rows
- Autocommit on, so each DDL statement stands alone
- Server-side parameter binding for the column introspection query

Usage:
    connection = PostgreSQLConnection(
        host='localhost',
        database='app',
        user='app_user',
        password='secure_password'
    )
    result = connection.execute_query("SELECT tablename FROM pg_tables")
"""

import psycopg2
import psycopg2.extras
from psycopg2 import IntegrityError
import logging
import time
from typing import Dict, Any, Optional
from dataclasses import dataclass
from urllib.parse import urlparse

from core.connection import DatabaseConnection

# Configure logging
logger = logging.getLogger(__name__)

@dataclass
class ConnectionConfig:
    """PostgreSQL connection configuration"""
    host: str = "127.0.0.1"
    port: int = 5432
    database: str = ""
    user: str = "postgres"
    password: str = ""

    connect_timeout: int = 10
    application_name: str = "schemaedit"

    def to_connection_params(self) -> Dict[str, Any]:
        """Convert to psycopg2 connection parameters"""
        return {
            'host': self.host,
            'port': self.port,
            'dbname': self.database,
            'user': self.user,
            'password': self.password,
            'connect_timeout': self.connect_timeout,
            'application_name': self.application_name
        }

class PostgreSQLConnection(DatabaseConnection):
    """psycopg2-backed connection provider"""

    def __init__(self, config: Optional[ConnectionConfig] = None, **kwargs):
        """Initialize and connect"""
        if config:
            self.config = config
        else:
            self.config = ConnectionConfig(**kwargs)

        if not self.config.database:
            raise ValueError('A database name is required for the pgsql driver.')

        self._connection = None
        self._connect()
        logger.info(f"PostgreSQL connection initialized for {self.config.host}:{self.config.port}/{self.config.database}")

    def _connect(self) -> None:
        """Establish database connection."""
        try:
            self._connection = psycopg2.connect(**self.config.to_connection_params())
            self._connection.autocommit = True
            logger.debug(f"Connected to PostgreSQL database: {self.config.database}")
        except psycopg2.Error as e:
            logger.error(f"Failed to connect to PostgreSQL: {e}")
            raise

    def execute_query(self, sql: str, params: Optional[tuple] = None,
                      fetch: bool = True) -> Dict[str, Any]:
        """
        Execute SQL statement.

        Args:
            sql: SQL statement
            params: Query parameters (optional)
            fetch: Whether to fetch results

        Returns:
            Dictionary with execution results
        """
        start_time = time.time()
        result = self.new_result()

        if self._connection is None:
            result['error'] = "Connection is closed"
            return result

        try:
            with self._connection.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cursor:
                cursor.execute(sql, params)

                if fetch and cursor.description:
                    result['data'] = [dict(row) for row in cursor.fetchall()]

                result['rows_affected'] = cursor.rowcount if cursor.rowcount > 0 else 0

            result['success'] = True

        except IntegrityError as e:
            result['error'] = f"Integrity error: {e}"
        except psycopg2.Error as e:
            result['error'] = f"PostgreSQL error: {e}"

        result['execution_time'] = time.time() - start_time
        return result

    def close(self):
        """Close the connection"""
        if self._connection is not None:
            try:
                self._connection.close()
            except psycopg2.Error as e:
                logger.warning(f"Error closing PostgreSQL connection: {e}")
            self._connection = None
            logger.info("PostgreSQL connection closed")

# Utility functions
def create_connection_from_url(database_url: str, **kwargs) -> PostgreSQLConnection:
    """Create connection from database URL"""
    parsed = urlparse(database_url)

    config = ConnectionConfig(
        host=parsed.hostname or '127.0.0.1',
        port=parsed.port or 5432,
        database=parsed.path.lstrip('/') if parsed.path else '',
        user=parsed.username or 'postgres',
        password=parsed.password or '',
        **kwargs
    )

    return PostgreSQLConnection(config)
