#!/usr/bin/env python3
"""
SchemaEdit MySQL Connection Provider

Thin PyMySQL connection used by the schema editor:
- One shared connection per editor (no pooling)
- DictCursor rows, so SHOW FULL COLUMNS / SHOW CREATE TABLE come back keyed
  by the server's column labels
- Autocommit on; MySQL DDL commits implicitly anyway
- Driver errors reported through the result dictionary, never retried

Usage:
    connection = MySQLConnection(
        host='localhost',
        database='app',
        user='app_user',
        password='secure_password'
    )
    result = connection.execute_query("SHOW TABLES")
"""

import pymysql
import pymysql.cursors
from pymysql import IntegrityError, MySQLError
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
    """MySQL connection configuration"""
    host: str = "127.0.0.1"
    port: int = 3306
    database: str = ""
    user: str = "root"
    password: str = ""

    connect_timeout: int = 10
    read_timeout: int = 30
    write_timeout: int = 30

    charset: str = "utf8mb4"
    autocommit: bool = True

    def to_connection_params(self) -> Dict[str, Any]:
        """Convert to PyMySQL connection parameters"""
        return {
            'host': self.host,
            'port': self.port,
            'database': self.database,
            'user': self.user,
            'password': self.password,
            'connect_timeout': self.connect_timeout,
            'read_timeout': self.read_timeout,
            'write_timeout': self.write_timeout,
            'charset': self.charset,
            'autocommit': self.autocommit,
            'cursorclass': pymysql.cursors.DictCursor
        }

class MySQLConnection(DatabaseConnection):
    """PyMySQL-backed connection provider"""

    def __init__(self, config: Optional[ConnectionConfig] = None, **kwargs):
        """Initialize and connect"""
        if config:
            self.config = config
        else:
            self.config = ConnectionConfig(**kwargs)

        if not self.config.database:
            raise ValueError('A database name is required for the mysql driver.')

        self._connection = None
        self._connect()
        logger.info(f"MySQL connection initialized for {self.config.host}:{self.config.port}/{self.config.database}")

    def _connect(self) -> None:
        """Establish database connection."""
        try:
            self._connection = pymysql.connect(**self.config.to_connection_params())
            logger.debug(f"Connected to MySQL database: {self.config.database}")
        except MySQLError as e:
            logger.error(f"Failed to connect to MySQL: {e}")
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
            with self._connection.cursor() as cursor:
                cursor.execute(sql, params)

                if fetch and cursor.description:
                    result['data'] = list(cursor.fetchall())

                result['rows_affected'] = cursor.rowcount if cursor.rowcount > 0 else 0

            if not self.config.autocommit:
                self._connection.commit()

            result['success'] = True

        except IntegrityError as e:
            result['error'] = f"Integrity error: {e}"
        except MySQLError as e:
            result['error'] = f"MySQL error: {e}"

        result['execution_time'] = time.time() - start_time
        return result

    def close(self):
        """Close the connection"""
        if self._connection is not None:
            try:
                self._connection.close()
            except MySQLError as e:
                logger.warning(f"Error closing MySQL connection: {e}")
            self._connection = None
            logger.info("MySQL connection closed")

# Utility functions
def create_connection_from_url(database_url: str, **kwargs) -> MySQLConnection:
    """Create connection from database URL"""
    parsed = urlparse(database_url)

    config = ConnectionConfig(
        host=parsed.hostname or '127.0.0.1',
        port=parsed.port or 3306,
        database=parsed.path.lstrip('/') if parsed.path else '',
        user=parsed.username or 'root',
        password=parsed.password or '',
        **kwargs
    )

    return MySQLConnection(config)
