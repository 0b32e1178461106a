#!/usr/bin/env python3
"""
SchemaEdit Engine Facade

SchemaEditor wires the introspector, planner and executor around one
externally owned connection. apply_mutation() is the only mutating entry
point: every SchemaEditError becomes a failed MutationResult, so callers
render feedback without try/except. The connection is never closed here.

Usage:
    editor = SchemaEditor(connection, 'mysql')
    result = editor.apply_mutation(ReorderColumns('posts', ('id', 'body', 'title')))
    feedback.record(result)
"""

import logging
from typing import List, Optional, Sequence, Tuple, Union

from core.connection import DatabaseConnection
from core.dialects import DialectAdapter, get_dialect
from core.errors import SchemaEditError
from core.executor import MutationExecutor
from core.introspector import SchemaIntrospector
from core.planner import MutationPlanner
from core.schema_ir import ColumnDescriptor, Dialect, MutationRequest, MutationResult

logger = logging.getLogger(__name__)


class SchemaEditor:
    """Schema mutation engine bound to one connection and dialect"""

    def __init__(self, connection: DatabaseConnection,
                 dialect: Union[str, Dialect, DialectAdapter, None] = None):
        self.connection = connection
        self.dialect = dialect if isinstance(dialect, DialectAdapter) else get_dialect(dialect)

        self.introspector = SchemaIntrospector(connection, self.dialect)
        self.planner = MutationPlanner(self.dialect, self.introspector)
        self.executor = MutationExecutor(connection)

    def list_tables_with_columns(self) -> List[Tuple[str, List[ColumnDescriptor]]]:
        """Tables with their columns, both in the dialect's listing order"""
        return self.introspector.list_tables_with_columns()

    def apply_mutation(self, request: MutationRequest) -> MutationResult:
        """
        Validate, plan and execute one mutation request.

        Args:
            request: Any MutationRequest variant

        Returns:
            MutationResult; ok=False with the error message on any
            validation, dialect, introspection or execution failure
        """
        active_table = getattr(request, 'table', None)
        action = getattr(request, 'action', type(request).__name__)

        try:
            plan = self.planner.plan(request)
            if plan.is_noop:
                logger.info(f"{action}: {plan.message}")
            return self.executor.run(plan)

        except SchemaEditError as e:
            logger.warning(f"{action} refused ({e.code.value}): {e.message}")
            return MutationResult(
                ok=False,
                message=e.message,
                error_code=e.code,
                active_table=active_table or None
            )

    def column_type_options(self) -> List[str]:
        return self.dialect.column_type_options()

    @staticmethod
    def resolve_active_table(tables: Sequence[str], requested: Optional[str] = None) -> Optional[str]:
        """
        Pick the table the UI should focus.

        A case-insensitive match of the requested name wins (returned with
        the database's spelling), otherwise the first listed table, or None
        when there are no tables.
        """
        if not tables:
            return None

        if requested:
            wanted = requested.strip().lower()
            for table in tables:
                if table.lower() == wanted:
                    return table

        return tables[0]
