#!/usr/bin/env python3
"""
SchemaEdit Mutation Executor

Issues planned DDL through the connection provider. Statements run in plan
order with no transactional wrapping; the first failure stops the plan and
surfaces the driver's message unchanged.
"""

import logging
from typing import Optional

from core.connection import DatabaseConnection
from core.errors import ExecutionError
from core.schema_ir import MutationPlan, MutationResult

logger = logging.getLogger(__name__)


class MutationExecutor:
    """Runs DDL statements on an externally owned connection"""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    def execute(self, statement: str, message: Optional[str] = None,
                active_table: Optional[str] = None) -> MutationResult:
        """
        Execute one DDL statement.

        Args:
            statement: DDL statement
            message: Confirmation message for the result
            active_table: Table the caller should focus afterwards

        Returns:
            Successful MutationResult listing the statement

        Raises:
            ExecutionError: If the database rejects the statement
        """
        logger.info(f"Executing DDL: {statement}")
        result = self.connection.execute_query(statement, fetch=False)

        if not result.get('success'):
            error = result.get('error') or 'Unknown database error'
            logger.error(f"DDL failed: {error}")
            raise ExecutionError(str(error), statement)

        return MutationResult(
            ok=True,
            message=message or 'Statement executed.',
            statements=[statement],
            active_table=active_table
        )

    def run(self, plan: MutationPlan) -> MutationResult:
        """
        Execute every statement of a plan in order.

        Returns:
            Successful MutationResult carrying the plan message and the
            statements issued; a no-op plan issues nothing
        """
        issued = []
        for statement in plan.statements:
            issued.extend(self.execute(statement).statements)

        return MutationResult(
            ok=True,
            message=plan.message,
            statements=issued,
            active_table=plan.active_table
        )
