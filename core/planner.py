#!/usr/bin/env python3
"""
SchemaEdit Mutation Planner

Turns one validated MutationRequest into an ordered list of DDL statements.
Every identifier and type expression is validated here before the dialect
adapter is asked to build any SQL, and every refusal happens before a
statement is issued.

Column reordering (MySQL only):
1. Validate the table and the requested order (non-empty, valid, unique)
2. Introspect current columns and require a permutation of them
3. Short-circuit when the order is already current
4. Re-read SHOW CREATE TABLE and recover each column's verbatim clause
5. Emit a single ALTER TABLE with a MODIFY COLUMN ... FIRST/AFTER chain
"""

import logging
from typing import Dict, List, Callable

from core.definition_parser import parse_column_clauses
from core.dialects import DialectAdapter
from core.errors import IntrospectionError, UnsupportedOperationError, ValidationError
from core.introspector import SchemaIntrospector
from core.schema_ir import (
    AddTable, RenameTable, AddColumn, RenameColumn, ChangeColumnType, ReorderColumns,
    ColumnDescriptor, MutationPlan, MutationRequest
)
from core.validation import is_valid_identifier, require_identifier, require_type_expression

logger = logging.getLogger(__name__)

TABLE_NAME_MESSAGE = 'Table name must contain only letters, numbers, or underscores.'
TABLE_NAMES_MESSAGE = 'Table names must contain only letters, numbers, or underscores.'
COLUMN_NAMES_MESSAGE = 'Table and column names must contain only letters, numbers, or underscores.'
TYPE_MESSAGE = 'Column type contains unsupported characters.'


class MutationPlanner:
    """Builds DDL plans; holds no state between requests"""

    def __init__(self, dialect: DialectAdapter, introspector: SchemaIntrospector):
        self.dialect = dialect
        self.introspector = introspector

        self._handlers: Dict[type, Callable[..., MutationPlan]] = {
            AddTable: self._plan_add_table,
            RenameTable: self._plan_rename_table,
            AddColumn: self._plan_add_column,
            RenameColumn: self._plan_rename_column,
            ChangeColumnType: self._plan_change_column_type,
            ReorderColumns: self._plan_reorder_columns,
        }

    def plan(self, request: MutationRequest) -> MutationPlan:
        """
        Plan a mutation request.

        Returns:
            MutationPlan; an empty statement list means a successful no-op

        Raises:
            ValidationError, UnsupportedOperationError, IntrospectionError
        """
        handler = self._handlers.get(type(request))
        if handler is None:
            raise ValidationError(f"Unsupported mutation request: {type(request).__name__}")
        return handler(request)

    # ===== Tables =====

    def _plan_add_table(self, request: AddTable) -> MutationPlan:
        require_identifier(request.name, TABLE_NAME_MESSAGE)

        return MutationPlan(
            statements=[self.dialect.create_table_statement(request.name)],
            message=f'Table "{request.name}" created.',
            active_table=request.name
        )

    def _plan_rename_table(self, request: RenameTable) -> MutationPlan:
        require_identifier(request.current, TABLE_NAMES_MESSAGE)
        require_identifier(request.new, TABLE_NAMES_MESSAGE)

        if request.current == request.new:
            return MutationPlan([], f'Table "{request.current}" already has that name.', request.current)

        return MutationPlan(
            statements=[self.dialect.rename_table_statement(request.current, request.new)],
            message=f'Table "{request.current}" renamed to "{request.new}".',
            active_table=request.new
        )

    # ===== Columns =====

    def _require_columns(self, table: str) -> List[ColumnDescriptor]:
        columns = self.introspector.list_columns(table)
        if not columns:
            raise IntrospectionError(f'No columns found for table "{table}".', {'table': table})
        return columns

    def _column_key(self, name: str) -> str:
        return name.lower() if self.dialect.case_insensitive_columns else name

    def _resolve_column(self, columns: List[ColumnDescriptor], table: str, column: str) -> str:
        """Return the column's name as the database spells it"""
        for existing in columns:
            if self._column_key(existing.name) == self._column_key(column):
                return existing.name
        raise ValidationError(f'Column "{column}" does not exist on "{table}".',
                              {'table': table, 'column': column})

    def _require_free_name(self, columns: List[ColumnDescriptor], table: str, name: str, ignore: str = None):
        for existing in columns:
            if existing.name == ignore:
                continue
            if self._column_key(existing.name) == self._column_key(name):
                raise ValidationError(f'Column "{name}" already exists on "{table}".',
                                      {'table': table, 'column': name})

    def _plan_add_column(self, request: AddColumn) -> MutationPlan:
        require_identifier(request.table, COLUMN_NAMES_MESSAGE)
        require_identifier(request.column, COLUMN_NAMES_MESSAGE)
        require_type_expression(request.column_type, TYPE_MESSAGE)

        columns = self._require_columns(request.table)
        self._require_free_name(columns, request.table, request.column)

        return MutationPlan(
            statements=[self.dialect.add_column_statement(request.table, request.column, request.column_type)],
            message=f'Column "{request.column}" added to "{request.table}".',
            active_table=request.table
        )

    def _plan_rename_column(self, request: RenameColumn) -> MutationPlan:
        require_identifier(request.table, COLUMN_NAMES_MESSAGE)
        require_identifier(request.column, COLUMN_NAMES_MESSAGE)
        require_identifier(request.new_name, COLUMN_NAMES_MESSAGE)

        if request.column == request.new_name:
            return MutationPlan([], f'Column "{request.column}" already has that name.', request.table)

        columns = self._require_columns(request.table)
        column = self._resolve_column(columns, request.table, request.column)
        if column == request.new_name:
            return MutationPlan([], f'Column "{column}" already has that name.', request.table)
        self._require_free_name(columns, request.table, request.new_name, ignore=column)

        return MutationPlan(
            statements=[self.dialect.rename_column_statement(request.table, column, request.new_name)],
            message=f'Column "{column}" renamed to "{request.new_name}" in "{request.table}".',
            active_table=request.table
        )

    def _plan_change_column_type(self, request: ChangeColumnType) -> MutationPlan:
        if not self.dialect.supports_type_change:
            raise UnsupportedOperationError(
                f'Changing column types is not supported for {self.dialect.display_name} via this editor.',
                self.dialect.name
            )

        require_identifier(request.table, COLUMN_NAMES_MESSAGE)
        require_identifier(request.column, COLUMN_NAMES_MESSAGE)
        require_type_expression(request.new_type, TYPE_MESSAGE)

        columns = self._require_columns(request.table)
        column = self._resolve_column(columns, request.table, request.column)

        return MutationPlan(
            statements=[self.dialect.change_column_type_statement(request.table, column, request.new_type)],
            message=f'Column "{column}" type updated for "{request.table}".',
            active_table=request.table
        )

    # ===== Reordering =====

    def _plan_reorder_columns(self, request: ReorderColumns) -> MutationPlan:
        if not self.dialect.supports_reorder:
            raise UnsupportedOperationError(
                'Column reordering is currently supported only for MySQL connections.',
                self.dialect.name
            )

        table = request.table
        require_identifier(table, 'Invalid table name provided for column reordering.')

        requested = list(request.order or ())
        if not requested:
            raise ValidationError('Column order payload is empty.', {'table': table})

        seen = set()
        for name in requested:
            if not is_valid_identifier(name):
                raise ValidationError('Column order contains an invalid identifier.', {'value': name})
            if name.lower() in seen:
                raise ValidationError('Column order contains duplicate entries.', {'column': name})
            seen.add(name.lower())

        existing = [c.name for c in self._require_columns(table)]
        lookup = {name.lower(): name for name in existing}

        normalized = []
        for name in requested:
            if name.lower() not in lookup:
                raise ValidationError(f'Column "{name}" does not exist on "{table}".',
                                      {'table': table, 'column': name})
            normalized.append(lookup[name.lower()])

        if len(normalized) != len(existing):
            raise ValidationError('Column order does not include every column.',
                                  {'missing': [n for n in existing if n not in normalized]})

        if sorted(normalized) != sorted(existing):
            raise ValidationError('Column order does not match the existing schema.', {'table': table})

        if normalized == existing:
            return MutationPlan([], f'Column order for "{table}" is already up to date.', table)

        # Always re-read the definition; a cached copy could predate the last DDL change
        definition = self.introspector.fetch_table_definition_text(table)
        clauses = parse_column_clauses(definition)
        if not clauses:
            raise IntrospectionError(f'Unable to parse the table definition for "{table}".', {'table': table})

        for column in normalized:
            if column not in clauses:
                raise IntrospectionError(f'Unable to determine definition for column "{column}".',
                                         {'table': table, 'column': column})

        statement = self.dialect.reorder_columns_statement(table, normalized, clauses)
        logger.debug(f"Planned reorder for {table}: {normalized}")

        return MutationPlan([statement], f'Column order updated for "{table}".', table)
