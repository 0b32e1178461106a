#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
SchemaEdit Core Package Initialization
Exports the schema mutation engine components for clean imports
"""

from .errors import (
    ErrorCode,
    SchemaEditError,
    ValidationError,
    UnsupportedOperationError,
    IntrospectionError,
    ExecutionError
)
from .validation import is_valid_identifier, is_safe_type_expression
from .schema_ir import (
    Dialect,
    ColumnDescriptor,
    AddTable,
    RenameTable,
    AddColumn,
    RenameColumn,
    ChangeColumnType,
    ReorderColumns,
    MutationRequest,
    MutationPlan,
    MutationResult,
    FeedbackLog,
    request_from_form
)
from .dialects import DialectAdapter, MySQLDialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from .definition_parser import parse_column_clauses
from .introspector import SchemaIntrospector
from .planner import MutationPlanner
from .executor import MutationExecutor
from .schema_editor import SchemaEditor

# Export everything
__all__ = [
    # Errors
    'ErrorCode',
    'SchemaEditError',
    'ValidationError',
    'UnsupportedOperationError',
    'IntrospectionError',
    'ExecutionError',

    # Validation
    'is_valid_identifier',
    'is_safe_type_expression',

    # Data model
    'Dialect',
    'ColumnDescriptor',
    'AddTable',
    'RenameTable',
    'AddColumn',
    'RenameColumn',
    'ChangeColumnType',
    'ReorderColumns',
    'MutationRequest',
    'MutationPlan',
    'MutationResult',
    'FeedbackLog',
    'request_from_form',

    # Components
    'DialectAdapter',
    'MySQLDialect',
    'PostgreSQLDialect',
    'SQLiteDialect',
    'get_dialect',
    'parse_column_clauses',
    'SchemaIntrospector',
    'MutationPlanner',
    'MutationExecutor',
    'SchemaEditor'
]

# Version info
__version__ = '1.0.0'
__description__ = 'SchemaEdit - dialect-aware schema mutation engine'
