#!/usr/bin/env python3
"""
SchemaEdit Error Hierarchy
Canonical exception classes for the schema mutation engine.
"""

from enum import Enum

class ErrorCode(Enum):
    UNKNOWN = "UNKNOWN_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNSUPPORTED_OPERATION = "UNSUPPORTED_OPERATION"
    INTROSPECTION_ERROR = "INTROSPECTION_ERROR"
    EXECUTION_ERROR = "EXECUTION_ERROR"

class SchemaEditError(Exception):
    """Base class for all SchemaEdit exceptions"""
    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

class ValidationError(SchemaEditError):
    """Raised when an identifier, type expression or reorder payload is rejected"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)

class UnsupportedOperationError(SchemaEditError):
    """Raised when the active dialect cannot perform the requested mutation"""
    def __init__(self, message: str, dialect: str = None):
        super().__init__(message, ErrorCode.UNSUPPORTED_OPERATION, {'dialect': dialect})

class IntrospectionError(SchemaEditError):
    """Raised when table metadata or a table definition cannot be read"""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message, ErrorCode.INTROSPECTION_ERROR, details)

class ExecutionError(SchemaEditError):
    """Raised when the database rejects a DDL statement"""
    def __init__(self, message: str, statement: str = None):
        super().__init__(message, ErrorCode.EXECUTION_ERROR, {'statement': statement})
        self.statement = statement
