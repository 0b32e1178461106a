#!/usr/bin/env python3
"""
Identifier and type expression validation for SchemaEdit

These checks are the only gate between user input and DDL text. Table and
column names are interpolated into statements after quoting, and type
expressions are interpolated verbatim, so both are checked against a strict
allow-list before any statement is built.
"""

import re
from typing import Any

from core.errors import ValidationError

# Pattern for valid identifiers (alphanumeric + underscore only, no leading digit)
IDENTIFIER_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')

# Letters, digits, parentheses, commas, spaces, underscores and quotes.
# Enough for VARCHAR(255), DECIMAL(10,2) or ENUM('a','b'); no ';', '-' or '/'.
TYPE_EXPRESSION_PATTERN = re.compile(r'^[A-Za-z0-9_(), "\']+$')


def is_valid_identifier(value: Any) -> bool:
    """Return True if value is usable as a table or column name"""
    if not isinstance(value, str) or not value:
        return False
    return IDENTIFIER_PATTERN.fullmatch(value) is not None


def is_safe_type_expression(value: Any) -> bool:
    """Return True if value only uses characters allowed in a column type"""
    if not isinstance(value, str) or not value:
        return False
    return TYPE_EXPRESSION_PATTERN.fullmatch(value) is not None


def require_identifier(value: Any, message: str) -> str:
    """Return value unchanged or raise ValidationError with message"""
    if not is_valid_identifier(value):
        raise ValidationError(message, {'value': value})
    return value


def require_type_expression(value: Any, message: str) -> str:
    """Return value unchanged or raise ValidationError with message"""
    if not is_safe_type_expression(value):
        raise ValidationError(message, {'value': value})
    return value
