from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional, Tuple, Union
from enum import Enum

from core.errors import ErrorCode, ValidationError

class Dialect(Enum):
    """Supported SQL dialects, keyed by their configuration value"""
    MYSQL = "mysql"
    POSTGRESQL = "pgsql"
    SQLITE = "sqlite"

@dataclass(frozen=True)
class ColumnDescriptor:
    """Read-only snapshot of one column as reported by the database"""
    name: str
    type: str
    nullable: bool = True
    default: Optional[str] = None
    extra: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'type': self.type,
            'nullable': self.nullable,
            'default': self.default,
            'extra': self.extra
        }

# ---------------------------------------------------------------------------
# Mutation requests
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AddTable:
    name: str
    action = "add_table"

    @property
    def table(self) -> str:
        return self.name

@dataclass(frozen=True)
class RenameTable:
    current: str
    new: str
    action = "rename_table"

    @property
    def table(self) -> str:
        return self.current

@dataclass(frozen=True)
class AddColumn:
    table: str
    column: str
    column_type: str
    action = "add_column"

@dataclass(frozen=True)
class RenameColumn:
    table: str
    column: str
    new_name: str
    action = "rename_column"

@dataclass(frozen=True)
class ChangeColumnType:
    table: str
    column: str
    new_type: str
    action = "change_column_type"

@dataclass(frozen=True)
class ReorderColumns:
    table: str
    order: Tuple[str, ...]
    action = "reorder_columns"

MutationRequest = Union[AddTable, RenameTable, AddColumn, RenameColumn, ChangeColumnType, ReorderColumns]

def parse_column_order(payload: str) -> Tuple[str, ...]:
    """Split a comma separated column order payload, dropping blank entries"""
    return tuple(part.strip() for part in (payload or '').split(',') if part.strip())

def request_from_form(action: str, fields: Dict[str, Any]) -> MutationRequest:
    """
    Build a MutationRequest from raw form fields.

    Args:
        action: Form action name (add_table, rename_table, add_column,
                rename_column, change_column_type, reorder_columns)
        fields: Submitted form fields

    Returns:
        The matching request variant. Values are stripped but not validated;
        validation happens when the request is planned.
    """
    def value(key: str) -> str:
        raw = fields.get(key)
        return str(raw).strip() if raw is not None else ''

    action = (action or '').strip()

    if action == AddTable.action:
        return AddTable(name=value('new_table'))
    if action == RenameTable.action:
        return RenameTable(current=value('current_table'), new=value('new_table_name'))
    if action == AddColumn.action:
        return AddColumn(table=value('table_name'), column=value('column_name'),
                         column_type=value('column_type'))
    if action == RenameColumn.action:
        return RenameColumn(table=value('table_name'), column=value('column_name'),
                            new_name=value('new_column_name'))
    if action == ChangeColumnType.action:
        return ChangeColumnType(table=value('table_name'), column=value('column_name'),
                                new_type=value('new_column_type'))
    if action == ReorderColumns.action:
        return ReorderColumns(table=value('table_name'), order=parse_column_order(value('column_order')))

    raise ValidationError(f'Unknown schema action "{action}".', {'action': action})

# ---------------------------------------------------------------------------
# Plans and results
# ---------------------------------------------------------------------------

@dataclass
class MutationPlan:
    """Ordered DDL statements for one request plus its confirmation message"""
    statements: List[str]
    message: str
    active_table: Optional[str] = None

    @property
    def is_noop(self) -> bool:
        return not self.statements

@dataclass
class MutationResult:
    """Outcome of a single mutation request"""
    ok: bool
    message: str
    statements: List[str] = field(default_factory=list)
    error_code: Optional[ErrorCode] = None
    active_table: Optional[str] = None

    def to_envelope(self) -> Dict[str, Any]:
        """JSON envelope consumed by the AJAX layer"""
        if self.ok:
            return {'success': True, 'message': self.message}
        return {'success': False, 'error': self.message}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'ok': self.ok,
            'message': self.message,
            'statements': list(self.statements),
            'error_code': self.error_code.value if self.error_code else None,
            'active_table': self.active_table
        }

@dataclass
class FeedbackLog:
    """
    Per-render accumulation of success and error messages.

    The presentation layer owns one of these per request cycle, records each
    MutationResult into it, and drains it once the response is rendered.
    """
    messages: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    def record(self, result: MutationResult) -> MutationResult:
        if result.ok:
            self.messages.append(result.message)
        else:
            self.errors.append(result.message)
        return result

    def drain(self) -> Tuple[List[str], List[str]]:
        """Return (messages, errors) and reset both lists"""
        messages, errors = self.messages, self.errors
        self.messages = []
        self.errors = []
        return messages, errors

    def __bool__(self) -> bool:
        return bool(self.messages or self.errors)
