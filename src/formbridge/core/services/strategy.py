"""Static resolution tables: operation key -> handler.

The tables are built once at import time and exposed read-only. Every key of
`OperationKey`, `TriggerKind` and `MongoCommandKind` has exactly one entry;
a missing entry fails the import rather than a request.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from formbridge.adapters.mongo_commands import (
    Aggregate,
    Count,
    Delete,
    Distinct,
    Find,
    Insert,
    MongoCommand,
    Raw,
    Update,
)
from formbridge.adapters.mongo_commands.base import COMMAND
from formbridge.adapters.sheets_methods import (
    ClearMethod,
    CopyMethod,
    FileCreateMethod,
    FileDeleteMethod,
    FileInfoMethod,
    FileListMethod,
    GetStructureMethod,
    RowsAppendMethod,
    RowsBulkAppendMethod,
    RowsBulkUpdateMethod,
    RowsDeleteMethod,
    RowsGetMethod,
    RowsUpdateMethod,
    SheetDeleteMethod,
)
from formbridge.core.config import AppSettings
from formbridge.core.domain.operations import MongoCommandKind, OperationKey, TriggerKind
from formbridge.core.form_data import get_value
from formbridge.core.interfaces.method import ExecutionMethod, TriggerMethod

# Spreadsheet fields that may carry `{{ binding }}` expressions.
SHEETS_JSON_FIELDS: tuple[str, ...] = ("rowObject", "rowObjects")

MethodFactory = Callable[[AppSettings | None], Any]

EXECUTION_METHODS: Mapping[OperationKey, MethodFactory] = MappingProxyType(
    {
        OperationKey.ROW_INSERT_ONE: RowsAppendMethod,
        OperationKey.ROW_INSERT_MANY: RowsBulkAppendMethod,
        OperationKey.ROW_UPDATE_ONE: RowsUpdateMethod,
        OperationKey.ROW_UPDATE_MANY: RowsBulkUpdateMethod,
        OperationKey.ROW_DELETE_ONE: RowsDeleteMethod,
        OperationKey.ROW_FETCH_MANY: RowsGetMethod,
        OperationKey.SHEET_CLEAR: ClearMethod,
        OperationKey.SHEET_COPY: CopyMethod,
        OperationKey.SHEET_DELETE_ONE: SheetDeleteMethod,
        OperationKey.SHEET_FETCH_STRUCTURE: GetStructureMethod,
        OperationKey.SPREADSHEET_INSERT_ONE: FileCreateMethod,
        OperationKey.SPREADSHEET_DELETE_ONE: FileDeleteMethod,
        OperationKey.SPREADSHEET_FETCH_DETAILS: FileInfoMethod,
        OperationKey.SPREADSHEET_FETCH_MANY: FileListMethod,
    }
)

TRIGGER_METHODS: Mapping[TriggerKind, MethodFactory] = MappingProxyType(
    {
        TriggerKind.SPREADSHEET_SELECTOR: FileListMethod,
        TriggerKind.SHEET_SELECTOR: FileInfoMethod,
        TriggerKind.COLUMNS_SELECTOR: GetStructureMethod,
    }
)

MONGO_COMMANDS: Mapping[MongoCommandKind, type[MongoCommand]] = MappingProxyType(
    {
        MongoCommandKind.FIND: Find,
        MongoCommandKind.INSERT: Insert,
        MongoCommandKind.UPDATE: Update,
        MongoCommandKind.DELETE: Delete,
        MongoCommandKind.COUNT: Count,
        MongoCommandKind.DISTINCT: Distinct,
        MongoCommandKind.AGGREGATE: Aggregate,
        MongoCommandKind.RAW: Raw,
    }
)


def _check_total(table: Mapping[Any, Any], keys: type) -> None:
    missing = [key.value for key in keys if key not in table]
    if missing:
        raise RuntimeError(f"No handler registered for: {', '.join(missing)}")


_check_total(EXECUTION_METHODS, OperationKey)
_check_total(TRIGGER_METHODS, TriggerKind)
_check_total(MONGO_COMMANDS, MongoCommandKind)


def get_execution_method(
    entity: str | None,
    command: str | None,
    settings: AppSettings | None = None,
) -> ExecutionMethod:
    """Fresh handler for `entity_command`; unknown keys raise `UnknownOperationError`."""

    key = OperationKey.compose(entity, command)
    return EXECUTION_METHODS[key](settings)


def get_trigger_method(kind: str | TriggerKind, settings: AppSettings | None = None) -> TriggerMethod:
    return TRIGGER_METHODS[TriggerKind.parse(kind)](settings)


def get_mongo_command(form_data: Mapping[str, Any]) -> MongoCommand:
    """Build the command named by the `command` field from `form_data`."""

    kind = MongoCommandKind.parse(get_value(form_data, COMMAND))
    return MONGO_COMMANDS[kind](form_data)


def mongo_json_fields(form_data: Mapping[str, Any]) -> tuple[str, ...]:
    """Fields of the selected command that may carry bindings (in substitution order)."""

    kind = MongoCommandKind.parse(get_value(form_data, COMMAND))
    return MONGO_COMMANDS[kind].json_fields


def registered_operations() -> dict[str, list[str]]:
    return {
        "execution": [key.value for key in EXECUTION_METHODS],
        "trigger": [key.value for key in TRIGGER_METHODS],
        "mongo": [key.value for key in MONGO_COMMANDS],
    }
