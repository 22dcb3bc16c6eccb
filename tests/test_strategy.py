import pytest

from formbridge.adapters.mongo_commands import Find, Raw
from formbridge.adapters.sheets_methods import FileListMethod, GetStructureMethod, RowsGetMethod
from formbridge.core.domain.operations import MongoCommandKind, OperationKey, TriggerKind
from formbridge.core.errors import UnknownOperationError
from formbridge.core.interfaces.command import DocumentCommand
from formbridge.core.interfaces.method import ExecutionMethod, TriggerMethod
from formbridge.core.services.strategy import (
    EXECUTION_METHODS,
    MONGO_COMMANDS,
    TRIGGER_METHODS,
    get_execution_method,
    get_mongo_command,
    get_trigger_method,
)


def test_tables_are_total():
    assert set(EXECUTION_METHODS) == set(OperationKey)
    assert set(TRIGGER_METHODS) == set(TriggerKind)
    assert set(MONGO_COMMANDS) == set(MongoCommandKind)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        EXECUTION_METHODS[OperationKey.ROW_FETCH_MANY] = FileListMethod


def test_every_execution_method_satisfies_the_contract(settings):
    for factory in EXECUTION_METHODS.values():
        assert isinstance(factory(settings), ExecutionMethod)
    for factory in TRIGGER_METHODS.values():
        assert isinstance(factory(settings), TriggerMethod)
    for command in MONGO_COMMANDS.values():
        assert isinstance(command({"collection": "c"}), DocumentCommand)


def test_resolution_returns_a_fresh_handler(settings):
    first = get_execution_method("ROW", "FETCH_MANY", settings)
    second = get_execution_method("ROW", "FETCH_MANY", settings)

    assert isinstance(first, RowsGetMethod)
    assert first is not second


@pytest.mark.parametrize("entity,command", [("row", "FETCH_MANY"), ("ROW", "FETCH"), (None, None), ("SHEET", "INSERT_ONE")])
def test_unknown_keys_are_rejected(entity, command):
    with pytest.raises(UnknownOperationError) as excinfo:
        get_execution_method(entity, command)
    assert "Unknown operation type" in excinfo.value.message


def test_trigger_resolution(settings):
    assert isinstance(get_trigger_method("COLUMNS_SELECTOR", settings), GetStructureMethod)
    with pytest.raises(UnknownOperationError):
        get_trigger_method("ROWS_SELECTOR", settings)


def test_mongo_resolution():
    assert isinstance(get_mongo_command({"command": "FIND", "collection": "c"}), Find)
    assert isinstance(get_mongo_command({"command": "RAW", "body": "{}"}), Raw)
    with pytest.raises(UnknownOperationError):
        get_mongo_command({"command": "find"})
