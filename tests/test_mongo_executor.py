import pytest
from structlog.testing import capture_logs

from conftest import FakeDatabase
from formbridge.core.domain.models import DataType, Param
from formbridge.core.errors import UnknownOperationError
from formbridge.core.services.execution_state import ExecutionHooks, ExecutionState
from formbridge.core.services.mongo_executor import MongoExecutor, render_command


@pytest.mark.asyncio
async def test_find_with_bound_parameters():
    database = FakeDatabase({"cursor": {"firstBatch": [{"name": "Ada"}], "id": 0}, "ok": 1.0})
    form_data = {"command": "FIND", "collection": "users", "find": {"query": '{"age": {{ age }}}'}}

    envelope = await MongoExecutor(database).execute(form_data, [Param(key="age", value="36")])

    assert envelope.is_execution_success
    assert envelope.status_code is None
    assert envelope.body == [{"name": "Ada"}]
    assert database.commands == [{"find": "users", "filter": {"age": 36}, "limit": 10, "batchSize": 10}]
    assert envelope.request_params[0].data_type == DataType.INTEGER
    assert form_data["find"]["query"] == '{"age": {{ age }}}'


@pytest.mark.asyncio
async def test_failed_reply_uses_errmsg():
    database = FakeDatabase({"ok": 0, "errmsg": "ns does not exist", "code": 26})
    envelope = await MongoExecutor(database).execute({"command": "COUNT", "collection": "ghosts"})

    assert not envelope.is_execution_success
    assert envelope.body == "ns does not exist"
    assert envelope.error_code == "PLUGIN_ERROR"


@pytest.mark.asyncio
async def test_missing_fields_are_listed():
    database = FakeDatabase()
    envelope = await MongoExecutor(database).execute({"command": "UPDATE", "collection": "users"})

    assert envelope.body == "Try again after configuring the fields : Query, Update"
    assert envelope.error_code == "PLUGIN_EXECUTE_ARGUMENT_ERROR"
    assert database.commands == []


@pytest.mark.asyncio
async def test_bad_query_text_is_an_envelope():
    seen = []
    hooks = ExecutionHooks(transition=lambda previous, state: seen.append(state))
    form_data = {"command": "DELETE", "collection": "users", "smartSubstitution": "false", "delete": {"query": "{a:"}}

    envelope = await MongoExecutor(FakeDatabase(), hooks=hooks).execute(form_data)

    assert envelope.error_code == "PLUGIN_EXECUTE_ARGUMENT_ERROR"
    assert seen == [ExecutionState.VALIDATING, ExecutionState.FAILED]


@pytest.mark.asyncio
async def test_unknown_command_is_raised():
    with pytest.raises(UnknownOperationError):
        await MongoExecutor(FakeDatabase()).execute({"command": "MAPREDUCE", "collection": "users"})


@pytest.mark.asyncio
async def test_empty_configuration_performs_no_operation():
    database = FakeDatabase()
    envelope = await MongoExecutor(database).execute({})

    assert envelope.is_execution_success
    assert database.commands == []


def test_render_command_without_a_database():
    envelope = render_command({"command": "RAW", "body": '{"listCollections": 1, "filter": {"name": "{{ n }}"}}'}, [Param(key="n", value="users")])

    assert envelope.is_execution_success
    assert envelope.body == {"listCollections": 1, "filter": {"name": "users"}}


@pytest.mark.asyncio
@pytest.mark.parametrize("command", [5, ["FIND"]])
async def test_non_string_command_is_an_envelope(command):
    database = FakeDatabase()
    envelope = await MongoExecutor(database).execute({"command": command, "collection": "c"})

    assert not envelope.is_execution_success
    assert envelope.error_code == "PLUGIN_EXECUTE_ARGUMENT_ERROR"
    assert "command" in envelope.body
    assert database.commands == []


def test_render_command_reports_non_string_command():
    envelope = render_command({"command": 5, "collection": "c"})

    assert not envelope.is_execution_success
    assert envelope.error_code == "PLUGIN_EXECUTE_ARGUMENT_ERROR"

    with pytest.raises(UnknownOperationError):
        render_command({"command": "MAPREDUCE", "collection": "c"})


def test_characters_outside_the_basic_plane_survive_substitution():
    form_data = {"command": "FIND", "collection": "users", "find": {"query": '{"name": "{{ n }}"}'}}
    envelope = render_command(form_data, [Param(key="n", value="😀")])

    assert envelope.is_execution_success
    assert envelope.body["filter"] == {"name": "😀"}


def test_defaulted_fields_are_logged():
    with capture_logs() as logs:
        envelope = render_command({"command": "FIND", "collection": "users"})

    assert envelope.is_execution_success
    (entry,) = [log for log in logs if log["event"] == "command.defaulted"]
    assert entry["fields"] == ["Query", "Limit"]
    assert entry["operation"] == "FIND"


@pytest.mark.asyncio
async def test_driver_failure_is_an_envelope():
    class BrokenDatabase:
        async def run_command(self, document):
            raise ConnectionError("server selection timed out")

    envelope = await MongoExecutor(BrokenDatabase()).execute({"command": "COUNT", "collection": "users"})

    assert not envelope.is_execution_success
    assert envelope.error_code == "PLUGIN_ERROR"
    assert envelope.body == "DISPATCHING failed: ConnectionError: server selection timed out"
