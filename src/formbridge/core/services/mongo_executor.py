"""Execution orchestrator of the document-database family."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Any, Mapping, Sequence

import structlog

from formbridge.adapters.mongo_commands import MongoCommand
from formbridge.core.domain.models import BoundParameter, Param, ResultEnvelope
from formbridge.core.errors import (
    FormBridgeError,
    HandlerFailure,
    MissingRequiredFieldError,
    UnknownOperationError,
    VendorError,
)
from formbridge.core.interfaces.transport import DocumentDatabase
from formbridge.core.services.execution_state import ExecutionHooks, ExecutionRun, ExecutionState
from formbridge.core.services.strategy import get_mongo_command, mongo_json_fields
from formbridge.core.services.substitution import is_smart_substitution_enabled, smart_substitute

logger = structlog.get_logger(__name__)


@dataclass
class RenderedCommand:
    command: MongoCommand
    document: dict[str, Any]
    bound: list[BoundParameter]


def _reply_ok(reply: Mapping[str, Any]) -> bool:
    ok = reply.get("ok", 1)
    return not isinstance(ok, bool) and isinstance(ok, (int, float)) and ok == 1


def _prepare(
    data: dict[str, Any],
    params: Sequence[Param] | None,
    run: ExecutionRun,
) -> RenderedCommand:
    # Decoding `command` may raise a type error; an unknown kind propagates.
    fields = mongo_json_fields(data)
    bound: list[BoundParameter] = []
    if is_smart_substitution_enabled(data):
        run.advance(ExecutionState.SUBSTITUTING)
        bound = smart_substitute(data, fields, params or ())

    run.advance(ExecutionState.VALIDATING)
    command = get_mongo_command(data)
    ok, missing = command.validate()
    if not ok:
        raise MissingRequiredFieldError(missing)
    document = command.render()
    if command.defaulted_fields:
        logger.info(
            "command.defaulted",
            operation=run.operation,
            fields=list(command.defaulted_fields),
        )
    return RenderedCommand(command=command, document=document, bound=bound)


def render_command(
    form_data: Mapping[str, Any] | None,
    params: Sequence[Param] | None = None,
    *,
    hooks: ExecutionHooks | None = None,
) -> ResultEnvelope:
    """Translate `form_data` into its command document without running it."""

    if not form_data:
        return ResultEnvelope.no_operation()
    run = ExecutionRun(operation=str(form_data.get("command")), hooks=hooks or ExecutionHooks())
    data = copy.deepcopy(dict(form_data))
    try:
        rendered = _prepare(data, params, run)
    except UnknownOperationError:
        raise
    except FormBridgeError as exc:
        run.fail(exc)
        return ResultEnvelope.failure(exc)
    run.advance(ExecutionState.DONE)
    return ResultEnvelope(is_execution_success=True, body=rendered.document, request_params=rendered.bound)


class MongoExecutor:
    def __init__(self, database: DocumentDatabase, *, hooks: ExecutionHooks | None = None) -> None:
        self._database = database
        self._hooks = hooks or ExecutionHooks()

    async def execute(
        self,
        form_data: Mapping[str, Any] | None,
        params: Sequence[Param] | None = None,
    ) -> ResultEnvelope:
        if not form_data:
            return ResultEnvelope.no_operation()

        run = ExecutionRun(operation=str(form_data.get("command")), hooks=self._hooks)
        logger.info("execution.start", operation=run.operation)
        # The caller's map is never mutated.
        data = copy.deepcopy(dict(form_data))
        bound: list[BoundParameter] = []
        try:
            rendered = _prepare(data, params, run)
            bound = rendered.bound

            run.advance(ExecutionState.DISPATCHING)
            logger.info("dispatch.command", command=next(iter(rendered.document), None))
            reply = await self._database.run_command(rendered.document)
            if not _reply_ok(reply):
                raise VendorError(None, str(reply.get("errmsg") or "Command failed"))

            run.advance(ExecutionState.TRANSFORMING_RESPONSE)
            body = rendered.command.transform_response(reply)
        except UnknownOperationError:
            raise
        except FormBridgeError as exc:
            run.fail(exc)
            return ResultEnvelope.failure(exc, request_params=bound)
        except Exception as exc:
            error = HandlerFailure(run.state.value, exc)
            run.fail(error)
            return ResultEnvelope.failure(error, request_params=bound)

        run.advance(ExecutionState.DONE)
        return ResultEnvelope(is_execution_success=True, body=body, request_params=bound)
