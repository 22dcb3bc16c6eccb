"""Execution orchestrator of the spreadsheet (REST) family.

`SheetsExecutor.execute` drives one request through
substitution -> validation -> prerequisites -> dispatch -> transform and
always answers with a `ResultEnvelope`. Only `UnknownOperationError` and
`MissingCredentialsError` are raised to the caller.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Sequence

import structlog

from formbridge.core.config import AppSettings
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import (
    BoundParameter,
    OAuth2Credentials,
    Param,
    ResultEnvelope,
    TriggerResultEnvelope,
)
from formbridge.core.domain.operations import TriggerKind
from formbridge.core.errors import FormBridgeError, HandlerFailure, VendorError
from formbridge.core.form_data import get_value
from formbridge.core.interfaces.transport import HttpTransport
from formbridge.core.services.dispatch import parse_json_body, require_token, send_authorized, vendor_error
from formbridge.core.services.execution_state import ExecutionHooks, ExecutionRun, ExecutionState
from formbridge.core.services.strategy import SHEETS_JSON_FIELDS, get_execution_method, get_trigger_method
from formbridge.core.services.substitution import is_smart_substitution_enabled, smart_substitute

logger = structlog.get_logger(__name__)


class SheetsExecutor:
    def __init__(
        self,
        transport: HttpTransport,
        *,
        settings: AppSettings | None = None,
        hooks: ExecutionHooks | None = None,
    ) -> None:
        self._transport = transport
        self._settings = settings or AppSettings()
        self._hooks = hooks or ExecutionHooks()

    async def execute(
        self,
        form_data: Mapping[str, Any] | None,
        params: Sequence[Param] | None = None,
        *,
        credentials: OAuth2Credentials | None,
    ) -> ResultEnvelope:
        if not form_data:
            return ResultEnvelope.no_operation()

        # The caller's map is never mutated, so repeated calls see the same input.
        data = copy.deepcopy(dict(form_data))
        entity = get_value(data, "entity", object)
        command = get_value(data, "command", object)
        method = get_execution_method(
            None if entity is None else str(entity),
            None if command is None else str(command),
            self._settings,
        )
        credentials = require_token(credentials)

        run = ExecutionRun(operation=f"{entity}_{command}", hooks=self._hooks)
        logger.info("execution.start", operation=run.operation)

        bound: list[BoundParameter] = []
        try:
            if is_smart_substitution_enabled(data):
                run.advance(ExecutionState.SUBSTITUTING)
                bound = smart_substitute(data, SHEETS_JSON_FIELDS, params or ())

            run.advance(ExecutionState.VALIDATING)
            config = MethodConfig.from_form_data(data)
            method.validate_execution_request(config)

            run.advance(ExecutionState.RESOLVING_PREREQUISITES)
            prerequisites = await method.execute_prerequisites(
                config, transport=self._transport, credentials=credentials
            )

            run.advance(ExecutionState.DISPATCHING)
            request = method.build_execution_request(config, prerequisites)
            response = await send_authorized(self._transport, credentials, request)
            if not response.is_success:
                error = vendor_error(response)
                run.fail(error)
                return ResultEnvelope.failure(
                    error,
                    status_code=response.status_code,
                    headers=response.headers,
                    request_params=bound,
                )

            run.advance(ExecutionState.TRANSFORMING_RESPONSE)
            body = method.transform_execution_response(parse_json_body(response.content), config)
        except VendorError as exc:
            run.fail(exc)
            return ResultEnvelope.failure(exc, status_code=exc.status_code, request_params=bound)
        except FormBridgeError as exc:
            run.fail(exc)
            return ResultEnvelope.failure(exc, request_params=bound)
        except Exception as exc:
            error = HandlerFailure(run.state.value, exc)
            run.fail(error)
            return ResultEnvelope.failure(error, request_params=bound)

        run.advance(ExecutionState.DONE)
        return ResultEnvelope(
            status_code=response.status_code,
            headers=response.headers,
            is_execution_success=True,
            body=body,
            request_params=bound,
        )

    async def lookup(
        self,
        trigger_kind: str | TriggerKind,
        form_data: Mapping[str, Any] | None,
        *,
        credentials: OAuth2Credentials | None,
    ) -> TriggerResultEnvelope:
        method = get_trigger_method(trigger_kind, self._settings)
        credentials = require_token(credentials)
        kind = TriggerKind.parse(trigger_kind).value
        logger.info("lookup.start", trigger=kind)

        try:
            config = MethodConfig.from_form_data(copy.deepcopy(dict(form_data or {})))
            method.validate_trigger_request(config)
            response = await send_authorized(self._transport, credentials, method.build_trigger_request(config))
            if not response.is_success:
                raise vendor_error(response)
            trigger = method.transform_trigger_response(parse_json_body(response.content), config)
        except VendorError as exc:
            logger.warning("lookup.failed", trigger=kind, status=exc.status_code, message=exc.message)
            return TriggerResultEnvelope.failure(exc, status_code=exc.status_code)
        except FormBridgeError as exc:
            logger.warning("lookup.failed", trigger=kind, error=type(exc).__name__, message=exc.message)
            return TriggerResultEnvelope.failure(exc)
        except Exception as exc:
            error = HandlerFailure(kind, exc)
            logger.warning("lookup.failed", trigger=kind, error=type(exc).__name__, message=error.message)
            return TriggerResultEnvelope.failure(error)

        return TriggerResultEnvelope(is_execution_success=True, status_code=response.status_code, trigger=trigger)
