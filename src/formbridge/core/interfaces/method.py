"""Contracts of spreadsheet-family handlers.

Lifecycle of an execution method:
1. `validate_execution_request` fails fast with `InvalidMethodRequest`.
2. `execute_prerequisites` may issue one lookup call (e.g. sheet title -> id);
   handlers without prerequisites return None immediately.
3. `build_execution_request` builds the outbound request; it never sets the
   Authorization header.
4. `transform_execution_response` reshapes the vendor JSON body.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.interfaces.transport import HttpTransport


@runtime_checkable
class ExecutionMethod(Protocol):
    def validate_execution_request(self, config: MethodConfig) -> None: ...

    async def execute_prerequisites(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> Any: ...

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest: ...

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any: ...


@runtime_checkable
class TriggerMethod(Protocol):
    def validate_trigger_request(self, config: MethodConfig) -> None: ...

    def build_trigger_request(self, config: MethodConfig) -> WireRequest: ...

    def transform_trigger_response(self, body: Any, config: MethodConfig) -> Any: ...
