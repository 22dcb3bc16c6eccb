"""Copy a sheet into another spreadsheet."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.errors import InvalidMethodRequest
from formbridge.core.interfaces.transport import HttpTransport


class CopyMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)
        if not config.destination_spreadsheet_id:
            raise InvalidMethodRequest("destinationSpreadsheetId", "Missing required field Destination spreadsheet")

    async def execute_prerequisites(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> int:
        return await self.resolve_sheet_id(config, transport=transport, credentials=credentials)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return WireRequest(
            method="POST",
            url=f"{self.spreadsheet_url(config)}/sheets/{prerequisites}:copyTo",
            body={"destinationSpreadsheetId": config.destination_spreadsheet_id},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        return {
            "sheetId": body.get("sheetId"),
            "title": body.get("title"),
            "destinationSpreadsheetId": config.destination_spreadsheet_id,
        }
