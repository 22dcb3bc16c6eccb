"""Delete a sheet (tab) from a spreadsheet."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.interfaces.transport import HttpTransport


class SheetDeleteMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)

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
            url=f"{self.spreadsheet_url(config)}:batchUpdate",
            body={"requests": [{"deleteSheet": {"sheetId": prerequisites}}]},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return {"message": "Deleted sheet successfully!"}
