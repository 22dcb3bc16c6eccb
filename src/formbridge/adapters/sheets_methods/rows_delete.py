"""Delete one data row; the sheet title is first resolved to its sheet id."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.errors import InvalidMethodRequest
from formbridge.core.interfaces.transport import HttpTransport


class RowsDeleteMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)
        if config.row_index is None:
            raise InvalidMethodRequest("rowIndex", "Missing required field Row index")
        if config.row_index < 0:
            raise InvalidMethodRequest("rowIndex", "Row index must be zero or greater")

    async def execute_prerequisites(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> int:
        return await self.resolve_sheet_id(config, transport=transport, credentials=credentials)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        # 0-based grid index of the data row.
        start = self.data_row_number(config, config.row_index or 0) - 1
        return WireRequest(
            method="POST",
            url=f"{self.spreadsheet_url(config)}:batchUpdate",
            body={
                "requests": [
                    {
                        "deleteDimension": {
                            "range": {
                                "sheetId": prerequisites,
                                "dimension": "ROWS",
                                "startIndex": start,
                                "endIndex": start + 1,
                            }
                        }
                    }
                ]
            },
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return {"message": "Deleted row successfully!"}
