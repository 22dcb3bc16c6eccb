"""Delete a spreadsheet file."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from formbridge.adapters.sheets_methods.base import SheetsMethod
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest


class FileDeleteMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_spreadsheet(config)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return WireRequest(
            method="DELETE",
            url=f"{self.drive_url}/{quote(config.spreadsheet_id or '', safe='')}",
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return {"message": "Deleted spreadsheet successfully!"}
