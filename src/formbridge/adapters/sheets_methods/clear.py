"""Clear the values of a whole sheet or of a range within it."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod, a1_range
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest


class ClearMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        cells_range = a1_range(config.sheet_title or "", config.spreadsheet_range)
        return WireRequest(
            method="POST",
            url=self.values_url(config, cells_range, ":clear"),
            body={},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        return {"message": "Cleared range successfully!", "clearedRange": body.get("clearedRange")}
