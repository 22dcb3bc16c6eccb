"""Column structure (header row) of a sheet."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod, header_from_values
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest


class GetStructureMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return self.header_request(config)

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return {
            "sheetTitle": config.sheet_title,
            "tableHeaderIndex": config.table_header_index,
            "columns": header_from_values(body),
        }

    def validate_trigger_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)

    def build_trigger_request(self, config: MethodConfig) -> WireRequest:
        return self.header_request(config)

    def transform_trigger_response(self, body: Any, config: MethodConfig) -> Any:
        return [{"label": column, "value": column} for column in header_from_values(body) if column]
