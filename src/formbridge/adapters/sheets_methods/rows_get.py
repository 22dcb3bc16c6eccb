"""Fetch rows of a sheet as a list of objects keyed by the header row."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import (
    LAST_COLUMN,
    ROW_INDEX_KEY,
    SheetsMethod,
    a1_range,
    nested_list,
    row_keys,
)
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest
from formbridge.core.errors import InvalidMethodRequest


class RowsGetMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)
        if config.row_offset < 0:
            raise InvalidMethodRequest("rowOffset", "Row offset must be zero or greater")
        if config.row_limit is not None and config.row_limit < 1:
            raise InvalidMethodRequest("rowLimit", "Row limit must be 1 or greater")

    def cells_range(self, config: MethodConfig) -> str:
        if config.spreadsheet_range:
            return a1_range(config.sheet_title or "", config.spreadsheet_range)

        start = config.table_header_index
        if config.row_limit is None:
            return a1_range(config.sheet_title or "", f"A{start}:{LAST_COLUMN}")
        # The header row (when enabled) is part of the fetched block.
        header_rows = 1 if config.first_row_is_header else 0
        end = start + header_rows + config.row_offset + config.row_limit - 1
        return a1_range(config.sheet_title or "", f"{start}:{end}")

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return WireRequest(
            method="GET",
            url=self.values_url(config, self.cells_range(config)),
            params={"majorDimension": "ROWS", "valueRenderOption": "FORMATTED_VALUE"},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        values = nested_list(body, "values")
        rows = [row if isinstance(row, list) else [] for row in values]

        header: list[str] = []
        if config.first_row_is_header and rows:
            header = [str(cell) for cell in rows[0]]
            rows = rows[1:]

        rows = rows[config.row_offset :]
        if config.row_limit is not None:
            rows = rows[: config.row_limit]

        width = max([len(header)] + [len(row) for row in rows])
        keys = row_keys(header, width)

        result: list[dict[str, Any]] = []
        for position, row in enumerate(rows):
            item = {key: (row[i] if i < len(row) else "") for i, key in enumerate(keys)}
            item[ROW_INDEX_KEY] = config.row_offset + position
            result.append(item)
        return result
