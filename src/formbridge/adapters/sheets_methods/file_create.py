"""Create a spreadsheet, optionally seeded with rows."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import ROW_INDEX_KEY, SheetsMethod, cell_text, nested, parse_row_objects
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest
from formbridge.core.errors import InvalidMethodRequest


def _cell(value: Any) -> dict[str, Any]:
    value = cell_text(value)
    if isinstance(value, bool):
        return {"userEnteredValue": {"boolValue": value}}
    if isinstance(value, (int, float)):
        return {"userEnteredValue": {"numberValue": value}}
    if value is None:
        return {}
    return {"userEnteredValue": {"stringValue": value}}


class FileCreateMethod(SheetsMethod):
    def validate_execution_request(self, config: MethodConfig) -> None:
        if not config.spreadsheet_name:
            raise InvalidMethodRequest("spreadsheetName", "Missing required field Spreadsheet name")
        if config.row_objects:
            parse_row_objects(config.row_objects)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        body: dict[str, Any] = {"properties": {"title": config.spreadsheet_name}}

        if config.row_objects:
            rows = parse_row_objects(config.row_objects)
            header: list[str] = []
            for row in rows:
                header.extend(key for key in row if key != ROW_INDEX_KEY and key not in header)
            row_data = [{"values": [_cell(column) for column in header]}]
            row_data.extend({"values": [_cell(row.get(column)) for column in header]} for row in rows)
            body["sheets"] = [{"data": [{"startRow": 0, "startColumn": 0, "rowData": row_data}]}]

        return WireRequest(method="POST", url=self.sheets_url, body=body)

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        return {
            "id": body.get("spreadsheetId"),
            "name": nested(body, "properties").get("title"),
            "url": body.get("spreadsheetUrl"),
        }
