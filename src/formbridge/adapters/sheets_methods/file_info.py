"""Spreadsheet metadata: title, URL and its sheets."""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import SheetsMethod, nested, nested_list
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest

INFO_FIELDS = (
    "spreadsheetId,spreadsheetUrl,properties(title,locale,timeZone),"
    "sheets(properties(sheetId,title,index,gridProperties))"
)


def _sheets(body: Any) -> list[dict[str, Any]]:
    result = []
    for sheet in nested_list(body, "sheets"):
        properties = nested(sheet, "properties")
        grid = nested(properties, "gridProperties")
        result.append(
            {
                "sheetId": properties.get("sheetId"),
                "title": properties.get("title"),
                "index": properties.get("index"),
                "rowCount": grid.get("rowCount"),
                "columnCount": grid.get("columnCount"),
            }
        )
    return result


class FileInfoMethod(SheetsMethod):
    def _request(self, config: MethodConfig) -> WireRequest:
        return WireRequest(method="GET", url=self.spreadsheet_url(config), params={"fields": INFO_FIELDS})

    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_spreadsheet(config)

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return self._request(config)

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        properties = nested(body, "properties")
        return {
            "id": body.get("spreadsheetId"),
            "name": properties.get("title"),
            "url": body.get("spreadsheetUrl"),
            "locale": properties.get("locale"),
            "timeZone": properties.get("timeZone"),
            "sheets": _sheets(body),
        }

    def validate_trigger_request(self, config: MethodConfig) -> None:
        self.require_spreadsheet(config)

    def build_trigger_request(self, config: MethodConfig) -> WireRequest:
        return self._request(config)

    def transform_trigger_response(self, body: Any, config: MethodConfig) -> Any:
        return [{"label": sheet["title"], "value": sheet["title"]} for sheet in _sheets(body) if sheet["title"]]
