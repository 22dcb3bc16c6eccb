"""Shared helpers of the spreadsheet REST methods.

Row numbering: the header sits on the 1-based row `table_header_index`; data
row `i` (0-based, the `rowIndex` exposed to users) sits on sheet row
`table_header_index + 1 + i`.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import quote

from formbridge.core.config import AppSettings
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.errors import InvalidMethodRequest, QuerySyntaxError
from formbridge.core.form_data import get_value
from formbridge.core.interfaces.transport import HttpTransport
from formbridge.core.services.dispatch import fetch_json

VALUE_INPUT_OPTION = "USER_ENTERED"
ROW_INDEX_KEY = "rowIndex"
LAST_COLUMN = "ZZZ"


def column_letter(index: int) -> str:
    """0-based column index -> A1 column letters (0 -> A, 26 -> AA)."""

    letters = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def quote_sheet_title(title: str) -> str:
    return "'" + title.replace("'", "''") + "'"


def a1_range(title: str, cells: str | None = None) -> str:
    quoted = quote_sheet_title(title)
    return f"{quoted}!{cells}" if cells else quoted


def nested(body: Any, key: str) -> dict[str, Any]:
    """`body[key]` when both are objects; an empty dict for absent or null parts."""

    value = body.get(key) if isinstance(body, dict) else None
    return value if isinstance(value, dict) else {}


def nested_list(body: Any, key: str) -> list[Any]:
    value = body.get(key) if isinstance(body, dict) else None
    return value if isinstance(value, list) else []


def cell_text(value: Any) -> Any:
    """Cell value as sent to the API: scalars as-is, containers as JSON text."""

    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    return json.dumps(value)


def _parse_json(field: str, text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise QuerySyntaxError(field, text[:40], str(exc)) from exc


def parse_row_object(text: str | None) -> dict[str, Any]:
    if not text:
        raise InvalidMethodRequest("rowObject", "Missing row object")
    value = _parse_json("rowObject", text)
    if not isinstance(value, dict):
        raise InvalidMethodRequest("rowObject", "Row object must be a JSON object")
    return value


def parse_row_objects(text: str | None) -> list[dict[str, Any]]:
    if not text:
        raise InvalidMethodRequest("rowObjects", "Missing row objects")
    value = _parse_json("rowObjects", text)
    if not isinstance(value, list) or not all(isinstance(row, dict) for row in value):
        raise InvalidMethodRequest("rowObjects", "Row objects must be a JSON array of objects")
    if not value:
        raise InvalidMethodRequest("rowObjects", "Row objects must not be empty")
    return value


def row_index_of(row: dict[str, Any], fallback: int | None = None) -> int:
    """Row index carried by a row object (trimmed like any numeric field)."""

    index = get_value(row, ROW_INDEX_KEY, int, fallback)
    if index is None:
        raise InvalidMethodRequest(ROW_INDEX_KEY, "Missing row index")
    if index < 0:
        raise InvalidMethodRequest(ROW_INDEX_KEY, "Row index must be zero or greater")
    return index


def check_columns(header: list[str], rows: list[dict[str, Any]]) -> None:
    known = set(header)
    for row in rows:
        unknown = [key for key in row if key != ROW_INDEX_KEY and key not in known]
        if unknown:
            raise InvalidMethodRequest(
                "rowObject",
                "Columns not present in the header row: " + ", ".join(unknown),
            )


class SheetsMethod:
    """Base of every spreadsheet method; holds endpoints and common checks."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()

    @property
    def sheets_url(self) -> str:
        return self._settings.sheets_base_url.rstrip("/")

    @property
    def drive_url(self) -> str:
        return self._settings.drive_base_url.rstrip("/")

    def spreadsheet_url(self, config: MethodConfig) -> str:
        return f"{self.sheets_url}/{quote(config.spreadsheet_id or '', safe='')}"

    def values_url(self, config: MethodConfig, cells_range: str, suffix: str = "") -> str:
        return f"{self.spreadsheet_url(config)}/values/{quote(cells_range, safe='')}{suffix}"

    def data_row_number(self, config: MethodConfig, row_index: int) -> int:
        return config.table_header_index + 1 + row_index

    # -- validation ---------------------------------------------------------

    def require_spreadsheet(self, config: MethodConfig) -> None:
        if not config.spreadsheet_id:
            raise InvalidMethodRequest("spreadsheetId", "Missing required field Spreadsheet")

    def require_sheet(self, config: MethodConfig) -> None:
        self.require_spreadsheet(config)
        if not config.sheet_title:
            raise InvalidMethodRequest("sheetTitle", "Missing required field Sheet")
        if config.table_header_index < 1:
            raise InvalidMethodRequest("tableHeaderIndex", "Table header index must be 1 or greater")

    # -- default lifecycle --------------------------------------------------

    async def execute_prerequisites(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> Any:
        return None

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return body

    # -- prerequisite lookups -----------------------------------------------

    def header_request(self, config: MethodConfig) -> WireRequest:
        row = config.table_header_index
        return WireRequest(
            method="GET",
            url=self.values_url(config, a1_range(config.sheet_title or "", f"{row}:{row}")),
            params={"majorDimension": "ROWS"},
        )

    async def fetch_header_row(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> list[str]:
        body = await fetch_json(transport, credentials, self.header_request(config))
        return header_from_values(body)

    async def resolve_sheet_id(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> int:
        """Translate the sheet title into the numeric sheet id used by batchUpdate."""

        request = WireRequest(
            method="GET",
            url=self.spreadsheet_url(config),
            params={"fields": "sheets.properties(sheetId,title)"},
        )
        body = await fetch_json(transport, credentials, request)
        for sheet in nested_list(body, "sheets"):
            properties = nested(sheet, "properties")
            if properties.get("title") == config.sheet_title:
                return int(properties.get("sheetId") or 0)
        raise InvalidMethodRequest("sheetTitle", f"No sheet named '{config.sheet_title}' in this spreadsheet")


def header_from_values(body: Any) -> list[str]:
    values = body.get("values") if isinstance(body, dict) else None
    if not values or not isinstance(values[0], list):
        return []
    header = [str(cell).strip() for cell in values[0]]
    # Trailing blank cells are not part of the table.
    while header and not header[-1]:
        header.pop()
    return header


def row_keys(header: list[str], width: int) -> list[str]:
    """Object keys for `width` columns; blank or repeated headers use the column letter."""

    keys: list[str] = []
    seen: set[str] = set()
    for index in range(width):
        name = header[index].strip() if index < len(header) else ""
        if not name or name in seen:
            name = column_letter(index) if not name else f"{name}_{column_letter(index)}"
        seen.add(name)
        keys.append(name)
    return keys


def row_values(header: list[str], row: dict[str, Any], missing: Any) -> list[Any]:
    return [cell_text(row[column]) if column in row else missing for column in header]
