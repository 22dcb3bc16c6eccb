"""Typed view of a spreadsheet-family configuration map.

`MethodConfig.from_form_data` decodes the raw map once, collecting every type
error before raising, so handlers never probe the map again.
"""

from __future__ import annotations

import json
import re
from typing import Any, Mapping

from pydantic import BaseModel, Field

from formbridge.core.errors import ConfigurationTypeError
from formbridge.core.form_data import get_value

SPREADSHEET_URL_PATTERN = re.compile(r"/spreadsheets/d/([a-zA-Z0-9-_]+)")

DEFAULT_TABLE_HEADER_INDEX = 1


class MethodConfig(BaseModel):
    entity: str | None = None
    command: str | None = None
    spreadsheet_id: str | None = Field(default=None, description="Spreadsheet (file) identifier.")
    spreadsheet_name: str | None = None
    sheet_title: str | None = Field(default=None, description="Human-readable sheet (tab) title.")
    spreadsheet_range: str | None = Field(default=None, description="A1 range within the sheet.")
    table_header_index: int = Field(default=DEFAULT_TABLE_HEADER_INDEX, description="1-based header row.")
    row_index: int | None = Field(default=None, description="0 = first data row after the header.")
    row_offset: int = 0
    row_limit: int | None = None
    first_row_is_header: bool = True
    row_object: str | None = Field(default=None, description="JSON object text.")
    row_objects: str | None = Field(default=None, description="JSON array-of-objects text.")
    destination_spreadsheet_id: str | None = None

    @classmethod
    def from_form_data(cls, form_data: Mapping[str, Any] | None) -> "MethodConfig":
        errors: list[ConfigurationTypeError] = []
        values: dict[str, Any] = {}

        def read(attribute: str, field: str, expected_type: Any = str, default: Any = None) -> None:
            try:
                value = get_value(form_data, field, expected_type, default)
            except ConfigurationTypeError as exc:
                errors.append(exc)
                return
            if value is not None:
                values[attribute] = value

        read("entity", "entity")
        read("command", "command")
        read("spreadsheet_id", "spreadsheetId")
        read("spreadsheet_name", "spreadsheetName")
        read("sheet_title", "sheetTitle")
        read("spreadsheet_range", "range")
        read("table_header_index", "tableHeaderIndex", int)
        read("row_index", "rowIndex", int)
        read("row_offset", "rowOffset", int)
        read("row_limit", "rowLimit", int)
        read("first_row_is_header", "firstRowIsHeader", bool)
        read("row_object", "rowObject", object)
        read("row_objects", "rowObjects", object)
        read("destination_spreadsheet_id", "destinationSpreadsheetId")

        if "spreadsheet_id" not in values:
            try:
                url = get_value(form_data, "spreadsheetUrl")
            except ConfigurationTypeError as exc:
                errors.append(exc)
                url = None
            if url:
                match = SPREADSHEET_URL_PATTERN.search(url)
                values["spreadsheet_id"] = match.group(1) if match else url

        # JSON-bearing fields may arrive already decoded; keep them as text.
        for attribute, field, expected in (
            ("row_object", "rowObject", dict),
            ("row_objects", "rowObjects", list),
        ):
            value = values.get(attribute)
            if value is None or isinstance(value, str):
                continue
            if isinstance(value, expected):
                values[attribute] = json.dumps(value)
            else:
                errors.append(
                    ConfigurationTypeError(field, "JSON text", type(value).__name__)
                )
                values.pop(attribute)

        if errors:
            raise ConfigurationTypeError.from_many(errors)
        return cls(**values)
