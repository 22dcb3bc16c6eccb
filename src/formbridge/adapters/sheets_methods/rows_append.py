"""Append one row or many rows after the table of a sheet.

The header row is fetched first so values line up with the columns; blank or
repeated header cells are addressed by the same keys a fetch returns. An empty
header row is written together with the data, using the keys in first-seen
order.
"""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import (
    ROW_INDEX_KEY,
    VALUE_INPUT_OPTION,
    SheetsMethod,
    a1_range,
    check_columns,
    parse_row_object,
    nested,
    parse_row_objects,
    row_keys,
    row_values,
)
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.interfaces.transport import HttpTransport


def _keys_in_order(rows: list[dict[str, Any]]) -> list[str]:
    keys: list[str] = []
    for row in rows:
        for key in row:
            if key != ROW_INDEX_KEY and key not in keys:
                keys.append(key)
    return keys


class _AppendMethod(SheetsMethod):
    success_message = "Inserted row successfully!"

    def rows(self, config: MethodConfig) -> list[dict[str, Any]]:
        raise NotImplementedError

    def validate_execution_request(self, config: MethodConfig) -> None:
        self.require_sheet(config)
        self.rows(config)

    async def execute_prerequisites(
        self,
        config: MethodConfig,
        *,
        transport: HttpTransport,
        credentials: OAuth2Credentials,
    ) -> list[str]:
        header = await self.fetch_header_row(config, transport=transport, credentials=credentials)
        if not header:
            return []
        keys = row_keys(header, len(header))
        check_columns(keys, self.rows(config))
        return keys

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        rows = self.rows(config)
        header: list[str] = list(prerequisites or [])

        values: list[list[Any]] = []
        if not header:
            header = _keys_in_order(rows)
            values.append(list(header))
        values.extend(row_values(header, row, "") for row in rows)

        cells_range = a1_range(config.sheet_title or "", f"A{config.table_header_index}")
        return WireRequest(
            method="POST",
            url=self.values_url(config, cells_range, ":append"),
            params={"valueInputOption": VALUE_INPUT_OPTION, "insertDataOption": "INSERT_ROWS"},
            body={"range": cells_range, "majorDimension": "ROWS", "values": values},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        updates = nested(body, "updates")
        return {
            "message": self.success_message,
            "updatedRange": updates.get("updatedRange"),
            "updatedRows": updates.get("updatedRows"),
        }


class RowsAppendMethod(_AppendMethod):
    def rows(self, config: MethodConfig) -> list[dict[str, Any]]:
        return [parse_row_object(config.row_object)]


class RowsBulkAppendMethod(_AppendMethod):
    success_message = "Inserted rows successfully!"

    def rows(self, config: MethodConfig) -> list[dict[str, Any]]:
        return parse_row_objects(config.row_objects)
