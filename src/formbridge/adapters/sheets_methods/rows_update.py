"""Update one row or many rows in place.

Cells missing from a row object are sent as null, which the API leaves
unchanged.
"""

from __future__ import annotations

from typing import Any

from formbridge.adapters.sheets_methods.base import (
    VALUE_INPUT_OPTION,
    SheetsMethod,
    a1_range,
    check_columns,
    column_letter,
    parse_row_object,
    parse_row_objects,
    row_index_of,
    row_keys,
    row_values,
)
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.errors import InvalidMethodRequest
from formbridge.core.interfaces.transport import HttpTransport


class _UpdateMethod(SheetsMethod):
    def rows(self, config: MethodConfig) -> list[tuple[int, dict[str, Any]]]:
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
            raise InvalidMethodRequest("sheetTitle", "Header row is empty; nothing to update against")
        # Keys match the ones rows are fetched with, so fetched rows write back unchanged.
        keys = row_keys(header, len(header))
        check_columns(keys, [row for _, row in self.rows(config)])
        return keys

    def row_range(self, config: MethodConfig, header: list[str], row_index: int) -> str:
        number = self.data_row_number(config, row_index)
        last = column_letter(len(header) - 1)
        return a1_range(config.sheet_title or "", f"A{number}:{last}{number}")


class RowsUpdateMethod(_UpdateMethod):
    def rows(self, config: MethodConfig) -> list[tuple[int, dict[str, Any]]]:
        row = parse_row_object(config.row_object)
        # The rowIndex field wins over the one carried by the row object.
        source = row if config.row_index is None else {"rowIndex": config.row_index}
        return [(row_index_of(source), row)]

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        header: list[str] = list(prerequisites or [])
        row_index, row = self.rows(config)[0]
        cells_range = self.row_range(config, header, row_index)
        return WireRequest(
            method="PUT",
            url=self.values_url(config, cells_range),
            params={"valueInputOption": VALUE_INPUT_OPTION},
            body={"range": cells_range, "majorDimension": "ROWS", "values": [row_values(header, row, None)]},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        return {"message": "Updated sheet successfully!", "updatedRange": body.get("updatedRange")}


class RowsBulkUpdateMethod(_UpdateMethod):
    def rows(self, config: MethodConfig) -> list[tuple[int, dict[str, Any]]]:
        return [(row_index_of(row), row) for row in parse_row_objects(config.row_objects)]

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        header: list[str] = list(prerequisites or [])
        data = []
        for row_index, row in self.rows(config):
            cells_range = self.row_range(config, header, row_index)
            data.append({"range": cells_range, "majorDimension": "ROWS", "values": [row_values(header, row, None)]})
        return WireRequest(
            method="POST",
            url=f"{self.spreadsheet_url(config)}/values:batchUpdate",
            body={"valueInputOption": VALUE_INPUT_OPTION, "data": data},
        )

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        body = body if isinstance(body, dict) else {}
        return {"message": "Updated sheet successfully!", "totalUpdatedRows": body.get("totalUpdatedRows")}
