"""List the spreadsheets visible to the credentials.

Only the first page of the listing is read: at most `PAGE_SIZE` files, in
name order. When the service reports more (`nextPageToken`) the result is
truncated and a `files.truncated` warning is logged.
"""

from __future__ import annotations

from typing import Any

import structlog

from formbridge.adapters.sheets_methods.base import SheetsMethod, nested_list
from formbridge.core.domain.method_config import MethodConfig
from formbridge.core.domain.models import WireRequest

logger = structlog.get_logger(__name__)

SPREADSHEET_MIME_TYPE = "application/vnd.google-apps.spreadsheet"
SPREADSHEET_LINK = "https://docs.google.com/spreadsheets/d/{id}/edit"
PAGE_SIZE = 1000


def _files(body: Any) -> list[dict[str, Any]]:
    result = []
    for item in nested_list(body, "files"):
        if not isinstance(item, dict):
            continue
        result.append(
            {
                "id": item.get("id"),
                "name": item.get("name"),
                "url": item.get("webViewLink") or SPREADSHEET_LINK.format(id=item.get("id")),
                "createdTime": item.get("createdTime"),
                "modifiedTime": item.get("modifiedTime"),
            }
        )
    if isinstance(body, dict) and body.get("nextPageToken"):
        logger.warning("files.truncated", returned=len(result), page_size=PAGE_SIZE)
    return result


class FileListMethod(SheetsMethod):
    def _request(self) -> WireRequest:
        return WireRequest(
            method="GET",
            url=self.drive_url,
            params={
                "q": f"mimeType='{SPREADSHEET_MIME_TYPE}' and trashed=false",
                "fields": "nextPageToken,files(id,name,createdTime,modifiedTime,webViewLink)",
                "orderBy": "name",
                "pageSize": str(PAGE_SIZE),
            },
        )

    def validate_execution_request(self, config: MethodConfig) -> None:
        return None

    def build_execution_request(self, config: MethodConfig, prerequisites: Any = None) -> WireRequest:
        return self._request()

    def transform_execution_response(self, body: Any, config: MethodConfig) -> Any:
        return _files(body)

    def validate_trigger_request(self, config: MethodConfig) -> None:
        return None

    def build_trigger_request(self, config: MethodConfig) -> WireRequest:
        return self._request()

    def transform_trigger_response(self, body: Any, config: MethodConfig) -> Any:
        return [{"label": item["name"], "value": item["url"]} for item in _files(body)]
