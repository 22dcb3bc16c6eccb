from __future__ import annotations

import json
from typing import Any

import pytest

from formbridge.core.config import AppSettings
from formbridge.core.domain.models import OAuth2Credentials, TransportResponse, WireRequest


def json_response(status_code: int, body: Any = None, reason: str = "") -> TransportResponse:
    content = b"" if body is None else json.dumps(body).encode("utf-8")
    return TransportResponse(
        status_code=status_code,
        headers={"content-type": ["application/json"]},
        content=content,
        reason=reason,
    )


class FakeTransport:
    """Replays scripted responses in order and records every request sent."""

    def __init__(self, *responses: TransportResponse) -> None:
        self.responses = list(responses)
        self.requests: list[WireRequest] = []

    async def send(self, request: WireRequest) -> TransportResponse:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self.responses.pop(0)


class FakeDatabase:
    def __init__(self, *replies: dict[str, Any]) -> None:
        self.replies = list(replies)
        self.commands: list[dict[str, Any]] = []

    async def run_command(self, document: dict[str, Any]) -> dict[str, Any]:
        self.commands.append(document)
        return self.replies.pop(0) if self.replies else {"ok": 1}


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(
        _env_file=None,
        sheets_base_url="https://sheets.test/v4/spreadsheets",
        drive_base_url="https://drive.test/v3/files",
    )


@pytest.fixture
def credentials() -> OAuth2Credentials:
    return OAuth2Credentials(access_token="test-token")
