"""Contracts of the external collaborators.

`HttpTransport` performs exactly one outbound call per `send`; retries and
timeouts belong to its own configuration. `DocumentDatabase` runs one
command document per call.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from formbridge.core.domain.models import TransportResponse, WireRequest


@runtime_checkable
class HttpTransport(Protocol):
    """Minimal async HTTP contract used by the spreadsheet family."""

    async def send(self, request: WireRequest) -> TransportResponse:
        """Send `request` and return status, headers and raw body bytes.

        Must raise `TransportError` on network failure and
        `ResponseTooLargeError` when the body exceeds the configured cap.
        """

        ...


@runtime_checkable
class DocumentDatabase(Protocol):
    """Minimal async driver contract used by the document-database family."""

    async def run_command(self, document: dict[str, Any]) -> dict[str, Any]:
        """Run a database command and return the server reply document."""

        ...
