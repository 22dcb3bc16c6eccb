"""httpx-backed transport.

Why a wrapper:
- Centralizes timeouts, headers and the in-memory size cap for every call.
- Keeps httpx out of the executors, which only see `HttpTransport`.
"""

from __future__ import annotations

import httpx
import structlog

from formbridge.core.config import AppSettings
from formbridge.core.domain.models import TransportResponse, WireRequest
from formbridge.core.errors import ResponseTooLargeError, TransportError

logger = structlog.get_logger(__name__)


def build_async_client(
    settings: AppSettings | None = None,
    *,
    extra_headers: dict[str, str] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an `httpx.AsyncClient` with the configured timeout and headers."""

    settings = settings or AppSettings()
    headers: dict[str, str] = {
        "User-Agent": settings.user_agent,
        "Accept": "application/json",
    }
    if extra_headers:
        headers.update(extra_headers)
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers=headers,
        transport=transport,
    )


class HttpxTransport:
    """`HttpTransport` implementation; one outbound call per `send`."""

    def __init__(self, settings: AppSettings | None = None, *, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings or AppSettings()
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def send(self, request: WireRequest) -> TransportResponse:
        limit = self._settings.max_response_bytes
        outbound = self._client.build_request(
            request.method,
            request.url,
            params=request.params or None,
            headers=request.headers or None,
            json=request.body,
        )
        try:
            response = await self._client.send(outbound, stream=True)
        except httpx.HTTPError as exc:
            logger.warning("transport.error", method=request.method, url=request.url, error=type(exc).__name__)
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc

        try:
            content = bytearray()
            async for chunk in response.aiter_bytes():
                content.extend(chunk)
                if len(content) > limit:
                    logger.warning("transport.too_large", url=request.url, limit=limit)
                    raise ResponseTooLargeError(limit)
        except httpx.HTTPError as exc:
            raise TransportError(f"{type(exc).__name__}: {exc}") from exc
        finally:
            await response.aclose()

        return TransportResponse(
            status_code=response.status_code,
            headers={key: response.headers.get_list(key) for key in response.headers.keys()},
            content=bytes(content),
            reason=response.reason_phrase,
        )
