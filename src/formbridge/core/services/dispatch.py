"""Authorized dispatch and response decoding shared by executors and prerequisites.

The bearer token is injected here and only here, immediately before a request
reaches the transport.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from formbridge.core.domain.models import OAuth2Credentials, TransportResponse, WireRequest
from formbridge.core.errors import MissingCredentialsError, ResponseParseError, VendorError
from formbridge.core.interfaces.transport import HttpTransport

logger = structlog.get_logger(__name__)


def require_token(credentials: OAuth2Credentials | None) -> OAuth2Credentials:
    if credentials is None or not (credentials.access_token or "").strip():
        raise MissingCredentialsError()
    return credentials


def authorize(request: WireRequest, credentials: OAuth2Credentials) -> WireRequest:
    headers = dict(request.headers)
    headers["Authorization"] = require_token(credentials).authorization_header()
    return request.model_copy(update={"headers": headers})


async def send_authorized(
    transport: HttpTransport,
    credentials: OAuth2Credentials,
    request: WireRequest,
) -> TransportResponse:
    authorized = authorize(request, credentials)
    logger.info("dispatch.request", method=request.method, url=request.url)
    response = await transport.send(authorized)
    logger.info("dispatch.response", method=request.method, url=request.url, status=response.status_code)
    return response


def parse_json_body(content: bytes) -> Any:
    """Decode a response body; an empty body decodes to None."""

    text = content.decode("utf-8", errors="replace")
    if not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ResponseParseError(text, str(exc)) from exc


def extract_vendor_message(response: TransportResponse) -> str:
    """`error.message` from the vendor body when present, else the status text."""

    try:
        tree = parse_json_body(response.content)
    except ResponseParseError:
        tree = None

    if isinstance(tree, dict):
        error = tree.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return response.reason or str(response.status_code)


def vendor_error(response: TransportResponse) -> VendorError:
    return VendorError(response.status_code, extract_vendor_message(response))


async def fetch_json(
    transport: HttpTransport,
    credentials: OAuth2Credentials,
    request: WireRequest,
) -> Any:
    """Send a prerequisite lookup and return its decoded body, raising on non-2xx."""

    response = await send_authorized(transport, credentials, request)
    if not response.is_success:
        raise vendor_error(response)
    return parse_json_body(response.content)
