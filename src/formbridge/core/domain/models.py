"""Domain models (Pydantic v2).

Notes:
- These models describe *what* flows through the translation layer (requests,
  responses, envelopes), not *how* it is sent.
- Wire requests never carry credentials until the executor authorizes them
  right before dispatch.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from formbridge.core.errors import FormBridgeError

NO_OPERATION_MESSAGE = "No operation was performed"


class DataType(str, Enum):
    """Detected type of a value injected by smart substitution."""

    STRING = "STRING"
    INTEGER = "INTEGER"
    FLOAT = "FLOAT"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    JSON_OBJECT = "JSON_OBJECT"
    ARRAY = "ARRAY"


class Param(BaseModel):
    """A value bound by the caller for one `{{ binding }}` expression."""

    key: str = Field(..., description="Binding expression the value belongs to.")
    value: str | None = Field(default=None, description="Literal value, as text.")


class BoundParameter(BaseModel):
    """One substitution performed, in left-to-right placeholder order."""

    binding: str = Field(..., description="Binding expression that was replaced.")
    value: str | None = Field(default=None, description="Literal value injected.")
    data_type: DataType = Field(..., description="Type the value was rendered as.")


class OAuth2Credentials(BaseModel):
    """Bearer credentials supplied by the host; refresh happens elsewhere."""

    access_token: str | None = Field(default=None, description="OAuth access token.")
    token_type: str = Field(default="Bearer", min_length=1)

    def authorization_header(self) -> str:
        return f"{self.token_type} {self.access_token}"


class WireRequest(BaseModel):
    """Outbound request descriptor built by a method handler."""

    model_config = ConfigDict(frozen=True)

    method: str = Field(..., description="HTTP method.")
    url: str = Field(..., min_length=1)
    params: dict[str, str] = Field(default_factory=dict, description="Query-string parameters.")
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any | None = Field(default=None, description="JSON body, if any.")


class TransportResponse(BaseModel):
    """Raw response returned by the transport collaborator."""

    status_code: int = Field(..., ge=100, le=599)
    headers: dict[str, list[str]] = Field(default_factory=dict)
    content: bytes = Field(default=b"")
    reason: str = Field(default="", description="Status text, e.g. 'Not Found'.")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


class ResultEnvelope(BaseModel):
    """Uniform result of every execution, regardless of backend."""

    status_code: int | None = Field(default=None, description="Transport status, if a call was made.")
    headers: dict[str, list[str]] = Field(default_factory=dict)
    is_execution_success: bool = Field(default=False)
    body: Any | None = Field(default=None, description="Transformed payload or error message.")
    error_code: str | None = Field(default=None)
    request_params: list[BoundParameter] = Field(default_factory=list)

    @classmethod
    def no_operation(cls) -> "ResultEnvelope":
        return cls(is_execution_success=True, body={"message": NO_OPERATION_MESSAGE})

    @classmethod
    def failure(
        cls,
        error: FormBridgeError,
        *,
        status_code: int | None = None,
        headers: dict[str, list[str]] | None = None,
        request_params: list[BoundParameter] | None = None,
    ) -> "ResultEnvelope":
        return cls(
            status_code=status_code,
            headers=headers or {},
            is_execution_success=False,
            body=error.message,
            error_code=error.code,
            request_params=request_params or [],
        )


class TriggerResultEnvelope(BaseModel):
    """Result of a lookup (trigger) request used to populate builder widgets."""

    is_execution_success: bool = Field(default=False)
    status_code: int | None = Field(default=None)
    trigger: Any | None = Field(default=None, description="Transformed option list.")
    error: str | None = Field(default=None)

    @classmethod
    def failure(cls, error: FormBridgeError, *, status_code: int | None = None) -> "TriggerResultEnvelope":
        return cls(is_execution_success=False, status_code=status_code, error=error.message)


class Template(BaseModel):
    """Ready-to-run example configuration generated from schema hints."""

    title: str = Field(..., min_length=1)
    configuration: dict[str, Any] = Field(default_factory=dict)


class TemplateHints(BaseModel):
    """Schema metadata used to scaffold templates; not validated against a server."""

    collection_name: str = Field(..., description="Target collection.")
    filter_field_name: str | None = Field(default=None)
    filter_field_value: str | None = Field(default=None)
    sample_document: dict[str, Any] | None = Field(default=None)
