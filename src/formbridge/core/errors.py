"""Error hierarchy of the translation layer.

Notes:
- Every error carries a stable `code` that the executors copy into a failed
  `ResultEnvelope`.
- Only `UnknownOperationError` and `MissingCredentialsError` are meant to
  reach the caller of `execute`/`lookup`; everything else becomes a failed
  envelope.
"""

from __future__ import annotations

from typing import Iterable, Sequence

PLUGIN_ERROR = "PLUGIN_ERROR"
PLUGIN_EXECUTE_ARGUMENT_ERROR = "PLUGIN_EXECUTE_ARGUMENT_ERROR"
PLUGIN_JSON_PARSE_ERROR = "PLUGIN_JSON_PARSE_ERROR"
PLUGIN_AUTHENTICATION_ERROR = "PLUGIN_AUTHENTICATION_ERROR"
PLUGIN_TRANSPORT_ERROR = "PLUGIN_TRANSPORT_ERROR"


class FormBridgeError(Exception):
    """Base class for all translation-layer errors."""

    code: str = PLUGIN_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationTypeError(FormBridgeError):
    """A configuration field holds a value of an incompatible type."""

    code = PLUGIN_EXECUTE_ARGUMENT_ERROR

    def __init__(self, field: str, expected: str, actual: str | None = None) -> None:
        detail = f" (got {actual})" if actual else ""
        super().__init__(f"Field '{field}' must be of type {expected}{detail}")
        self.field = field
        self.expected = expected
        self.actual = actual
        self.errors: list[ConfigurationTypeError] = [self]

    @classmethod
    def from_many(cls, errors: Sequence["ConfigurationTypeError"]) -> "ConfigurationTypeError":
        """Fold several decode errors into one, keeping all of them in `.errors`."""

        first = errors[0]
        if len(errors) == 1:
            return first
        combined = cls(first.field, first.expected, first.actual)
        combined.errors = list(errors)
        combined.message = "; ".join(e.message for e in errors)
        combined.args = (combined.message,)
        return combined


class MissingRequiredFieldError(FormBridgeError):
    code = PLUGIN_EXECUTE_ARGUMENT_ERROR

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields = list(fields)
        super().__init__(
            "Try again after configuring the fields : " + ", ".join(self.fields)
        )


class QuerySyntaxError(FormBridgeError):
    """Embedded JSON / document text could not be parsed."""

    code = PLUGIN_EXECUTE_ARGUMENT_ERROR

    def __init__(self, field: str, fragment: str, reason: str) -> None:
        super().__init__(f"{field} could not be parsed ({reason}) near: {fragment!r}")
        self.field = field
        self.fragment = fragment
        self.reason = reason


class UnknownOperationError(FormBridgeError):
    """The operation key is not part of the closed resolution table."""

    code = PLUGIN_ERROR

    def __init__(self, key: str, known: Iterable[str] = ()) -> None:
        self.key = key
        self.known = sorted(known)
        known_text = ", ".join(self.known) if self.known else "(none)"
        super().__init__(f"Unknown operation type: {key} (known: {known_text})")


class MissingCredentialsError(FormBridgeError):
    code = PLUGIN_AUTHENTICATION_ERROR

    def __init__(self, message: str = "No bearer token available for this datasource") -> None:
        super().__init__(message)


class InvalidMethodRequest(FormBridgeError):
    """A handler-specific precondition does not hold."""

    code = PLUGIN_EXECUTE_ARGUMENT_ERROR

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{reason} ({field})")
        self.field = field
        self.reason = reason


class SmartSubstitutionError(FormBridgeError):
    code = PLUGIN_EXECUTE_ARGUMENT_ERROR

    def __init__(self, binding: str) -> None:
        super().__init__(f"Did not receive any value for the binding {binding}")
        self.binding = binding


class ResponseParseError(FormBridgeError):
    code = PLUGIN_JSON_PARSE_ERROR

    def __init__(self, raw: str, reason: str) -> None:
        super().__init__(f"Failed to parse response as JSON ({reason}): {raw[:500]}")
        self.raw = raw
        self.reason = reason


class ResponseTooLargeError(FormBridgeError):
    code = PLUGIN_TRANSPORT_ERROR

    def __init__(self, limit: int) -> None:
        super().__init__(f"Response body exceeded the maximum in-memory size of {limit} bytes")
        self.limit = limit


class TransportError(FormBridgeError):
    code = PLUGIN_TRANSPORT_ERROR

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class VendorError(FormBridgeError):
    """The backend answered with a non-success status."""

    code = PLUGIN_ERROR

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code


class HandlerFailure(FormBridgeError):
    """A handler step raised an error outside this hierarchy."""

    code = PLUGIN_ERROR

    def __init__(self, step: str, cause: BaseException) -> None:
        super().__init__(f"{step} failed: {type(cause).__name__}: {cause}")
        self.step = step
        self.cause = cause
