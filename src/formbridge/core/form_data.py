"""Typed access to the builder's configuration map.

The builder hands over a loosely-typed mapping. Field names may be dotted
paths (`"find.query"`) that walk nested mappings; a literal key containing the
dots wins when present.

Rules:
- Strings are trimmed of surrounding whitespace; a blank string is absent.
- Absent fields resolve to the caller's default, never to an error.
- Incompatible types raise `ConfigurationTypeError` instead of being coerced.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, MutableMapping

from formbridge.core.errors import ConfigurationTypeError

_MISSING = object()
_INTEGER_PATTERN = re.compile(r"[+-]?\d+")

_TYPE_NAMES: dict[Any, str] = {
    str: "string",
    int: "integer",
    bool: "boolean",
    dict: "object",
    list: "array",
    object: "any",
}


def _lookup(form_data: Mapping[str, Any] | None, field: str) -> Any:
    if not isinstance(form_data, Mapping):
        return _MISSING
    if field in form_data:
        return form_data[field]

    node: Any = form_data
    for part in field.split("."):
        if not isinstance(node, Mapping) or part not in node:
            return _MISSING
        node = node[part]
    return node


def _describe(value: Any) -> str:
    return type(value).__name__


def _coerce(field: str, value: Any, expected_type: Any) -> Any:
    if expected_type is object:
        return value.strip() if isinstance(value, str) else value

    if expected_type is str:
        if isinstance(value, str):
            return value.strip()
        raise ConfigurationTypeError(field, "string", _describe(value))

    if expected_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise ConfigurationTypeError(field, "boolean", _describe(value))

    if expected_type is int:
        # bool is a subclass of int and must not pass as a number.
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
            return int(value.strip())
        raise ConfigurationTypeError(field, "integer", repr(value) if isinstance(value, str) else _describe(value))

    if expected_type is dict:
        if isinstance(value, Mapping):
            return dict(value)
        raise ConfigurationTypeError(field, "object", _describe(value))

    if expected_type is list:
        if isinstance(value, (list, tuple)):
            return list(value)
        raise ConfigurationTypeError(field, "array", _describe(value))

    raise TypeError(f"Unsupported expected type for field {field!r}: {expected_type!r}")


def get_value(
    form_data: Mapping[str, Any] | None,
    field: str,
    expected_type: Any = str,
    default: Any = None,
) -> Any:
    """Read `field` as `expected_type`, falling back to `default` when absent."""

    if expected_type not in _TYPE_NAMES:
        raise TypeError(f"Unsupported expected type for field {field!r}: {expected_type!r}")

    value = _lookup(form_data, field)
    if value is _MISSING or value is None:
        return default
    if isinstance(value, str) and not value.strip():
        return default
    return _coerce(field, value, expected_type)


def is_present(form_data: Mapping[str, Any] | None, field: str) -> bool:
    """True when `field` holds a usable value (not None, not blank, not empty)."""

    value = _lookup(form_data, field)
    if value is _MISSING or value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (Mapping, list, tuple)):
        return len(value) > 0
    return True


def set_value(form_data: MutableMapping[str, Any], field: str, value: Any) -> None:
    """Write `value` at `field`, creating intermediate mappings for dotted paths."""

    if field in form_data or "." not in field:
        form_data[field] = value
        return

    parts = field.split(".")
    node: MutableMapping[str, Any] = form_data
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, MutableMapping):
            child = {}
            node[part] = child
        node = child
    node[parts[-1]] = value
