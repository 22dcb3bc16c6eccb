"""Smart substitution of `{{ binding }}` expressions in JSON-bearing fields.

The flow keeps exact left-to-right order:
1. extract every binding in order (duplicates included, one slot each);
2. replace each binding with a positional placeholder;
3. re-inject the caller's values placeholder by placeholder, rendering each
   value so the surrounding JSON stays valid.
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterable, MutableMapping, Sequence

import structlog

from formbridge.core.domain.models import BoundParameter, DataType, Param
from formbridge.core.errors import SmartSubstitutionError
from formbridge.core.form_data import get_value, set_value

logger = structlog.get_logger(__name__)

BINDING_PATTERN = re.compile(r"\{\{(.*?)\}\}", re.DOTALL)
PLACEHOLDER = "#_formbridge_placeholder#"
SMART_SUBSTITUTION_FIELD = "smartSubstitution"


def extract_bindings_in_order(text: str) -> list[str]:
    return [match.group(1).strip() for match in BINDING_PATTERN.finditer(text)]


def replace_bindings_with_placeholder(text: str) -> str:
    return BINDING_PATTERN.sub(PLACEHOLDER, text)


def _reject_constant(name: str) -> Any:
    raise ValueError(name)


def _detect_type(value: str) -> tuple[DataType, bool]:
    """Return the JSON type of `value` and whether it can be inserted raw."""

    try:
        parsed = json.loads(value, parse_constant=_reject_constant)
    except ValueError:
        return DataType.STRING, False

    if isinstance(parsed, bool):
        return DataType.BOOLEAN, True
    if isinstance(parsed, int):
        return DataType.INTEGER, True
    if isinstance(parsed, float):
        return DataType.FLOAT, True
    if parsed is None:
        return DataType.NULL, True
    if isinstance(parsed, dict):
        return DataType.JSON_OBJECT, True
    if isinstance(parsed, list):
        return DataType.ARRAY, True
    # A JSON string literal such as "\"abc\"" is already quoted.
    return DataType.STRING, True


def _string_delimiter_at(text: str, position: int) -> str | None:
    """Quote character of the string literal enclosing `position`, if any."""

    delimiter: str | None = None
    escaped = False
    for char in text[:position]:
        if delimiter is None:
            if char in ('"', "'"):
                delimiter = char
            continue
        if escaped:
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == delimiter:
            delimiter = None
    return delimiter


def render_value(value: str | None, delimiter: str | None) -> tuple[str, DataType]:
    """Render `value` for insertion, inside a string literal or as a bare token."""

    if value is None:
        return ("" if delimiter else "null"), DataType.NULL

    data_type, raw = _detect_type(value)
    if delimiter is not None:
        escaped = json.dumps(value)[1:-1]
        if delimiter == "'":
            escaped = escaped.replace("'", "\\'")
        return escaped, data_type
    if raw:
        return value.strip(), data_type
    return json.dumps(value), data_type


def _find_param(binding: str, params: Sequence[Param]) -> Param:
    for param in params:
        if param.key.strip() == binding:
            return param
    raise SmartSubstitutionError(binding)


def substitute_placeholders(
    text: str,
    bindings: Sequence[str],
    params: Sequence[Param],
) -> tuple[str, list[BoundParameter]]:
    """Fill the placeholders of `text` in order, one binding per placeholder."""

    pieces: list[str] = []
    bound: list[BoundParameter] = []
    cursor = 0
    for binding in bindings:
        index = text.find(PLACEHOLDER, cursor)
        if index == -1:
            raise SmartSubstitutionError(binding)
        param = _find_param(binding, params)
        rendered, data_type = render_value(param.value, _string_delimiter_at(text, index))
        pieces.append(text[cursor:index])
        pieces.append(rendered)
        cursor = index + len(PLACEHOLDER)
        bound.append(BoundParameter(binding=binding, value=param.value, data_type=data_type))
    pieces.append(text[cursor:])
    return "".join(pieces), bound


def substitute_text(text: str, params: Sequence[Param]) -> tuple[str, list[BoundParameter]]:
    bindings = extract_bindings_in_order(text)
    if not bindings:
        return text, []
    return substitute_placeholders(replace_bindings_with_placeholder(text), bindings, params)


def is_smart_substitution_enabled(form_data: MutableMapping[str, Any]) -> bool:
    """Per-request flag; defaults to enabled when absent or unreadable."""

    value = get_value(form_data, SMART_SUBSTITUTION_FIELD, object)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() == "true"
    return True


def smart_substitute(
    form_data: MutableMapping[str, Any],
    fields: Iterable[str],
    params: Sequence[Param],
) -> list[BoundParameter]:
    """Substitute bindings in every JSON-bearing `field`, updating `form_data` in place."""

    bound: list[BoundParameter] = []
    for field in fields:
        value = get_value(form_data, field, object)
        if not isinstance(value, str):
            continue
        updated, field_bound = substitute_text(value, params)
        if field_bound:
            set_value(form_data, field, updated)
            bound.extend(field_bound)
            logger.debug("substitution.field", field=field, bindings=len(field_bound))
    return bound
