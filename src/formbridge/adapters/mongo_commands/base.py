"""Shared behaviour of document-database commands.

A command is decoded once from the configuration map in `__init__` and is not
mutated afterwards: `render()` builds a fresh document on every call.
"""

from __future__ import annotations

from typing import Any, ClassVar, Mapping

from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.form_data import get_value, set_value

COMMAND = "command"
COLLECTION = "collection"
BODY = "body"
SMART_SUBSTITUTION = "smartSubstitution"

LIMIT_ALL = "ALL"
LIMIT_SINGLE = "SINGLE"


class MongoCommand:
    kind: ClassVar[MongoCommandKind]
    # Fields holding JSON/document text, in substitution order.
    json_fields: ClassVar[tuple[str, ...]] = ()

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        self.collection: str | None = get_value(form_data, COLLECTION)
        self.defaulted_fields: list[str] = []

    def _missing_required(self) -> list[str]:
        """Labels of operation-specific required fields that are absent."""

        return []

    def validate(self) -> tuple[bool, list[str]]:
        missing: list[str] = []
        if not self.collection:
            missing.append("Collection")
        else:
            missing.extend(self._missing_required())
        return not missing, missing

    def render(self) -> dict[str, Any]:
        raise NotImplementedError

    def transform_response(self, reply: dict[str, Any]) -> Any:
        return reply

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        return []


def base_template_config(kind: MongoCommandKind, collection_name: str) -> dict[str, Any]:
    config: dict[str, Any] = {}
    set_value(config, SMART_SUBSTITUTION, True)
    set_value(config, COMMAND, kind.value)
    set_value(config, COLLECTION, collection_name)
    return config


def first_batch(reply: dict[str, Any]) -> Any:
    cursor = reply.get("cursor")
    if isinstance(cursor, dict) and "firstBatch" in cursor:
        return cursor["firstBatch"]
    return reply
