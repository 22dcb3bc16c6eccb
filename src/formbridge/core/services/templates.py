"""Template generation for the document-database family.

Pure generation: no network calls and no validation of the hints.
"""

from __future__ import annotations

from typing import Any

from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.services.strategy import MONGO_COMMANDS

TEMPLATE_ORDER = (
    MongoCommandKind.FIND,
    MongoCommandKind.INSERT,
    MongoCommandKind.UPDATE,
    MongoCommandKind.DELETE,
    MongoCommandKind.COUNT,
    MongoCommandKind.DISTINCT,
    MongoCommandKind.AGGREGATE,
)


def filter_hint(sample_document: dict[str, Any] | None) -> tuple[str | None, str | None]:
    """First string-valued field other than `_id`, as (name, value)."""

    for key, value in (sample_document or {}).items():
        if key != "_id" and isinstance(value, str):
            return key, value
    return None, None


def generate_templates(hints: TemplateHints) -> list[Template]:
    templates: list[Template] = []
    for kind in TEMPLATE_ORDER:
        templates.extend(MONGO_COMMANDS[kind].generate_template(hints))
    return templates


def generate_collection_templates(
    collection: str,
    sample_document: dict[str, Any] | None = None,
) -> list[Template]:
    field_name, field_value = filter_hint(sample_document)
    hints = TemplateHints(
        collection_name=collection,
        filter_field_name=field_name,
        filter_field_value=field_value,
        sample_document=sample_document,
    )
    return generate_templates(hints)
