"""DELETE command.

No default is synthesized for the filter query: a delete without an explicit
filter fails validation instead of matching every document.
"""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_safely
from formbridge.adapters.mongo_commands.base import (
    BODY,
    LIMIT_ALL,
    LIMIT_SINGLE,
    MongoCommand,
    base_template_config,
)
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.form_data import get_value, set_value

DELETE_QUERY = "delete.query"
DELETE_LIMIT = "delete.limit"


class Delete(MongoCommand):
    kind = MongoCommandKind.DELETE
    json_fields = (DELETE_QUERY,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.query: str | None = get_value(form_data, DELETE_QUERY)
        # 0 deletes every matching document, 1 a single one. Anything but
        # exactly "ALL" keeps the single-document default.
        self.limit = 0 if get_value(form_data, DELETE_LIMIT) == LIMIT_ALL else 1

    def _missing_required(self) -> list[str]:
        return [] if self.query else ["Query"]

    def render(self) -> dict[str, Any]:
        return {
            "delete": self.collection,
            "deletes": [
                {"q": parse_safely("Query", self.query or ""), "limit": self.limit},
            ],
        }

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        config = base_template_config(MongoCommandKind.DELETE, collection_name)
        set_value(config, DELETE_QUERY, '{ "_id": ObjectId("id_of_document_to_delete") }')
        set_value(config, DELETE_LIMIT, LIMIT_SINGLE)

        raw_query = (
            "{\n"
            f'  "delete": "{collection_name}",\n'
            '  "deletes": [\n'
            "    {\n"
            '      "q": {\n'
            '        "_id": "id_of_document_to_delete"\n'
            "      },\n"
            '      "limit": 1\n'
            "    }\n"
            "  ]\n"
            "}\n"
        )
        set_value(config, BODY, raw_query)
        return [Template(title="Delete", configuration=config)]
