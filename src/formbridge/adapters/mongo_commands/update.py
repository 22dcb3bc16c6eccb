"""UPDATE command (`update` with a single update statement)."""

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

UPDATE_QUERY = "updateMany.query"
UPDATE_UPDATE = "updateMany.update"
UPDATE_LIMIT = "updateMany.limit"


class Update(MongoCommand):
    kind = MongoCommandKind.UPDATE
    json_fields = (UPDATE_QUERY, UPDATE_UPDATE)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.query: str | None = get_value(form_data, UPDATE_QUERY)
        self.update: str | None = get_value(form_data, UPDATE_UPDATE)
        self.multi = get_value(form_data, UPDATE_LIMIT) == LIMIT_ALL

    def _missing_required(self) -> list[str]:
        missing = []
        if not self.query:
            missing.append("Query")
        if not self.update:
            missing.append("Update")
        return missing

    def render(self) -> dict[str, Any]:
        return {
            "update": self.collection,
            "updates": [
                {
                    "q": parse_safely("Query", self.query or ""),
                    "u": parse_safely("Update", self.update or ""),
                    "multi": self.multi,
                }
            ],
        }

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        field_name = hints.filter_field_name or "field"

        config = base_template_config(MongoCommandKind.UPDATE, collection_name)
        set_value(config, UPDATE_QUERY, '{ "_id": ObjectId("id_of_document_to_update") }')
        set_value(config, UPDATE_UPDATE, '{ "$set": { "' + field_name + '": "new value" } }')
        set_value(config, UPDATE_LIMIT, LIMIT_SINGLE)

        raw_query = (
            "{\n"
            f'  "update": "{collection_name}",\n'
            '  "updates": [\n'
            "    {\n"
            '      "q": {\n'
            '        "_id": ObjectId("id_of_document_to_update")\n'
            "      },\n"
            f'      "u": {{ "$set": {{ "{field_name}": "new value" }} }}\n'
            "    }\n"
            "  ]\n"
            "}\n"
        )
        set_value(config, BODY, raw_query)
        return [Template(title="Update", configuration=config)]
