"""DISTINCT command."""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_safely
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand, base_template_config
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.form_data import get_value, set_value

DISTINCT_QUERY = "distinct.query"
DISTINCT_KEY = "distinct.key"


class Distinct(MongoCommand):
    kind = MongoCommandKind.DISTINCT
    json_fields = (DISTINCT_QUERY,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.query: str | None = get_value(form_data, DISTINCT_QUERY)
        self.key: str | None = get_value(form_data, DISTINCT_KEY)

    def _missing_required(self) -> list[str]:
        return [] if self.key else ["Key"]

    def render(self) -> dict[str, Any]:
        return {
            "distinct": self.collection,
            "key": self.key,
            "query": parse_safely("Query", self.query or "{}"),
        }

    def transform_response(self, reply: dict[str, Any]) -> Any:
        return reply.get("values", [])

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        key = hints.filter_field_name or "_id"

        config = base_template_config(MongoCommandKind.DISTINCT, collection_name)
        set_value(config, DISTINCT_QUERY, '{ "_id": ObjectId("id_of_document_to_distinct") }')
        set_value(config, DISTINCT_KEY, key)

        raw_query = (
            "{\n"
            f'  "distinct": "{collection_name}",\n'
            '  "query": { "_id": ObjectId("id_of_document_to_distinct") },\n'
            f'  "key": "{key}"\n'
            "}\n"
        )
        set_value(config, BODY, raw_query)
        return [Template(title="Distinct", configuration=config)]
