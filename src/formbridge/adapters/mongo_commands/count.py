"""COUNT command."""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_safely
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand, base_template_config
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.form_data import get_value, set_value

COUNT_QUERY = "count.query"


class Count(MongoCommand):
    kind = MongoCommandKind.COUNT
    json_fields = (COUNT_QUERY,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.query: str | None = get_value(form_data, COUNT_QUERY)
        if self.query is None:
            self.defaulted_fields.append("Query")

    def render(self) -> dict[str, Any]:
        return {"count": self.collection, "query": parse_safely("Query", self.query or "{}")}

    def transform_response(self, reply: dict[str, Any]) -> Any:
        return {"n": reply.get("n")}

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        config = base_template_config(MongoCommandKind.COUNT, collection_name)
        set_value(config, COUNT_QUERY, '{"_id": {"$exists": true}}')

        raw_query = (
            "{\n"
            f'  "count": "{collection_name}",\n'
            '  "query": {\n'
            '    "_id": {\n'
            '      "$exists": true\n'
            "    }\n"
            "  }\n"
            "}\n"
        )
        set_value(config, BODY, raw_query)
        return [Template(title="Count", configuration=config)]
