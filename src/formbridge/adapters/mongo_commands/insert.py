"""INSERT command: a single document (insert-one) or an array (insert-many)."""

from __future__ import annotations

import json
from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_extended_json
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand, base_template_config
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.errors import QuerySyntaxError
from formbridge.core.form_data import get_value, set_value

INSERT_DOCUMENTS = "insert.documents"


class Insert(MongoCommand):
    kind = MongoCommandKind.INSERT
    json_fields = (INSERT_DOCUMENTS,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.documents: str | None = get_value(form_data, INSERT_DOCUMENTS)

    def _missing_required(self) -> list[str]:
        return [] if self.documents else ["Documents"]

    def render(self) -> dict[str, Any]:
        parsed = parse_extended_json(self.documents or "", field="Documents")
        documents = [parsed] if isinstance(parsed, dict) else parsed
        if not isinstance(documents, list) or not all(isinstance(d, dict) for d in documents):
            raise QuerySyntaxError("Documents", (self.documents or "")[:40], "expected a document or an array of documents")
        return {"insert": self.collection, "documents": documents}

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        sample = {key: _example_value(value) for key, value in (hints.sample_document or {}).items() if key != "_id"}
        if not sample:
            sample = {"field": "value"}

        documents = json.dumps([sample], indent=2)
        config = base_template_config(MongoCommandKind.INSERT, collection_name)
        set_value(config, INSERT_DOCUMENTS, documents)

        raw_query = json.dumps({"insert": collection_name, "documents": [sample]}, indent=2) + "\n"
        set_value(config, BODY, raw_query)
        return [Template(title="Insert", configuration=config)]


def _example_value(value: Any) -> Any:
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return 1
    if isinstance(value, str):
        return "new value"
    if isinstance(value, list):
        return []
    if isinstance(value, dict):
        return {}
    return None
