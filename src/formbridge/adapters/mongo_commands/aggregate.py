"""AGGREGATE command."""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_extended_json
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand, base_template_config, first_batch
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.errors import QuerySyntaxError
from formbridge.core.form_data import get_value, set_value

AGGREGATE_PIPELINES = "aggregate.arrayPipelines"
AGGREGATE_LIMIT = "aggregate.limit"

DEFAULT_BATCH_SIZE = 10


class Aggregate(MongoCommand):
    kind = MongoCommandKind.AGGREGATE
    json_fields = (AGGREGATE_PIPELINES,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.pipelines: str | None = get_value(form_data, AGGREGATE_PIPELINES)
        self.limit: int = get_value(form_data, AGGREGATE_LIMIT, int, DEFAULT_BATCH_SIZE)

    def _missing_required(self) -> list[str]:
        return [] if self.pipelines else ["Array of Pipelines"]

    def render(self) -> dict[str, Any]:
        parsed = parse_extended_json(self.pipelines or "", field="Array of Pipelines")
        # A single stage is accepted without the surrounding array.
        pipeline = [parsed] if isinstance(parsed, dict) else parsed
        if not isinstance(pipeline, list) or not all(isinstance(stage, dict) for stage in pipeline):
            raise QuerySyntaxError("Array of Pipelines", (self.pipelines or "")[:40], "expected an array of stages")
        return {
            "aggregate": self.collection,
            "pipeline": pipeline,
            "cursor": {"batchSize": self.limit},
        }

    def transform_response(self, reply: dict[str, Any]) -> Any:
        return first_batch(reply)

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        collection_name = hints.collection_name
        config = base_template_config(MongoCommandKind.AGGREGATE, collection_name)
        set_value(config, AGGREGATE_PIPELINES, '[ {"$sort" : {"_id": 1} } ]')
        set_value(config, AGGREGATE_LIMIT, "10")

        raw_query = (
            "{\n"
            f'  "aggregate": "{collection_name}",\n'
            '  "pipeline": [ {"$sort" : {"_id": 1} } ],\n'
            '  "cursor": { "batchSize": 10 }\n'
            "}\n"
        )
        set_value(config, BODY, raw_query)
        return [Template(title="Aggregate", configuration=config)]
