"""FIND command."""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_safely
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand, base_template_config, first_batch
from formbridge.core.domain.models import Template, TemplateHints
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.errors import ConfigurationTypeError
from formbridge.core.form_data import get_value, set_value

FIND_QUERY = "find.query"
FIND_SORT = "find.sort"
FIND_PROJECTION = "find.projection"
FIND_LIMIT = "find.limit"
FIND_SKIP = "find.skip"

DEFAULT_LIMIT = 10
MATCH_ALL = "{}"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class Find(MongoCommand):
    kind = MongoCommandKind.FIND
    json_fields = (FIND_QUERY, FIND_SORT, FIND_PROJECTION)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.query: str | None = get_value(form_data, FIND_QUERY)
        self.sort: str | None = get_value(form_data, FIND_SORT)
        self.projection: str | None = get_value(form_data, FIND_PROJECTION)
        self.limit: int | None = get_value(form_data, FIND_LIMIT, int)
        self.skip: int | None = get_value(form_data, FIND_SKIP, int)

        if self.skip is not None and not _INT64_MIN <= self.skip <= _INT64_MAX:
            raise ConfigurationTypeError(FIND_SKIP, "64-bit integer", str(self.skip))

        if self.query is None:
            self.defaulted_fields.append("Query")
        if self.limit is None:
            self.defaulted_fields.append("Limit")

    def render(self) -> dict[str, Any]:
        document: dict[str, Any] = {"find": self.collection}
        document["filter"] = parse_safely("Query", self.query or MATCH_ALL)

        if self.sort:
            document["sort"] = parse_safely("Sort", self.sort)
        if self.projection:
            document["projection"] = parse_safely("Projection", self.projection)

        limit = self.limit if self.limit is not None else DEFAULT_LIMIT
        document["limit"] = limit
        document["batchSize"] = limit

        if self.skip is not None:
            document["skip"] = self.skip
        return document

    def transform_response(self, reply: dict[str, Any]) -> Any:
        return first_batch(reply)

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]:
        return [
            _find_template(hints.collection_name, hints.filter_field_name, hints.filter_field_value),
            _find_by_id_template(hints.collection_name),
        ]


def _find_template(collection_name: str, field_name: str | None, field_value: str | None) -> Template:
    config = base_template_config(MongoCommandKind.FIND, collection_name)
    set_value(config, FIND_SORT, '{"_id": 1}')
    set_value(config, FIND_LIMIT, "10")

    query = MATCH_ALL if field_name is None else '{ "' + field_name + '": "' + str(field_value) + '"}'
    set_value(config, FIND_QUERY, query)

    filter_block = ""
    if field_name is not None:
        filter_block = (
            '  "filter": {\n'
            f'    "{field_name}": "{field_value}"\n'
            "  },\n"
        )
    raw_query = (
        "{\n"
        f'  "find": "{collection_name}",\n'
        f"{filter_block}"
        '  "sort": {\n'
        '    "_id": 1\n'
        "  },\n"
        '  "limit": 10\n'
        "}\n"
    )
    set_value(config, BODY, raw_query)
    return Template(title="Find", configuration=config)


def _find_by_id_template(collection_name: str) -> Template:
    config = base_template_config(MongoCommandKind.FIND, collection_name)
    set_value(config, FIND_QUERY, '{"_id": ObjectId("id_to_query_with")}')

    raw_query = (
        "{\n"
        f'  "find": "{collection_name}",\n'
        '  "filter": {\n'
        '    "_id": ObjectId("id_to_query_with")\n'
        "  }\n"
        "}\n"
    )
    set_value(config, BODY, raw_query)
    return Template(title="Find by ID", configuration=config)
