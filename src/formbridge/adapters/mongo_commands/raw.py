"""RAW command: the `body` field already holds the whole command document."""

from __future__ import annotations

from typing import Any, Mapping

from formbridge.adapters.extended_json import parse_safely
from formbridge.adapters.mongo_commands.base import BODY, MongoCommand
from formbridge.core.domain.operations import MongoCommandKind
from formbridge.core.form_data import get_value


class Raw(MongoCommand):
    kind = MongoCommandKind.RAW
    json_fields = (BODY,)

    def __init__(self, form_data: Mapping[str, Any]) -> None:
        super().__init__(form_data)
        self.body: str | None = get_value(form_data, BODY)

    def validate(self) -> tuple[bool, list[str]]:
        if not self.body:
            return False, ["Body"]
        return True, []

    def render(self) -> dict[str, Any]:
        return parse_safely("Body", self.body or "")
