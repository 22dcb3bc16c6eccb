"""Contract of document-database commands."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from formbridge.core.domain.models import Template, TemplateHints


@runtime_checkable
class DocumentCommand(Protocol):
    """A command decoded once from the configuration map.

    `validate` returns `(ok, missing_field_labels)`; `render` returns the
    canonical command document and raises `QuerySyntaxError` on bad JSON.
    """

    def validate(self) -> tuple[bool, list[str]]: ...

    def render(self) -> dict[str, Any]: ...

    def transform_response(self, reply: dict[str, Any]) -> Any: ...

    @classmethod
    def generate_template(cls, hints: TemplateHints) -> list[Template]: ...
