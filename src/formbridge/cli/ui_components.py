"""Rich UI components for the CLI.

Kept apart from the commands so tables and panels can be reused and the
command modules stay free of presentation details.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from formbridge.core.domain.models import ResultEnvelope, Template, TriggerResultEnvelope


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped in --json mode)."""

    title = Text("formbridge", style="bold cyan")
    subtitle = Text("Form configuration -> spreadsheet calls and database commands", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def to_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def build_envelope_panel(envelope: ResultEnvelope) -> Panel:
    ok = envelope.is_execution_success
    status = "OK" if ok else f"FAILED ({envelope.error_code})"
    subtitle = f"status {envelope.status_code}" if envelope.status_code is not None else None
    return Panel(
        Syntax(to_json(envelope.body), "json", word_wrap=True),
        title=Text(status, style="bold green" if ok else "bold red"),
        subtitle=subtitle,
        border_style="green" if ok else "red",
    )


def build_bound_params_table(envelope: ResultEnvelope) -> Table:
    table = Table(title="Bound parameters")
    table.add_column("Binding", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    table.add_column("Type", style="magenta")
    for param in envelope.request_params:
        table.add_row(param.binding, str(param.value), param.data_type.value)
    return table


def build_trigger_table(envelope: TriggerResultEnvelope) -> Table:
    table = Table(title="Options")
    table.add_column("Label", style="cyan")
    table.add_column("Value", style="white")
    for option in envelope.trigger or []:
        table.add_row(str(option.get("label")), str(option.get("value")))
    return table


def build_operations_table(operations: dict[str, list[str]]) -> Table:
    table = Table(title="Registered operations")
    table.add_column("Family", style="bright_green", no_wrap=True)
    table.add_column("Key", style="white")
    for family, keys in operations.items():
        for key in keys:
            table.add_row(family, key)
    return table


def build_templates_panels(templates: Iterable[Template]) -> list[Panel]:
    return [
        Panel(Syntax(to_json(template.configuration), "json", word_wrap=True), title=template.title, border_style="cyan")
        for template in templates
    ]
