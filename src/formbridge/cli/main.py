"""Typer application.

Commands delegate to the executors in `core.services`; this module only reads
input files, builds collaborators and prints results.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console

from formbridge.adapters.http_client import HttpxTransport
from formbridge.cli import doctor
from formbridge.cli.ui_components import (
    build_bound_params_table,
    build_envelope_panel,
    build_operations_table,
    build_templates_panels,
    build_trigger_table,
    print_banner,
    to_json,
)
from formbridge.core.config import AppSettings
from formbridge.core.domain.models import OAuth2Credentials, Param
from formbridge.core.errors import FormBridgeError
from formbridge.core.logging_config import configure_logging
from formbridge.core.services.mongo_executor import render_command
from formbridge.core.services.sheets_executor import SheetsExecutor
from formbridge.core.services.strategy import registered_operations
from formbridge.core.services.templates import generate_collection_templates

app = typer.Typer(no_args_is_help=True, help="Translate form configurations into backend calls.")
sheets_app = typer.Typer(no_args_is_help=True, help="Spreadsheet REST operations.")
mongo_app = typer.Typer(no_args_is_help=True, help="Document-database commands.")
app.add_typer(sheets_app, name="sheets")
app.add_typer(mongo_app, name="mongo")
app.add_typer(doctor.app, name="doctor")

_console = Console()


def _load_config(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise typer.BadParameter(f"Cannot read configuration {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise typer.BadParameter(f"Configuration {path} must hold a JSON object")
    return data


def _parse_params(values: list[str] | None) -> list[Param]:
    params: list[Param] = []
    for raw in values or []:
        if "=" not in raw:
            raise typer.BadParameter(f"Expected key=value, got {raw!r}")
        key, value = raw.split("=", 1)
        params.append(Param(key=key, value=value))
    return params


def _credentials(settings: AppSettings) -> OAuth2Credentials:
    return OAuth2Credentials(access_token=settings.access_token)


def _fail(exc: FormBridgeError) -> None:
    _console.print(f"[red]{exc.code}:[/red] {exc.message}")
    raise typer.Exit(code=2)


@sheets_app.command("execute")
def sheets_execute(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON configuration map."),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Binding value as key=value."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result envelope."),
) -> None:
    """Run one spreadsheet operation against the live API."""

    settings = AppSettings()
    form_data = _load_config(config)
    params = _parse_params(param)

    async def _run():
        async with HttpxTransport(settings) as transport:
            executor = SheetsExecutor(transport, settings=settings)
            return await executor.execute(form_data, params, credentials=_credentials(settings))

    try:
        envelope = asyncio.run(_run())
    except FormBridgeError as exc:
        _fail(exc)
        return

    if as_json:
        typer.echo(to_json(envelope.model_dump(mode="json")))
    else:
        print_banner(_console)
        _console.print(build_envelope_panel(envelope))
        if envelope.request_params:
            _console.print(build_bound_params_table(envelope))
    if not envelope.is_execution_success:
        raise typer.Exit(code=1)


@sheets_app.command("lookup")
def sheets_lookup(
    trigger: str = typer.Argument(..., help="SPREADSHEET_SELECTOR, SHEET_SELECTOR or COLUMNS_SELECTOR."),
    config: Optional[Path] = typer.Argument(None, exists=True, dir_okay=False, help="JSON configuration map."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result envelope."),
) -> None:
    """List options for a builder widget."""

    settings = AppSettings()
    form_data = _load_config(config) if config else {}

    async def _run():
        async with HttpxTransport(settings) as transport:
            executor = SheetsExecutor(transport, settings=settings)
            return await executor.lookup(trigger, form_data, credentials=_credentials(settings))

    try:
        envelope = asyncio.run(_run())
    except FormBridgeError as exc:
        _fail(exc)
        return

    if as_json:
        typer.echo(to_json(envelope.model_dump(mode="json")))
    elif envelope.is_execution_success:
        _console.print(build_trigger_table(envelope))
    else:
        _console.print(f"[red]Lookup failed:[/red] {envelope.error}")
    if not envelope.is_execution_success:
        raise typer.Exit(code=1)


@mongo_app.command("render")
def mongo_render(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON configuration map."),
    param: Optional[list[str]] = typer.Option(None, "--param", "-p", help="Binding value as key=value."),
    as_json: bool = typer.Option(False, "--json", help="Print the raw result envelope."),
) -> None:
    """Print the command document a configuration translates to."""

    try:
        envelope = render_command(_load_config(config), _parse_params(param))
    except FormBridgeError as exc:
        _fail(exc)
        return

    if as_json:
        typer.echo(to_json(envelope.model_dump(mode="json")))
    else:
        _console.print(build_envelope_panel(envelope))
    if not envelope.is_execution_success:
        raise typer.Exit(code=1)


@mongo_app.command("templates")
def mongo_templates(
    collection: str = typer.Argument(..., help="Collection name."),
    sample: Optional[str] = typer.Option(None, "--sample", help="Sample document as JSON."),
    as_json: bool = typer.Option(False, "--json", help="Print templates as JSON."),
) -> None:
    """Generate example configurations for a collection."""

    sample_document = None
    if sample:
        try:
            sample_document = json.loads(sample)
        except ValueError as exc:
            raise typer.BadParameter(f"--sample is not valid JSON: {exc}") from exc
        if not isinstance(sample_document, dict):
            raise typer.BadParameter("--sample must be a JSON object")

    templates = generate_collection_templates(collection, sample_document)
    if as_json:
        typer.echo(to_json([template.model_dump() for template in templates]))
        return
    for panel in build_templates_panels(templates):
        _console.print(panel)


@app.command("operations")
def operations() -> None:
    """List every registered operation key."""

    _console.print(build_operations_table(registered_operations()))


def run() -> None:
    configure_logging()
    app()


if __name__ == "__main__":
    run()
