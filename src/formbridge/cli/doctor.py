"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.table import Table

from formbridge.adapters.http_client import HttpxTransport
from formbridge.core.config import AppSettings, write_user_env_vars
from formbridge.core.domain.models import OAuth2Credentials, WireRequest
from formbridge.core.errors import FormBridgeError
from formbridge.core.services.dispatch import extract_vendor_message, send_authorized

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


async def _check_api(settings: AppSettings) -> tuple[bool, str]:
    """List one spreadsheet to prove the token and the network both work."""

    request = WireRequest(method="GET", url=settings.drive_base_url, params={"pageSize": "1"})
    credentials = OAuth2Credentials(access_token=settings.access_token)
    try:
        async with HttpxTransport(settings) as transport:
            response = await send_authorized(transport, credentials, request)
    except FormBridgeError as exc:
        return False, exc.message
    if not response.is_success:
        return False, f"HTTP {response.status_code}: {extract_vendor_message(response)}"
    return True, f"HTTP {response.status_code}"


@app.command()
def run() -> None:
    """Show the effective settings and check API connectivity."""

    settings = AppSettings()

    table = Table(title="formbridge doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    table.add_row("Sheets API", "OK", settings.sheets_base_url)
    table.add_row("Drive API", "OK", settings.drive_base_url)
    table.add_row("Timeout", "OK", f"{settings.http_timeout_seconds}s")
    table.add_row("Response cap", "OK", f"{settings.max_response_bytes} bytes")

    if not settings.access_token:
        table.add_row("Access token", "MISSING", "Run `formbridge doctor setup-token`")
        _console.print(table)
        return
    table.add_row("Access token", "OK", "configured")

    ok, detail = asyncio.run(_check_api(settings))
    table.add_row("API connectivity", "OK" if ok else "FAIL", detail)
    _console.print(table)


@app.command(name="setup-token")
def setup_token() -> None:
    """Store an OAuth access token in the user config .env."""

    token = typer.prompt("Access token", hide_input=True, confirmation_prompt=False).strip()
    if not token:
        raise typer.BadParameter("access token is required")

    env_path = write_user_env_vars({"FORMBRIDGE_ACCESS_TOKEN": token})
    _console.print(f"[green]Saved access token to:[/green] {env_path}")
