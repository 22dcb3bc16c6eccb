"""Application settings.

Notes:
- Environment variables use the `FORMBRIDGE_` prefix (pydantic-settings).
- Settings are passed explicitly to adapters and executors; nothing here is
  read as a module-level global.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal, Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependency)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "formbridge"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "formbridge"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "formbridge"
    return Path.home() / ".config" / "formbridge"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def read_env_file(path: Path) -> dict[str, str]:
    """KEY=VALUE pairs of a dotenv file; comments and malformed lines are skipped."""

    if not path.exists():
        return {}
    entries: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if sep and key.strip():
            entries[key.strip()] = value.strip().strip("\"'")
    return entries


def write_user_env_vars(values: Mapping[str, str | None]) -> Path:
    """Merge `values` into the user's .env; None leaves an existing entry untouched."""

    env_path = get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    entries = read_env_file(env_path)
    entries.update({key: value for key, value in values.items() if value is not None})

    body = "".join(f"{key}={entries[key]}\n" for key in sorted(entries))
    env_path.write_text("# formbridge user settings\n" + body, encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FORMBRIDGE_",
        extra="ignore",
        case_sensitive=False,
        # Project .env first, then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout per outbound request (seconds).",
    )
    max_response_bytes: int = Field(
        default=10 * 1024 * 1024,
        gt=0,
        description="Maximum response body kept in memory; larger bodies fail.",
    )
    user_agent: str = Field(
        default="formbridge/0.1",
        min_length=1,
        description="User-Agent for outbound requests.",
    )

    sheets_base_url: str = Field(
        default="https://sheets.googleapis.com/v4/spreadsheets",
        min_length=8,
        description="Base URL of the spreadsheets REST API.",
    )
    drive_base_url: str = Field(
        default="https://www.googleapis.com/drive/v3/files",
        min_length=8,
        description="Base URL of the file-listing REST API.",
    )

    access_token: str | None = Field(
        default=None,
        description="OAuth bearer token used by the CLI (the library never reads it implicitly).",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum log level.",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer: human console output or JSON lines.",
    )
