"""Structured logging setup (structlog).

Usage:
    from formbridge.core.logging_config import configure_logging
    configure_logging()

    # Or with explicit settings
    configure_logging(level="DEBUG", format="json")

Level and format default to `AppSettings.log_level` / `AppSettings.log_format`.
"""

from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from formbridge.core.config import AppSettings

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
    settings: AppSettings | None = None,
) -> None:
    """
    Configure structlog and stdlib logging once per process.

    Subsequent calls are no-ops unless force=True.

    Args:
        level: Log level (overrides FORMBRIDGE_LOG_LEVEL)
        format: Output format (overrides FORMBRIDGE_LOG_FORMAT)
        force: Reconfigure even if already configured
        settings: Settings to read defaults from
    """
    global _configured

    if _configured and not force:
        return

    settings = settings or AppSettings()
    log_level = (level or settings.log_level).upper()
    log_format = (format or settings.log_format).lower()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )
    logging.getLogger("formbridge").setLevel(getattr(logging, log_level))
    # httpx logs every request URL at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)

    _configured = True
