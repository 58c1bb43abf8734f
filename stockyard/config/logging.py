"""
Structured logging for the stock ledger.

Ledger events carry enum members (tracking modes, unit statuses, transaction
types); they are flattened to their stored values before rendering so console
and JSON output match what is written to the database.
"""

import logging
import sys
from enum import Enum
from typing import Any

import structlog
from structlog.types import Processor

from stockyard.config.settings import get_settings

# Libraries that log every statement or retry at DEBUG
QUIET_LOGGERS = ("aiosqlite", "asyncio")


def flatten_enums(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace enum members in an event with their values."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def add_ledger_context(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Tag events with the app and the ledger database they belong to."""
    settings = get_settings()
    event_dict.setdefault("app", settings.app_name)
    event_dict.setdefault("db", settings.storage.db_path.name)
    if settings.environment != "development":
        event_dict.setdefault("environment", settings.environment)
    return event_dict


def build_processors(json_output: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        flatten_enums,
        add_ledger_context,
    ]
    if json_output:
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    return processors


def configure_logging(level: str | None = None, json_output: bool | None = None) -> None:
    """Configure structlog and the stdlib root logger.

    Both arguments fall back to settings: ``level`` to ``LOG_LEVEL`` and
    ``json_output`` to JSON everywhere except the development environment.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    if json_output is None:
        json_output = settings.environment != "development"

    structlog.configure(
        processors=build_processors(json_output),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Logs go to stderr so CLI reports on stdout stay clean
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level_name),
        force=True,
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
