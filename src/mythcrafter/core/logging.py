"""Structured logging configuration for MythCrafter.

structlog events are rendered through the standard library's handlers, so
the console and the optional log file receive the same structured lines,
and third-party stdlib logging is rendered the same way.

Example:
    >>> from mythcrafter.core.logging import configure_logging, get_logger
    >>> configure_logging()  # level, format and file from settings
    >>> logger = get_logger(__name__)
    >>> logger.info("Campaign created", campaign_id=7, user_id=1)
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

from mythcrafter.core.config import get_settings


if TYPE_CHECKING:
    from structlog.types import EventDict, WrappedLogger


REDACTED_KEYS = frozenset({"password_hash"})


def add_app_context(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Tag every log entry with the application name."""
    event_dict["app"] = "mythcrafter"
    return event_dict


def redact_credentials(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Mask credential hashes that end up in an event."""
    for key in REDACTED_KEYS & event_dict.keys():
        event_dict[key] = "***"
    return event_dict


def configure_logging(
    level: str | None = None,
    *,
    json_format: bool | None = None,
    log_file: str | Path | None = None,
) -> None:
    """Configure application-wide logging.

    Arguments left as None fall back to ``log_level``, ``log_json`` and
    ``log_file`` from the application settings. Calling this again replaces
    the previous handlers.

    Args:
        level: The logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: Render JSON lines instead of console output.
        log_file: Also write every line to this file.
    """
    settings = get_settings()
    level_name = (level or settings.log_level).upper()
    numeric_level = getattr(logging, level_name, logging.INFO)
    if json_format is None:
        json_format = settings.log_json
    if log_file is None:
        log_file = settings.log_file

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_app_context,
        redact_credentials,
    ]

    if json_format:
        renderers: list[Processor] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderers = [
            structlog.dev.ConsoleRenderer(
                colors=sys.stderr.isatty(),
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    root.setLevel(numeric_level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, typically with ``__name__``."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind key/value pairs onto every subsequent log entry in this context.

    Example:
        >>> bind_context(user_id=42)
        >>> logger.info("Character listed")  # Will include user_id
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


__all__ = [
    "REDACTED_KEYS",
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
