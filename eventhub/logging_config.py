"""Structured logging for eventhub.

Package loggers are structlog wrappers around the stdlib ``eventhub.*``
loggers with their own processor chain, so importing eventhub never touches
the host's structlog configuration. Without any setup, errors reach stderr
through stdlib's last-resort handler; configure_logging() attaches a
handler to the ``eventhub`` logger and picks console or JSON rendering.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

PACKAGE_LOGGER = "eventhub"

_console = structlog.dev.ConsoleRenderer(colors=False)
_renderers: list[structlog.types.Processor] = [_console]
_handler: logging.Handler | None = None


def _render(logger: Any, method_name: str, event_dict: Any) -> Any:
    for renderer in _renderers:
        event_dict = renderer(logger, method_name, event_dict)
    return event_dict


_PROCESSORS: list[structlog.types.Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    _render,
]


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: Path | None = None,
    colors: bool = True,
) -> None:
    """Send eventhub's own log records to a dedicated handler.

    Only the ``eventhub`` stdlib logger is changed; the root logger and the
    global structlog configuration stay as the host left them.

    Args:
        level: Log level for eventhub loggers (DEBUG shows every
            registration, removal and emit)
        json_output: Render records as JSON lines
        log_file: Append to this file instead of stderr
        colors: Colorize console output
    """
    global _handler

    reset_logging()
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        _handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("%(message)s"))

    if json_output:
        _renderers[:] = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        _renderers[:] = [structlog.dev.ConsoleRenderer(colors=colors)]

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.addHandler(_handler)
    package_logger.setLevel(getattr(logging, level.upper()))
    package_logger.propagate = False


def reset_logging() -> None:
    """Undo configure_logging(): records propagate to the host again."""
    global _handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
        _handler.close()
        _handler = None
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
    _renderers[:] = [_console]


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )
