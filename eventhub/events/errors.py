"""
Exceptions and the listener error channel.

Listener failures never reach the emitter; they are handed to an error
sink together with the event name. The default sink writes a structured
error record (with traceback) through structlog.
"""

from __future__ import annotations

from typing import Callable

from eventhub.logging_config import get_logger

logger = get_logger(__name__)

ErrorSink = Callable[[str, BaseException], None]


class EventHubError(Exception):
    """Base class for eventhub errors."""


class InvalidListenerOptions(EventHubError, ValueError):
    """Raised when a registration is given inconsistent options."""

    def __init__(self, message: str, option: str | None = None):
        self.option = option
        self.message = message
        super().__init__(message)


def log_listener_error(event_name: str, error: BaseException) -> None:
    """Default error sink: log the failure with its traceback."""
    logger.error(
        "listener_failed",
        event_name=event_name,
        error_type=type(error).__name__,
        error=str(error),
        exc_info=(type(error), error, error.__traceback__),
    )


def report_error(sink: ErrorSink, event_name: str, error: BaseException) -> None:
    """Forward an error to a sink, containing failures of the sink itself."""
    try:
        sink(event_name, error)
    except Exception:
        logger.exception("error_sink_failed", event_name=event_name)
