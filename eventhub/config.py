"""
Dispatcher configuration.

Defaults can be overridden per instance or loaded from the environment:

    EVENTHUB_SEPARATOR      namespace/event-name delimiter (default ".")
    EVENTHUB_HISTORY_SIZE   listener invocations kept in history (default 0, off)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from eventhub.events.errors import ErrorSink

DEFAULT_SEPARATOR = "."
WILDCARD = "*"


@dataclass
class DispatcherConfig:
    """
    Configuration for an EventDispatcher.

    Args:
        separator: Default separator for registrations that omit one
        history_size: Maximum history entries to retain (0 disables history)
        error_sink: Receives (event_name, error) for every failed listener;
            defaults to a structured error log on stderr
    """

    separator: str = DEFAULT_SEPARATOR
    history_size: int = 0
    error_sink: ErrorSink | None = None

    def __post_init__(self):
        if not self.separator:
            raise ValueError("separator must be a non-empty string")
        if self.history_size < 0:
            raise ValueError("history_size must be >= 0")

    @classmethod
    def from_env(cls) -> DispatcherConfig:
        """Build a config from EVENTHUB_* environment variables."""
        return cls(
            separator=os.environ.get("EVENTHUB_SEPARATOR", DEFAULT_SEPARATOR),
            history_size=int(os.environ.get("EVENTHUB_HISTORY_SIZE", "0")),
        )
