"""
Bounded history of successful listener invocations.
"""

from __future__ import annotations

from collections import deque
from typing import Any

from eventhub.events.models import HistoryEntry


class EventHistory:
    """
    Keeps the most recent ``max_entries`` invocations.

    A size of 0 disables recording entirely.
    """

    def __init__(self, max_entries: int = 0):
        if max_entries < 0:
            raise ValueError("max_entries must be >= 0")
        self._max_entries = max_entries
        self._entries: deque[HistoryEntry] = deque(maxlen=max_entries or None)

    @property
    def enabled(self) -> bool:
        return self._max_entries > 0

    def __len__(self) -> int:
        return len(self._entries)

    def record(self, event: str, listener_id: str, args: tuple[Any, ...]) -> None:
        if self.enabled:
            self._entries.append(HistoryEntry(event, listener_id, args))

    def entries(self, event: str | None = None) -> list[HistoryEntry]:
        """Entries in recording order, optionally only for one event name."""
        if event:
            return [entry for entry in self._entries if entry.event == event]
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
