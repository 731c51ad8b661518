"""
Data model for listener registrations.

Attributes use seconds for all delays, matching asyncio.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from eventhub.events.errors import InvalidListenerOptions

# Listener: called with (event_name, *args); may be sync or async
Listener = Callable[..., Any] | Callable[..., Awaitable[Any]]

# Event filter: (event_name, namespace) -> bool
EventFilter = Callable[[str, str], bool]


def new_listener_id() -> str:
    """Return a process-unique listener id."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class EventInfo:
    """The separator and raw event string a listener was registered under."""

    separator: str
    event: str

    def to_dict(self) -> dict[str, str]:
        return {"separator": self.separator, "event": self.event}


@dataclass
class ListenerOptions:
    """
    Options for a listener registration.

    Args:
        filter: Event filter added to the dispatcher-wide filter list
        throttle: Run at most once per this many seconds, dropping the rest
        debounce: Run once after this many quiet seconds, with the last args
        priority: Higher values run earlier within the same event bucket
        concurrency: Maximum in-flight invocations (None means unlimited)
        separator: Separator for parsing the event (None uses the global one)
    """

    filter: EventFilter | None = None
    throttle: float | None = None
    debounce: float | None = None
    priority: int = 0
    concurrency: int | None = None
    separator: str | None = None

    def __post_init__(self):
        if self.throttle is not None and self.debounce is not None:
            raise InvalidListenerOptions(
                "throttle and debounce are mutually exclusive", option="throttle"
            )
        if self.throttle is not None and self.throttle < 0:
            raise InvalidListenerOptions("throttle must be >= 0", option="throttle")
        if self.debounce is not None and self.debounce < 0:
            raise InvalidListenerOptions("debounce must be >= 0", option="debounce")
        if self.concurrency is not None and self.concurrency < 1:
            raise InvalidListenerOptions(
                "concurrency must be >= 1", option="concurrency"
            )


@dataclass
class ListenerRecord:
    """
    One registered subscription.

    ``listener`` is the callable the caller registered; ``callback`` is what
    the dispatcher actually invokes (the throttle/debounce wrapper, or the
    listener itself when no rate shaping was requested).
    """

    listener: Listener
    callback: Listener
    event_info: EventInfo
    priority: int = 0
    concurrency: int | None = None
    id: str = field(default_factory=new_listener_id)

    @property
    def separator(self) -> str:
        return self.event_info.separator

    def matches(self, listener_or_id: str | Listener) -> bool:
        """Whether this record is identified by an id or a callable."""
        if isinstance(listener_or_id, str):
            return self.id == listener_or_id
        # == so that bound methods fetched twice still match
        return self.listener == listener_or_id or self.callback is listener_or_id

    def accepts(self, in_flight: int) -> bool:
        """Whether another invocation fits under the concurrency cap."""
        return self.concurrency is None or in_flight < self.concurrency


@dataclass
class PendingInvocation:
    """An invocation deferred because its listener was at its concurrency cap."""

    record: ListenerRecord
    event_name: str
    args: tuple[Any, ...]
    waiter: asyncio.Future


@dataclass
class Subscription:
    """Summary of one (namespace, event name) bucket."""

    event: str
    listener_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"event": self.event, "listener_count": self.listener_count}


@dataclass
class ListenerDetails:
    """Introspection view of a registered listener."""

    id: str
    event_info: EventInfo
    listener: Listener
    priority: int
    concurrency: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_info": self.event_info.to_dict(),
            "listener": getattr(self.listener, "__qualname__", repr(self.listener)),
            "priority": self.priority,
            "concurrency": self.concurrency,
        }


@dataclass
class HistoryEntry:
    """A successful listener invocation."""

    event: str
    listener_id: str
    args: tuple[Any, ...] = ()
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "listener_id": self.listener_id,
            "timestamp": self.timestamp,
            "args": list(self.args),
        }
