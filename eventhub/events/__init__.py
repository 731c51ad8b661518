"""
Event dispatch module.

Provides an in-process pub/sub dispatcher with namespaces, wildcards,
priorities, rate shaping and per-listener concurrency limits.
"""

from eventhub.events.bus import emit, get_event_bus, off, on, reset_event_bus
from eventhub.events.dispatcher import EventDispatcher
from eventhub.events.errors import (
    ErrorSink,
    EventHubError,
    InvalidListenerOptions,
    log_listener_error,
)
from eventhub.events.history import EventHistory
from eventhub.events.models import (
    EventFilter,
    EventInfo,
    HistoryEntry,
    Listener,
    ListenerDetails,
    ListenerOptions,
    ListenerRecord,
    Subscription,
)
from eventhub.events.parsing import insert_sorted, parse_event, resolve_separator
from eventhub.events.registry import ListenerRegistry

__all__ = [
    "ErrorSink",
    "EventDispatcher",
    "EventFilter",
    "EventHistory",
    "EventHubError",
    "EventInfo",
    "HistoryEntry",
    "InvalidListenerOptions",
    "Listener",
    "ListenerDetails",
    "ListenerOptions",
    "ListenerRecord",
    "ListenerRegistry",
    "Subscription",
    "emit",
    "get_event_bus",
    "insert_sorted",
    "log_listener_error",
    "off",
    "on",
    "parse_event",
    "reset_event_bus",
    "resolve_separator",
]
