"""
eventhub - in-process publish/subscribe dispatcher.

This package contains:
- Events (listener registry and async dispatch engine)
- Rate shaping (throttle and debounce adapters for listeners)
- Configuration and structured logging helpers
"""

from eventhub.config import DispatcherConfig
from eventhub.events import EventDispatcher, ListenerOptions, get_event_bus

__all__ = [
    "DispatcherConfig",
    "EventDispatcher",
    "ListenerOptions",
    "get_event_bus",
]

__version__ = "0.1.0"
