"""
Process-wide dispatcher and convenience functions.

The shared instance is created lazily from DispatcherConfig.from_env().
Code that needs isolation should construct its own EventDispatcher.
"""

from __future__ import annotations

from typing import Any

from eventhub.config import DispatcherConfig
from eventhub.events.dispatcher import EventDispatcher
from eventhub.events.models import Listener

# =============================================================================
# Global Instance
# =============================================================================

_event_bus: EventDispatcher | None = None


def get_event_bus() -> EventDispatcher:
    """Get or create the global dispatcher instance."""
    global _event_bus
    if _event_bus is None:
        _event_bus = EventDispatcher(DispatcherConfig.from_env())
    return _event_bus


def reset_event_bus() -> None:
    """Drop the global dispatcher; the next call creates a fresh one."""
    global _event_bus
    _event_bus = None


# =============================================================================
# Convenience Functions
# =============================================================================


def on(event: str, listener: Listener | None = None, **options: Any):
    """
    Register on the global dispatcher (can be used as decorator).

    Usage:
        @on("model.downloaded")
        def handle_download(event_name, model):
            ...

        # Or:
        on("model.*", handler, priority=10)
    """
    bus = get_event_bus()

    if listener is not None:
        return bus.on(event, listener, **options)

    return bus.listener(event, **options)


def off(event: str, listener: Listener) -> None:
    """Remove a listener from the global dispatcher."""
    get_event_bus().off(event, listener)


async def emit(event: str, *args: Any) -> None:
    """Emit an event on the global dispatcher."""
    await get_event_bus().emit(event, *args)
