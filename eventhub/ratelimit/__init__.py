"""
Rate shaping module for event listeners.

Provides throttle (leading edge, drop the rest) and debounce
(trailing edge, last args win) adapters.
"""

from .shaping import (
    Debounced,
    Throttled,
    call_listener,
    debounce,
    throttle,
)

__all__ = [
    "Debounced",
    "Throttled",
    "call_listener",
    "debounce",
    "throttle",
]
