"""
Rate shaping for event listeners.

Provides two adapters that wrap a listener at registration time:
- Throttle: run at most once per delay window, dropping calls in between
- Debounce: run once after the calls stop for a delay, with the last args

Both adapters return coroutine functions and accept sync or async
listeners. State lives in the adapter, so it is shared by every emit
that reaches the same registration.

Example:
    from eventhub.ratelimit import throttle, debounce

    on_resize = debounce(redraw, 0.25)
    await on_resize("window.resize", 800, 600)   # redraw runs 250ms later

    on_tick = throttle(report_progress, 1.0)
    await on_tick("job.progress", 10)             # runs
    await on_tick("job.progress", 11)             # dropped
"""

from __future__ import annotations

import asyncio
import inspect
import time
from typing import Any, Callable

from eventhub.logging_config import get_logger

logger = get_logger(__name__)

# Receives the error and the arguments of the call that failed
ErrorCallback = Callable[[BaseException, tuple[Any, ...]], None]

# Receives the arguments of a deferred call that completed
SuccessCallback = Callable[[tuple[Any, ...]], None]


async def call_listener(fn: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async listener and await its result if needed."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Throttled:
    """
    Leading-edge throttle.

    The first call runs immediately; later calls run only once ``delay``
    seconds have passed since the last call that ran. Dropped calls are
    not queued and there is no trailing call.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        delay: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._fn = fn
        self._delay = delay
        self._clock = clock
        self._last_call: float | None = None
        self.dropped = 0

    def allow(self) -> bool:
        """Check the window and claim it if open."""
        now = self._clock()
        if self._last_call is None or now - self._last_call >= self._delay:
            self._last_call = now
            return True
        return False

    async def __call__(self, *args: Any) -> bool:
        """Run the listener if the window is open; return whether it ran."""
        if not self.allow():
            self.dropped += 1
            logger.debug("listener_throttled", delay=self._delay)
            return False
        await call_listener(self._fn, *args)
        return True


class Debounced:
    """
    Trailing-edge debounce.

    Every call cancels the pending timer and schedules a new one ``delay``
    seconds out. When a timer fires the listener runs once with the most
    recent arguments. The call itself returns False immediately, since
    nothing has run yet; ``on_success`` is told when a deferred run completes.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        delay: float,
        on_error: ErrorCallback | None = None,
        on_success: SuccessCallback | None = None,
    ):
        self._fn = fn
        self._delay = delay
        self._on_error = on_error
        self._on_success = on_success
        self._handle: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> bool:
        """Whether a call is scheduled and has not fired yet."""
        return self._handle is not None

    async def __call__(self, *args: Any) -> bool:
        loop = asyncio.get_running_loop()
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self._delay, self._fire, args)
        return False

    def cancel(self) -> None:
        """Drop the pending call, if any."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    async def wait(self) -> None:
        """Wait for calls that already fired and are still running."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def _fire(self, args: tuple[Any, ...]) -> None:
        self._handle = None
        task = asyncio.ensure_future(self._run(args))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, args: tuple[Any, ...]) -> None:
        try:
            await call_listener(self._fn, *args)
        except Exception as e:
            if self._on_error is None:
                logger.exception("debounced_listener_error", delay=self._delay)
            else:
                self._on_error(e, args)
        else:
            if self._on_success is not None:
                self._on_success(args)


def throttle(
    fn: Callable[..., Any],
    delay: float,
    clock: Callable[[], float] = time.monotonic,
) -> Throttled:
    """Wrap ``fn`` so it runs at most once per ``delay`` seconds."""
    return Throttled(fn, delay, clock=clock)


def debounce(
    fn: Callable[..., Any],
    delay: float,
    on_error: ErrorCallback | None = None,
    on_success: SuccessCallback | None = None,
) -> Debounced:
    """Wrap ``fn`` so it runs once after ``delay`` quiet seconds."""
    return Debounced(fn, delay, on_error=on_error, on_success=on_success)
