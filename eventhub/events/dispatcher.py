"""
Async event dispatcher.

Provides:
- Namespaced event names with per-registration separators
- Wildcard subscriptions ("*", "ns.*", "*.name")
- Priority-ordered listeners within an event bucket
- Throttle and debounce rate shaping per listener
- Per-listener concurrency limits with FIFO queuing
- Dispatcher-wide event filters
- Opt-in bounded invocation history

Listener errors never propagate to the emitter; they are handed to the
configured error sink together with the event name.
"""

from __future__ import annotations

import asyncio
import dataclasses
from collections import deque
from typing import Any, Callable

from eventhub.config import WILDCARD, DispatcherConfig
from eventhub.events.errors import log_listener_error, report_error
from eventhub.events.history import EventHistory
from eventhub.events.models import (
    EventFilter,
    EventInfo,
    HistoryEntry,
    Listener,
    ListenerDetails,
    ListenerOptions,
    ListenerRecord,
    PendingInvocation,
    Subscription,
    new_listener_id,
)
from eventhub.events.parsing import parse_event, prioritized_value
from eventhub.events.registry import ListenerRegistry
from eventhub.logging_config import get_logger
from eventhub.ratelimit import Debounced, call_listener, debounce, throttle

logger = get_logger(__name__)


class EventDispatcher:
    """
    In-process publish/subscribe dispatcher.

    Example:
        dispatcher = EventDispatcher()

        async def on_created(event_name, user):
            ...

        listener_id = dispatcher.on("user.created", on_created, priority=5)
        await dispatcher.emit("user.created", {"id": 1})
        dispatcher.remove_subscription_by_id("user.created", listener_id)
    """

    def __init__(self, config: DispatcherConfig | None = None):
        """
        Initialize the dispatcher.

        Args:
            config: Dispatcher configuration (defaults to DispatcherConfig())
        """
        self._config = config or DispatcherConfig()
        self._separator = self._config.separator
        self._error_sink = self._config.error_sink or log_listener_error
        self._registry = ListenerRegistry()
        self._filters: list[EventFilter] = []
        self._in_flight: dict[str, int] = {}
        self._pending: dict[str, deque[PendingInvocation]] = {}
        self._history = EventHistory(self._config.history_size)

    @property
    def registry(self) -> ListenerRegistry:
        return self._registry

    # -------------------------------------------------------------------------
    # Separator
    # -------------------------------------------------------------------------

    def set_global_separator(self, separator: str) -> None:
        """Set the separator used by registrations that do not pass one."""
        if not separator:
            raise ValueError("separator must be a non-empty string")
        self._separator = separator

    def get_global_separator(self) -> str:
        return self._separator

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def on(
        self,
        event: str,
        listener: Listener,
        options: ListenerOptions | None = None,
        **kwargs: Any,
    ) -> str:
        """
        Register a listener.

        Args:
            event: Event name, optionally namespaced ("ns.name", "ns.*", "*")
            listener: Called as listener(event_name, *args); sync or async
            options: Registration options
            **kwargs: ListenerOptions fields, overriding ``options``

        Returns:
            The listener id, usable with remove_subscription_by_id()

        Raises:
            InvalidListenerOptions: If the options are inconsistent
        """
        if options is None:
            options = ListenerOptions(**kwargs)
        elif kwargs:
            options = dataclasses.replace(options, **kwargs)

        separator = prioritized_value(self._separator, options.separator)
        namespace, event_name = parse_event(event, separator)

        listener_id = new_listener_id()
        record = ListenerRecord(
            listener=listener,
            callback=self._shape(event, listener_id, listener, options),
            event_info=EventInfo(separator=separator, event=event),
            priority=options.priority,
            concurrency=options.concurrency,
            id=listener_id,
        )
        self._registry.add(namespace, event_name, record)

        if options.filter is not None:
            self._filters.append(options.filter)

        logger.debug(
            "listener_registered",
            topic=event,
            namespace=namespace,
            event_name=event_name,
            listener_id=record.id,
            priority=record.priority,
        )
        return record.id

    def listener(self, event: str, **kwargs: Any) -> Callable[[Listener], Listener]:
        """
        Decorator form of on().

        Usage:
            @dispatcher.listener("order.*", priority=10)
            async def audit(event_name, order):
                ...
        """

        def decorator(fn: Listener) -> Listener:
            self.on(event, fn, **kwargs)
            return fn

        return decorator

    def off(self, event: str, listener: Listener) -> None:
        """Remove a listener by identity. Unknown listeners are ignored."""
        self._discard(self._registry.remove(event, listener, self._separator))

    def remove_subscription_by_id(self, event: str, listener_id: str) -> None:
        """Remove a listener by the id returned from on()."""
        self._discard(self._registry.remove(event, listener_id, self._separator))

    def _discard(self, record: ListenerRecord | None) -> None:
        if record is not None and isinstance(record.callback, Debounced):
            record.callback.cancel()

    def _shape(
        self,
        event: str,
        listener_id: str,
        listener: Listener,
        options: ListenerOptions,
    ) -> Listener:
        if options.throttle is not None:
            return throttle(listener, options.throttle)
        if options.debounce is not None:

            def on_error(error: BaseException, args: tuple[Any, ...]) -> None:
                self._report(args[0] if args else event, error)

            def on_success(args: tuple[Any, ...]) -> None:
                if args:
                    self._history.record(args[0], listener_id, args[1:])

            return debounce(
                listener, options.debounce, on_error=on_error, on_success=on_success
            )
        return listener

    # -------------------------------------------------------------------------
    # Emission
    # -------------------------------------------------------------------------

    async def emit(self, event: str, *args: Any) -> None:
        """
        Emit an event to every matching listener.

        Waits until every matched listener has run, including invocations
        deferred by a concurrency limit. Never raises for listener errors.
        """
        separator = self._registry.resolve_separator(event, self._separator)
        namespace, event_name = parse_event(event, separator)

        if not self._should_emit(event_name, namespace):
            logger.debug("event_filtered", topic=event)
            return

        # catch-all, namespace wildcard, any-namespace name, exact
        groups = [("", WILDCARD)]
        if namespace:
            groups.append((namespace, WILDCARD))
        groups.append((WILDCARD, event_name))
        groups.append((namespace, event_name))

        records = [
            record
            for group in dict.fromkeys(groups)
            for record in self._registry.bucket(*group)
            if record.separator == separator
        ]

        logger.debug(
            "event_emitted",
            topic=event,
            separator=separator,
            listeners=len(records),
        )
        if records:
            await asyncio.gather(
                *(self._invoke(record, event_name, args) for record in records)
            )

    def _should_emit(self, event_name: str, namespace: str) -> bool:
        if not self._filters:
            return True
        for event_filter in list(self._filters):
            try:
                if event_filter(event_name, namespace):
                    return True
            except Exception as e:
                self._report(event_name, e)
        return False

    async def _invoke(
        self, record: ListenerRecord, event_name: str, args: tuple[Any, ...]
    ) -> None:
        in_flight = self._in_flight.get(record.id, 0)
        if record.accepts(in_flight):
            self._in_flight[record.id] = in_flight + 1
            await self._run(record, event_name, args)
            return

        waiter = asyncio.get_running_loop().create_future()
        queue = self._pending.setdefault(record.id, deque())
        queue.append(PendingInvocation(record, event_name, args, waiter))
        logger.debug(
            "listener_queued",
            event_name=event_name,
            listener_id=record.id,
            queued=len(queue),
        )
        await waiter

    async def _run(
        self, record: ListenerRecord, event_name: str, args: tuple[Any, ...]
    ) -> None:
        """Run an admitted invocation, then hand the slot to the next in line."""
        try:
            ran = await call_listener(record.callback, event_name, *args)
        except Exception as e:
            self._report(event_name, e)
        else:
            # shaped callbacks return whether the listener actually ran;
            # debounced runs are recorded when they fire
            if record.callback is record.listener or ran is True:
                self._history.record(event_name, record.id, args)
        finally:
            self._release(record.id)
            await self._drain(record.id)

    def _release(self, listener_id: str) -> None:
        remaining = self._in_flight.get(listener_id, 0) - 1
        if remaining > 0:
            self._in_flight[listener_id] = remaining
        else:
            self._in_flight.pop(listener_id, None)

    async def _drain(self, listener_id: str) -> None:
        queue = self._pending.get(listener_id)
        if not queue:
            return
        pending = queue.popleft()
        if not queue:
            del self._pending[listener_id]

        self._in_flight[listener_id] = self._in_flight.get(listener_id, 0) + 1
        try:
            await self._run(pending.record, pending.event_name, pending.args)
        finally:
            if not pending.waiter.done():
                pending.waiter.set_result(None)

    def _report(self, event_name: str, error: BaseException) -> None:
        report_error(self._error_sink, event_name, error)

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    def list_subscriptions(self) -> list[Subscription]:
        return self._registry.subscriptions()

    def inspect_subscription(self, event: str) -> list[ListenerDetails]:
        return self._registry.inspect(event, self._separator)

    def get_event_history(self, event: str | None = None) -> list[HistoryEntry]:
        """
        Get recorded invocations, oldest first.

        Args:
            event: Only entries for this event name (None for all)
        """
        return self._history.entries(event)

    def clear_event_history(self) -> None:
        self._history.clear()

    def stats(self) -> dict[str, Any]:
        """Get dispatcher statistics."""
        return {
            "namespaces": len(self._registry.namespaces()),
            "subscriptions": len(self._registry.subscriptions()),
            "listeners": len(self._registry),
            "filters": len(self._filters),
            "in_flight": sum(self._in_flight.values()),
            "queued": sum(len(queue) for queue in self._pending.values()),
            "history_size": len(self._history),
        }

    async def aclose(self) -> None:
        """Cancel pending debounced calls and wait for ones already running."""
        debounced = [
            record.callback
            for record in self._registry.records()
            if isinstance(record.callback, Debounced)
        ]
        for callback in debounced:
            callback.cancel()
        await asyncio.gather(*(callback.wait() for callback in debounced))
