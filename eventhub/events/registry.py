"""
Listener registry.

Indexes listener records by namespace and event name. Each bucket is kept
in descending priority order, ties in registration order. Empty buckets and
empty namespaces are removed as soon as they empty out.
"""

from __future__ import annotations

from eventhub.events.models import (
    Listener,
    ListenerDetails,
    ListenerRecord,
    Subscription,
)
from eventhub.events.parsing import insert_sorted, parse_event, resolve_separator
from eventhub.logging_config import get_logger

logger = get_logger(__name__)


class ListenerRegistry:
    """Mapping of namespace -> event name -> prioritized listener records."""

    def __init__(self) -> None:
        self._namespaces: dict[str, dict[str, list[ListenerRecord]]] = {}

    def __len__(self) -> int:
        return sum(
            len(records)
            for buckets in self._namespaces.values()
            for records in buckets.values()
        )

    def namespaces(self) -> list[str]:
        return list(self._namespaces)

    def add(self, namespace: str, event_name: str, record: ListenerRecord) -> None:
        bucket = self._namespaces.setdefault(namespace, {}).setdefault(event_name, [])
        insert_sorted(bucket, record)

    def bucket(self, namespace: str, event_name: str) -> list[ListenerRecord]:
        """Snapshot of one bucket, empty when nothing is registered."""
        return list(self._namespaces.get(namespace, {}).get(event_name, ()))

    def resolve_separator(self, event: str, default: str) -> str:
        return resolve_separator(event, self._namespaces, default)

    def locate(self, event: str, default_separator: str) -> tuple[str, str]:
        """Resolve the separator for ``event`` and parse it."""
        return parse_event(event, self.resolve_separator(event, default_separator))

    def remove(
        self,
        event: str,
        listener_or_id: str | Listener,
        default_separator: str,
    ) -> ListenerRecord | None:
        """
        Remove the first record matching an id or a listener callable.

        Returns the removed record, or None when nothing matched.
        """
        namespace, event_name = self.locate(event, default_separator)
        buckets = self._namespaces.get(namespace)
        if not buckets or event_name not in buckets:
            return None

        records = buckets[event_name]
        for index, record in enumerate(records):
            if record.matches(listener_or_id):
                del records[index]
                break
        else:
            return None

        if not records:
            del buckets[event_name]
        if not buckets:
            del self._namespaces[namespace]

        logger.debug(
            "listener_removed",
            topic=event,
            listener_id=record.id,
            remaining=len(records),
        )
        return record

    def records(self) -> list[ListenerRecord]:
        """Every registered record."""
        return [
            record
            for buckets in self._namespaces.values()
            for records in buckets.values()
            for record in records
        ]

    def subscriptions(self) -> list[Subscription]:
        subscriptions: list[Subscription] = []
        for namespace, buckets in self._namespaces.items():
            for event_name, records in buckets.items():
                if namespace:
                    event = f"{namespace}{records[0].separator}{event_name}"
                else:
                    event = event_name
                subscriptions.append(Subscription(event, len(records)))
        return subscriptions

    def inspect(self, event: str, default_separator: str) -> list[ListenerDetails]:
        namespace, event_name = self.locate(event, default_separator)
        return [
            ListenerDetails(
                id=record.id,
                event_info=record.event_info,
                listener=record.listener,
                priority=record.priority,
                concurrency=record.concurrency,
            )
            for record in self.bucket(namespace, event_name)
        ]

    def clear(self) -> None:
        self._namespaces.clear()
