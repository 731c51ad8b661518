"""
Event string helpers shared by the registry and the dispatcher.
"""

from __future__ import annotations

from typing import Mapping, Sequence

from eventhub.config import WILDCARD
from eventhub.events.models import ListenerRecord

# namespace -> event name -> listeners, descending priority
Namespaces = Mapping[str, Mapping[str, Sequence[ListenerRecord]]]


def parse_event(event: str, separator: str) -> tuple[str, str]:
    """
    Split an event string into (namespace, event_name).

    The final separator-delimited segment is the event name and everything
    before it is the namespace. Without a separator the namespace is "".

    Examples:
        parse_event("user.created", ".")        -> ("user", "created")
        parse_event("app.user.created", ".")    -> ("app.user", "created")
        parse_event("created", ".")             -> ("", "created")
        parse_event("ns----evt", "----")        -> ("ns", "evt")
    """
    if not separator or separator not in event:
        return "", event
    namespace, _, event_name = event.rpartition(separator)
    return namespace, event_name


def prioritized_value(default: str, value: str | None) -> str:
    """Return ``value`` unless it is None or empty, else ``default``."""
    if value:
        return value
    return default


def insert_sorted(bucket: list[ListenerRecord], record: ListenerRecord) -> None:
    """Insert before the first entry of strictly lower priority."""
    for index, existing in enumerate(bucket):
        if record.priority > existing.priority:
            bucket.insert(index, record)
            return
    bucket.append(record)


def _find_separator(
    event: str, namespace: str, event_name: str, records: Sequence[ListenerRecord]
) -> str | None:
    if event_name == WILDCARD:
        for record in records:
            if event.startswith(f"{namespace}{record.separator}"):
                return record.separator
        return None

    for record in records:
        if record.event_info.event == event:
            return record.separator

    if namespace == WILDCARD:
        for record in records:
            if event.endswith(f"{record.separator}{event_name}"):
                return record.separator
    return None


def resolve_separator(event: str, namespaces: Namespaces, default: str) -> str:
    """
    Find the separator an event string should be parsed with.

    Searches registered listeners for one whose registration describes
    ``event``: a namespace wildcard bucket whose namespace prefixes it, an
    exact registration of the same string, or a cross-namespace
    registration (``*<sep>name``) it ends with. The catch-all ``*`` bucket
    matches every event, so it is consulted last, before ``default``.
    """
    for namespace, buckets in namespaces.items():
        for event_name, records in buckets.items():
            if not namespace and event_name == WILDCARD:
                continue
            separator = _find_separator(event, namespace, event_name, records)
            if separator:
                return separator

    catch_all = namespaces.get("", {}).get(WILDCARD)
    if catch_all:
        return catch_all[0].separator
    return default
