from eventhub.events.models import EventInfo, ListenerRecord
from eventhub.events.registry import ListenerRegistry


def _listener(event_name, *args):
    pass


def _other(event_name, *args):
    pass


def _add(registry, event, listener=_listener, separator=".", priority=0):
    namespace, _, event_name = event.rpartition(separator)
    record = ListenerRecord(
        listener=listener,
        callback=listener,
        event_info=EventInfo(separator, event),
        priority=priority,
    )
    registry.add(namespace, event_name, record)
    return record


def test_add_and_bucket_snapshot():
    registry = ListenerRegistry()
    record = _add(registry, "ns.evt")

    bucket = registry.bucket("ns", "evt")
    assert bucket == [record]
    bucket.clear()
    assert registry.bucket("ns", "evt") == [record]
    assert registry.bucket("ns", "missing") == []
    assert len(registry) == 1


def test_remove_by_identity_prunes_empty_containers():
    registry = ListenerRegistry()
    _add(registry, "ns.evt")

    removed = registry.remove("ns.evt", _listener, ".")

    assert removed is not None
    assert registry.namespaces() == []
    assert len(registry) == 0


def test_remove_keeps_namespace_while_other_buckets_remain():
    registry = ListenerRegistry()
    _add(registry, "ns.a")
    _add(registry, "ns.b")

    registry.remove("ns.a", _listener, ".")

    assert registry.namespaces() == ["ns"]
    assert registry.bucket("ns", "a") == []
    assert len(registry.bucket("ns", "b")) == 1


def test_remove_by_id_only_removes_that_record():
    registry = ListenerRegistry()
    first = _add(registry, "evt")
    second = _add(registry, "evt")

    registry.remove("evt", second.id, ".")

    assert registry.bucket("", "evt") == [first]


def test_remove_unknown_is_noop():
    registry = ListenerRegistry()
    _add(registry, "evt")

    assert registry.remove("evt", _other, ".") is None
    assert registry.remove("missing", _listener, ".") is None
    assert registry.remove("evt", "no-such-id", ".") is None
    assert len(registry) == 1


def test_remove_uses_registered_separator():
    registry = ListenerRegistry()
    _add(registry, "ns:evt", separator=":")

    registry.remove("ns:evt", _listener, ".")

    assert len(registry) == 0


def test_subscriptions_and_inspect():
    registry = ListenerRegistry()
    low = _add(registry, "ns.evt", priority=0)
    high = _add(registry, "ns.evt", listener=_other, priority=3)
    _add(registry, "plain")

    subscriptions = {s.event: s.listener_count for s in registry.subscriptions()}
    assert subscriptions == {"ns.evt": 2, "plain": 1}

    details = registry.inspect("ns.evt", ".")
    assert [d.id for d in details] == [high.id, low.id]
    assert details[0].listener is _other
    assert details[0].event_info == EventInfo(".", "ns.evt")
    assert details[0].to_dict()["priority"] == 3


def test_clear():
    registry = ListenerRegistry()
    _add(registry, "a")
    _add(registry, "ns.b")
    registry.clear()
    assert registry.records() == []


def test_remove_bound_method_fetched_again():
    class Handler:
        def handle(self, event_name):
            pass

    handler = Handler()
    registry = ListenerRegistry()
    _add(registry, "evt", listener=handler.handle)

    assert registry.remove("evt", handler.handle, ".") is not None
    assert len(registry) == 0
