"""Property-based tests for event string parsing and bucket ordering."""
from hypothesis import given, strategies as st

from eventhub.events.models import EventInfo, ListenerRecord
from eventhub.events.parsing import insert_sorted, parse_event

separators = st.sampled_from([".", ":", "/", "::", "----"])


@given(st.text(max_size=50), separators)
def test_parse_event_never_crashes(event, separator):
    namespace, event_name = parse_event(event, separator)
    assert isinstance(namespace, str)
    assert isinstance(event_name, str)


@given(st.text(max_size=50), separators)
def test_parse_event_event_name_has_no_separator(event, separator):
    _, event_name = parse_event(event, separator)
    assert separator not in event_name


@given(st.text(max_size=50), separators)
def test_parse_event_rejoins_to_original(event, separator):
    namespace, event_name = parse_event(event, separator)
    if separator in event:
        assert f"{namespace}{separator}{event_name}" == event
    else:
        assert (namespace, event_name) == ("", event)


@given(st.lists(st.integers(min_value=-5, max_value=5), max_size=30))
def test_insert_sorted_is_stable_descending(priorities):
    bucket = []
    for index, priority in enumerate(priorities):
        record = ListenerRecord(
            listener=print,
            callback=print,
            event_info=EventInfo(".", "e"),
            priority=priority,
            id=str(index),
        )
        insert_sorted(bucket, record)

    expected = sorted(range(len(priorities)), key=lambda i: -priorities[i])
    assert [int(record.id) for record in bucket] == expected
