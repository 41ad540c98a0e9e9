import logging

from memo_core.events import ChangeEvent, ChangeKind, EntityKind, EventBus


def make_event():
    return ChangeEvent(kind=ChangeKind.UPDATED, entity=EntityKind.NOTE, ids=(1,))


def test_subscribers_run_in_order():
    bus = EventBus()
    calls = []
    bus.subscribe(lambda e: calls.append("first"))
    bus.subscribe(lambda e: calls.append("second"))
    bus.publish(make_event())
    assert calls == ["first", "second"]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    calls = []
    unsubscribe = bus.subscribe(calls.append)
    unsubscribe()
    unsubscribe()
    bus.publish(make_event())
    assert calls == []


def test_failing_subscriber_is_logged_and_skipped(caplog):
    bus = EventBus()
    calls = []

    def broken(event):
        raise ValueError("boom")

    bus.subscribe(broken)
    bus.subscribe(calls.append)
    with caplog.at_level(logging.ERROR, logger="memo_core.events"):
        bus.publish(make_event())

    assert calls == [make_event()]
    assert "Change subscriber failed" in caplog.text


def test_failing_subscriber_does_not_undo_the_mutation(store):
    store.bus.subscribe(lambda event: 1 / 0)
    note = store.create_note("kept")
    assert store.get_note(note.id).title == "kept"
