from __future__ import annotations

import threading
from datetime import datetime

import pytest

from cosirob.protocol.types import LogKind, ProtocolEvent
from cosirob.services.event_log import MAX_HISTORY, EventLog


@pytest.mark.unit
def test_history_is_capped_fifo(events: EventLog):
    for i in range(MAX_HISTORY + 1):
        events.append(LogKind.INFO, f"msg {i}")
    history = events.snapshot()
    assert len(history) == MAX_HISTORY
    assert history[0].message == "msg 1", "oldest entry must be evicted first"
    assert history[-1].message == f"msg {MAX_HISTORY}"


@pytest.mark.unit
def test_event_fields(events: EventLog):
    event = events.append("tx", "00 ho")
    assert event.kind is LogKind.TX
    assert event.message == "00 ho"
    assert event.timestamp.microsecond == 0
    assert len(event.time_str) == 8


@pytest.mark.unit
def test_snapshot_is_a_copy(events: EventLog):
    events.info("a")
    snap = events.snapshot()
    snap.clear()
    assert [e.message for e in events.snapshot()] == ["a"]


@pytest.mark.unit
def test_subscribers_notified_in_registration_order(events: EventLog):
    calls: list[tuple[str, str]] = []
    events.subscribe(lambda e: calls.append(("first", e.message)))
    events.subscribe(lambda e: calls.append(("second", e.message)))
    events.rx("pos 1 2 3")
    assert calls == [("first", "pos 1 2 3"), ("second", "pos 1 2 3")]


@pytest.mark.unit
def test_unsubscribe_is_isolated_and_idempotent(events: EventLog):
    a: list[ProtocolEvent] = []
    b: list[ProtocolEvent] = []
    unsub_a = events.subscribe(a.append)
    events.subscribe(b.append)

    events.info("one")
    unsub_a()
    unsub_a()
    events.info("two")

    assert [e.message for e in a] == ["one"]
    assert [e.message for e in b] == ["one", "two"]


@pytest.mark.unit
def test_same_callback_registered_twice(events: EventLog):
    seen: list[ProtocolEvent] = []
    unsub = events.subscribe(seen.append)
    events.subscribe(seen.append)
    events.info("x")
    assert len(seen) == 2
    unsub()
    events.info("y")
    assert [e.message for e in seen] == ["x", "x", "y"]


@pytest.mark.unit
def test_clear_leaves_single_announcement(events: EventLog):
    received: list[ProtocolEvent] = []
    events.tx("00 ho")
    events.rx("ok")
    events.subscribe(received.append)

    events.clear()

    history = events.snapshot()
    assert len(history) == 1
    assert history[0].kind is LogKind.INFO
    assert history[0].message == "Log cleared"
    assert received == history


@pytest.mark.unit
def test_failing_subscriber_does_not_block_others(events: EventLog):
    seen: list[str] = []

    def broken(_: ProtocolEvent) -> None:
        raise RuntimeError("panel gone")

    events.subscribe(broken)
    events.subscribe(lambda e: seen.append(e.message))
    events.error("Send failed: port busy")
    assert seen == ["Send failed: port busy"]
    assert len(events) == 1


@pytest.mark.unit
def test_injected_clock():
    stamp = datetime(2024, 1, 2, 3, 4, 5)
    log = EventLog(clock=lambda: stamp)
    assert log.info("hello").time_str == "03:04:05"


@pytest.mark.unit
def test_concurrent_appends_keep_per_subscriber_order(events: EventLog):
    seen: list[ProtocolEvent] = []
    events.subscribe(seen.append)

    def worker(tag: str) -> None:
        for i in range(200):
            events.info(f"{tag}-{i}")

    threads = [threading.Thread(target=worker, args=(t,)) for t in "abcd"]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert seen == events.snapshot()
    assert len(seen) == 800
