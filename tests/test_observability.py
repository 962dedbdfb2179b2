"""Tests for blink.observability — event dataclasses and EventLog."""

from __future__ import annotations

import pytest

from blink.observability import (
    ClientConnected,
    ClientDisconnected,
    EventLog,
    ReloadTriggered,
    now_ns,
)


def _connected(total: int = 1, ts: int | None = None) -> ClientConnected:
    return ClientConnected(total=total, timestamp_ns=ts if ts is not None else now_ns())


def _disconnected(reason: str) -> ClientDisconnected:
    return ClientDisconnected(total=0, reason=reason, timestamp_ns=now_ns())  # type: ignore[arg-type]


def _reload(uid: str, changes: int = 1) -> ReloadTriggered:
    return ReloadTriggered(
        name=uid, uid=uid, kind="page", changes=changes,
        message="{}", timestamp_ns=now_ns(),
    )


class TestEvents:
    """Events are frozen."""

    def test_frozen(self) -> None:
        event = _connected()
        with pytest.raises(AttributeError):
            event.total = 5  # type: ignore[misc]

    def test_now_ns_monotonic(self) -> None:
        assert now_ns() <= now_ns()


class TestEventLog:
    """Bounded, queryable event store."""

    def test_append_and_len(self) -> None:
        log = EventLog()
        log.append(_connected())
        assert len(log) == 1

    def test_ring_buffer_discards_oldest(self) -> None:
        log = EventLog(max_events=3)
        for total in range(5):
            log.append(_connected(total))
        assert len(log) == 3
        assert [e.total for e in log.query()] == [4, 3, 2]

    def test_query_by_type_newest_first(self) -> None:
        log = EventLog()
        log.append(_connected(1))
        log.append(_disconnected("closed"))
        log.append(_connected(2))

        events = log.query(event_type=ClientConnected)
        assert [e.total for e in events] == [2, 1]

    def test_query_since_and_limit(self) -> None:
        log = EventLog()
        for ts in (10, 20, 30, 40):
            log.append(_connected(ts, ts=ts))

        assert [e.timestamp_ns for e in log.query(since_ns=25)] == [40, 30]
        assert len(log.query(limit=2)) == 2

    def test_query_by_disconnect_reason(self) -> None:
        log = EventLog()
        log.append(_disconnected("closed"))
        log.append(_disconnected("unresponsive"))
        log.append(_disconnected("closed"))

        dropped = log.query(event_type=ClientDisconnected, reason="unresponsive")
        assert len(dropped) == 1

    def test_query_by_resource_uid(self) -> None:
        log = EventLog()
        log.append(_reload("index.html", changes=2))
        log.append(_reload("about.html"))
        log.append(_connected())

        [event] = log.query(uid="index.html")
        assert event.changes == 2

    def test_field_filter_skips_events_without_it(self) -> None:
        log = EventLog()
        log.append(_connected())
        assert log.query(reason="closed") == []
