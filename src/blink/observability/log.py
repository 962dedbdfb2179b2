"""Bounded in-memory record of what the reload pipeline did.

The hub appends connect and disconnect events, the coordinator appends one
event per reload it sends, and the injector appends one per rewritten page.
Whoever holds the log reads them back with ``query``.

"""

import threading
from collections import deque

from blink.observability.events import BlinkEvent


class EventLog:
    """Ring buffer of pipeline events, newest kept.

    Appends come from the event loop and from anything the server runs in a
    thread pool, so access goes through a lock.

    Args:
        max_events: How many events to keep before the oldest fall off.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[BlinkEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: BlinkEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query(
        self,
        *,
        event_type: type | None = None,
        since_ns: int = 0,
        limit: int = 100,
        **fields: object,
    ) -> list[BlinkEvent]:
        """Matching events, newest first.

        Keyword arguments beyond the fixed ones compare event attributes by
        equality, e.g. ``query(event_type=ClientDisconnected, reason="unresponsive")``
        or ``query(event_type=ReloadTriggered, uid="index.html")``.  Events
        lacking the attribute never match.

        """
        missing = object()
        with self._lock:
            snapshot = list(self._events)

        matches: list[BlinkEvent] = []
        for event in reversed(snapshot):
            if len(matches) >= limit:
                break
            if event_type is not None and not isinstance(event, event_type):
                continue
            if event.timestamp_ns < since_ns:
                continue
            if any(getattr(event, name, missing) != value for name, value in fields.items()):
                continue
            matches.append(event)
        return matches

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
