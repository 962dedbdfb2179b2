"""Reload coordinator — turns bursts of resource changes into one reload.

A save in an editor, a ``git checkout`` or a formatter run can produce dozens
of change events in a few milliseconds.  Browsers only need to reload once,
after things settle, and they only care about the latest state.

State machine:
    Idle     -- event -->  Pending (last = event, count = 1, window starts)
    Pending  -- event -->  Pending (last = event, count += 1, window restarts)
    Pending  -- quiet -->  Idle    (one broadcast built from ``last``)

A steady trickle of events closer together than the window postpones the
reload indefinitely; the broadcast rate is bounded by "at least one quiet
window of silence".
"""

from __future__ import annotations

import asyncio
import json
import sys
from typing import TYPE_CHECKING, Protocol

from blink._errors import ReloadError
from blink.livereload._wait import Wake, next_or_stop
from blink.observability.events import ReloadTriggered, now_ns

if TYPE_CHECKING:
    from blink._types import ReloadMessage
    from blink.content.watcher import Resource
    from blink.observability.log import EventLog

DEFAULT_WINDOW = 0.2
DEFAULT_QUEUE_SIZE = 128


class Broadcaster(Protocol):
    def broadcast(self, message: ReloadMessage) -> None: ...


def reload_message(resource: Resource) -> ReloadMessage:
    """Build the wire payload for a reload caused by *resource*.

    The path is informational; clients reload the current page on any
    reload command.

    """
    return json.dumps({"command": "reload", "path": f"/d/{resource.uid}/slug"})


class ReloadCoordinator:
    """Debounces resource changes and hands one reload per quiet window to a hub.

    Args:
        hub: Where reload messages go (usually a ``Hub``).
        window: Quiet window in seconds.
        queue_size: Capacity of the intake queue; overflow is dropped.
        log: Optional event log receiving ``ReloadTriggered`` events.

    """

    def __init__(
        self,
        hub: Broadcaster,
        *,
        window: float = DEFAULT_WINDOW,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        log: EventLog | None = None,
    ) -> None:
        if window <= 0:
            msg = f"Debounce window must be positive, got {window}"
            raise ReloadError(msg)
        if queue_size <= 0:
            msg = f"Reload queue size must be positive, got {queue_size}"
            raise ReloadError(msg)
        self._hub = hub
        self._window = window
        self._queue: asyncio.Queue[Resource] = asyncio.Queue(maxsize=queue_size)
        self._log = log
        self._dropped = 0

    @property
    def window(self) -> float:
        return self._window

    @property
    def dropped_events(self) -> int:
        """Changes discarded because the intake queue was full."""
        return self._dropped

    def submit(self, resource: Resource) -> None:
        """Report a changed resource. Never blocks.

        When the intake queue is full a reload is already pending, so the
        event is dropped.

        """
        try:
            self._queue.put_nowait(resource)
        except asyncio.QueueFull:
            self._dropped += 1

    async def run(self, stop: asyncio.Event) -> None:
        """Coalesce submitted changes until *stop* is set.

        A burst still pending at stop is discarded.

        """
        pending_last: Resource | None = None
        pending_n = 0

        while True:
            if pending_last is None:
                item = await next_or_stop(self._queue, stop)
                if item is Wake.STOPPED:
                    return
                pending_last, pending_n = item, 1
                continue

            item = await next_or_stop(self._queue, stop, timeout=self._window)
            if item is Wake.STOPPED:
                return
            if item is Wake.TIMED_OUT:
                self._trigger_reload(pending_last, pending_n)
                pending_last, pending_n = None, 0
                continue
            pending_last = item
            pending_n += 1

    def _trigger_reload(self, resource: Resource, n: int) -> None:
        message = reload_message(resource)
        if n > 1:
            print(
                f"  livereload: {n} changes coalesced, reloading "
                f"({resource.kind} {resource.name}, uid={resource.uid})",
                file=sys.stderr,
            )
        else:
            print(
                f"  livereload: {resource.kind} {resource.name} changed, reloading "
                f"(uid={resource.uid})",
                file=sys.stderr,
            )
        if self._log is not None:
            self._log.append(
                ReloadTriggered(
                    name=resource.name,
                    uid=resource.uid,
                    kind=resource.kind,
                    changes=n,
                    message=message,
                    timestamp_ns=now_ns(),
                )
            )
        self._hub.broadcast(message)
