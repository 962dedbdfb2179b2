"""Event model for live-reload diagnostics.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass

from blink._types import DisconnectReason


# ---------------------------------------------------------------------------
# Hub events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClientConnected:
    """A notification client joined the hub registry.

    Attributes:
        total: Registered clients after the join.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    total: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ClientDisconnected:
    """A notification client left the hub registry.

    Attributes:
        total: Registered clients after the departure.
        reason: ``closed`` for a transport failure or peer close,
            ``unresponsive`` when its mailbox was full during a broadcast.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    total: int
    reason: DisconnectReason
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Reload pipeline events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ReloadTriggered:
    """A debounced reload was handed to the hub.

    Attributes:
        name: Name of the most recently changed resource.
        uid: Its unique identifier.
        kind: Its kind.
        changes: Number of change events coalesced into this reload.
        message: The wire payload broadcast to clients.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    name: str
    uid: str
    kind: str
    changes: int
    message: str
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class HTMLInjected:
    """The listener script was written into an HTML response.

    Attributes:
        url: Request URL of the response, when known.
        body_size: Decoded body size before injection.
        compressed: True if the body was gzip encoded.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    url: str
    body_size: int
    compressed: bool
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type BlinkEvent = ClientConnected | ClientDisconnected | ReloadTriggered | HTMLInjected


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
