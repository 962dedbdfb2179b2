"""Diagnostics for the live-reload pipeline.

Hub, coordinator and injector record frozen event dataclasses into an
optional ``EventLog`` alongside the status lines they print to stderr.

Quick Start::

    log = EventLog()
    hub = Hub(log=log)
    ...
    log.query(event_type=ClientConnected)

"""

from blink.observability.events import (
    BlinkEvent,
    ClientConnected,
    ClientDisconnected,
    HTMLInjected,
    ReloadTriggered,
    now_ns,
)
from blink.observability.log import EventLog

__all__ = [
    "BlinkEvent",
    "ClientConnected",
    "ClientDisconnected",
    "EventLog",
    "HTMLInjected",
    "ReloadTriggered",
    "now_ns",
]
