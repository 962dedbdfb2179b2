"""Connection hub — the single authority over who is listening for reloads.

Every registry mutation and every broadcast is a request on one queue,
drained by ``Hub.run``.  Producers never touch the connection set, so the
set needs no lock: only the hub loop reads or writes it, one request at a
time, in arrival order.

Delivery is best-effort.  A broadcast offers the message to each client's
bounded mailbox without waiting; a client whose mailbox is full is treated
as dead and dropped on the spot.  The hub loop never awaits a transport:
closing a dropped client's channel runs as a separate task.
"""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from blink._errors import TransportError
from blink.livereload._wait import Wake, next_or_stop
from blink.observability.events import ClientConnected, ClientDisconnected, now_ns

if TYPE_CHECKING:
    from blink._types import DisconnectReason, ReloadMessage
    from blink.observability.log import EventLog

DEFAULT_MAILBOX_SIZE = 256


class Transport(Protocol):
    """A duplex notification channel to one browser.

    Implementations raise ``TransportError`` when the channel fails or the
    peer closes it.

    """

    async def send(self, message: ReloadMessage) -> None: ...

    async def receive(self) -> str | bytes | None: ...

    async def close(self) -> None: ...


class Connection:
    """One registered client channel plus its read and write loops.

    The mailbox is bounded: it only has to absorb scheduling delay between
    the hub and the write loop, never sustained backpressure.

    Args:
        transport: The upgraded channel this connection owns.
        mailbox_size: Capacity of the outbound mailbox.

    """

    __slots__ = ("_closed", "mailbox", "transport")

    def __init__(
        self,
        transport: Transport,
        *,
        mailbox_size: int = DEFAULT_MAILBOX_SIZE,
    ) -> None:
        self.transport = transport
        self.mailbox: asyncio.Queue[ReloadMessage] = asyncio.Queue(maxsize=mailbox_size)
        self._closed = asyncio.Event()

    @property
    def closed(self) -> bool:
        """Whether the connection has been shut."""
        return self._closed.is_set()

    def offer(self, message: ReloadMessage) -> bool:
        """Queue *message* without waiting. Returns False if the mailbox is full."""
        try:
            self.mailbox.put_nowait(message)
        except asyncio.QueueFull:
            return False
        return True

    def shut(self) -> bool:
        """Mark the connection closed, stopping the write loop.

        Returns True for the first call only; that caller owns releasing the
        transport.
        """
        if self._closed.is_set():
            return False
        self._closed.set()
        return True

    async def release(self) -> None:
        """Close the transport, reporting rather than raising a failure."""
        try:
            await self.transport.close()
        except TransportError as exc:
            print(f"  livereload: close failed: {exc}", file=sys.stderr)

    async def close(self) -> None:
        """Shut the connection and close its transport. Only the first call acts."""
        if self.shut():
            await self.release()

    async def write_loop(self, hub: Hub) -> None:
        """Drain the mailbox to the transport until closed or a write fails."""
        try:
            while True:
                message = await next_or_stop(self.mailbox, self._closed)
                if message is Wake.STOPPED:
                    return
                await self.transport.send(message)
        except TransportError as exc:
            print(f"  livereload: write failed: {exc}", file=sys.stderr)
        finally:
            hub.unregister(self)

    async def read_loop(self, hub: Hub) -> None:
        """Read until the peer goes away; inbound traffic is only keepalive."""
        try:
            while not self._closed.is_set():
                await self.transport.receive()
        except TransportError as exc:
            print(f"  livereload: client gone: {exc}", file=sys.stderr)
        finally:
            hub.unregister(self)

    async def serve(self, hub: Hub) -> None:
        """Register with *hub* and run both loops until the connection ends."""
        hub.register(self)
        writer = asyncio.create_task(self.write_loop(hub))
        try:
            await self.read_loop(hub)
        finally:
            # The hub loop may already have stopped.
            await self.close()
            await writer


@dataclass(frozen=True, slots=True)
class _Register:
    connection: Connection


@dataclass(frozen=True, slots=True)
class _Unregister:
    connection: Connection


@dataclass(frozen=True, slots=True)
class _Broadcast:
    message: ReloadMessage


type _Request = _Register | _Unregister | _Broadcast


class Hub:
    """Registry of live connections and fan-out point for reload messages.

    ``register``, ``unregister`` and ``broadcast`` only enqueue a request and
    return immediately; ``run`` applies them.  Construct one per server and
    pass it to whatever needs it.

    Args:
        log: Optional event log receiving connect/disconnect events.

    """

    def __init__(self, *, log: EventLog | None = None) -> None:
        self._connections: set[Connection] = set()
        self._requests: asyncio.Queue[_Request] = asyncio.Queue()
        self._closing: set[asyncio.Task[None]] = set()
        self._log = log
        self._last_message: ReloadMessage | None = None

    @property
    def connection_count(self) -> int:
        """Number of registered connections (snapshot)."""
        return len(self._connections)

    @property
    def last_message(self) -> ReloadMessage | None:
        """The most recently broadcast message, if any."""
        return self._last_message

    def register(self, connection: Connection) -> None:
        self._requests.put_nowait(_Register(connection))

    def unregister(self, connection: Connection) -> None:
        self._requests.put_nowait(_Unregister(connection))

    def broadcast(self, message: ReloadMessage) -> None:
        self._requests.put_nowait(_Broadcast(message))

    async def run(self, stop: asyncio.Event) -> None:
        """Apply queued requests one at a time until *stop* is set.

        On stop, every connection still registered is closed, and the call
        returns once all transport closes have finished.

        """
        try:
            while True:
                request = await next_or_stop(self._requests, stop)
                if request is Wake.STOPPED:
                    return
                self._apply(request)
        finally:
            for connection in list(self._connections):
                self._remove(connection, "closed")
            if self._closing:
                await asyncio.gather(*self._closing)

    def _apply(self, request: _Request) -> None:
        match request:
            case _Register(connection):
                self._connections.add(connection)
                total = len(self._connections)
                print(f"  livereload: client connected ({total} total)", file=sys.stderr)
                if self._log is not None:
                    self._log.append(ClientConnected(total=total, timestamp_ns=now_ns()))
            case _Unregister(connection):
                if connection in self._connections:
                    self._remove(connection, "closed")
            case _Broadcast(message):
                self._fan_out(message)

    def _fan_out(self, message: ReloadMessage) -> None:
        self._last_message = message
        print(
            f"  livereload: broadcasting reload to {len(self._connections)} client(s): {message}",
            file=sys.stderr,
        )
        for connection in list(self._connections):
            if not connection.offer(message):
                self._remove(connection, "unresponsive")

    def _remove(self, connection: Connection, reason: DisconnectReason) -> None:
        self._connections.discard(connection)
        if connection.shut():
            task = asyncio.create_task(connection.release())
            self._closing.add(task)
            task.add_done_callback(self._closing.discard)
        total = len(self._connections)
        print(
            f"  livereload: client disconnected ({reason}, {total} total)",
            file=sys.stderr,
        )
        if self._log is not None:
            self._log.append(
                ClientDisconnected(total=total, reason=reason, timestamp_ns=now_ns())
            )
