"""Starlette endpoints for the live-reload channel and its browser script."""

from __future__ import annotations

import contextlib
from pathlib import Path
from typing import TYPE_CHECKING

from starlette.responses import FileResponse
from starlette.websockets import WebSocketDisconnect, WebSocketState

from blink._errors import TransportError
from blink.livereload.hub import DEFAULT_MAILBOX_SIZE, Connection

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from starlette.requests import Request
    from starlette.websockets import WebSocket

    from blink.livereload.hub import Hub

WEBSOCKET_PATH = "/livereload"

_SCRIPT_FILE = Path(__file__).parent / "assets" / "livereload.js"


class WebSocketTransport:
    """Adapts a Starlette ``WebSocket`` to the hub's ``Transport`` protocol."""

    __slots__ = ("_ws",)

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket

    async def send(self, message: str) -> None:
        try:
            await self._ws.send_text(message)
        except (WebSocketDisconnect, RuntimeError, ConnectionError) as exc:
            raise TransportError(f"send failed: {exc!r}") from exc

    async def receive(self) -> str | bytes | None:
        try:
            message = await self._ws.receive()
        except (RuntimeError, ConnectionError) as exc:
            raise TransportError(f"receive failed: {exc!r}") from exc
        if message["type"] == "websocket.disconnect":
            raise TransportError(f"peer closed (code {message.get('code', 1000)})")
        return message.get("text") or message.get("bytes")

    async def close(self) -> None:
        if WebSocketState.DISCONNECTED in (self._ws.client_state, self._ws.application_state):
            return
        # The peer may vanish between the state check and the close frame.
        with contextlib.suppress(RuntimeError, ConnectionError):
            await self._ws.close()


def livereload_endpoint(
    hub: Hub,
    *,
    mailbox_size: int = DEFAULT_MAILBOX_SIZE,
) -> Callable[[WebSocket], Awaitable[None]]:
    """Return a WebSocket endpoint that registers each client with *hub*."""

    async def endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        connection = Connection(WebSocketTransport(websocket), mailbox_size=mailbox_size)
        await connection.serve(hub)

    return endpoint


async def livereload_script(request: Request) -> FileResponse:
    """Serve the bundled browser listener."""
    return FileResponse(_SCRIPT_FILE, media_type="text/javascript")
