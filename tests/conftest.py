"""Shared test fixtures for blink."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from blink._errors import TransportError
from blink.config import BlinkConfig


class FakeTransport:
    """In-memory Transport recording what the hub and connection do to it."""

    def __init__(self, *, fail_send: bool = False, close_delay: float = 0.0) -> None:
        self.sent: list[str] = []
        self.close_calls = 0
        self.fail_send = fail_send
        self.close_delay = close_delay
        self._inbox: asyncio.Queue[str | None] = asyncio.Queue()

    async def send(self, message: str) -> None:
        if self.fail_send:
            raise TransportError("broken pipe")
        self.sent.append(message)

    async def receive(self) -> str:
        item = await self._inbox.get()
        if item is None:
            raise TransportError("peer closed")
        return item

    async def close(self) -> None:
        self.close_calls += 1
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        self._inbox.put_nowait(None)

    def peer_says(self, text: str) -> None:
        self._inbox.put_nowait(text)

    def peer_close(self) -> None:
        self._inbox.put_nowait(None)


class RecordingHub:
    """Stands in for Hub when only the broadcast calls matter."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def broadcast(self, message: str) -> None:
        self.messages.append(message)


@pytest.fixture
def transport_factory() -> type[FakeTransport]:
    return FakeTransport


@pytest.fixture
def recording_hub() -> RecordingHub:
    return RecordingHub()


@pytest.fixture
def tmp_site(tmp_path: Path) -> Path:
    """A minimal static site: an HTML page, a fragment and a stylesheet."""
    (tmp_path / "index.html").write_text(
        "<!DOCTYPE html>\n<html>\n<body><h1>Home</h1></body>\n</html>\n"
    )
    (tmp_path / "fragment.html").write_text("<p>No body tag here</p>\n")
    css = tmp_path / "css"
    css.mkdir()
    (css / "style.css").write_text("body { margin: 0; }\n")
    return tmp_path


@pytest.fixture
def site_config(tmp_site: Path) -> BlinkConfig:
    """Config for tmp_site with the watcher disabled and a short window."""
    return BlinkConfig(root=tmp_site, port=35729, debounce_ms=50, watch=False)
