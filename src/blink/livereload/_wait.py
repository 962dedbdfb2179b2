"""Stop-aware queue waits shared by the live-reload loops."""

from __future__ import annotations

import asyncio
import enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Literal


class Wake(enum.Enum):
    """Why a wait ended without an item."""

    STOPPED = "stopped"
    TIMED_OUT = "timed_out"


async def next_or_stop[T](
    queue: asyncio.Queue[T],
    stop: asyncio.Event,
    timeout: float | None = None,
) -> T | Literal[Wake.STOPPED, Wake.TIMED_OUT]:
    """Wait for the next item of *queue*, the *stop* signal, or *timeout*.

    An item that is ready wins over a simultaneous stop or timeout.  When the
    wait ends without an item, the pending ``get`` is cancelled and the item
    it would have taken stays in the queue, so nothing is lost to a reset.

    """
    if stop.is_set():
        return Wake.STOPPED

    getter = asyncio.ensure_future(queue.get())
    halt = asyncio.ensure_future(stop.wait())
    try:
        done, _ = await asyncio.wait(
            {getter, halt},
            timeout=timeout,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        pending = [t for t in (getter, halt) if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    if getter in done:
        return getter.result()
    if halt in done:
        return Wake.STOPPED
    return Wake.TIMED_OUT
