"""Blink application — static dev server with live reload.

``create_app`` wires one Hub, one ReloadCoordinator and (optionally) the
ResourceWatcher into a Starlette app that serves the site root, injects the
listener script into HTML pages and exposes the reload channel.
``dev`` runs that app under uvicorn.
"""

from __future__ import annotations

import asyncio
import contextlib
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.routing import Mount, Route, WebSocketRoute
from starlette.staticfiles import StaticFiles

from blink._errors import ConfigError
from blink.config_loader import load_config
from blink.content.watcher import ResourceWatcher
from blink.livereload.debounce import ReloadCoordinator
from blink.livereload.endpoint import WEBSOCKET_PATH, livereload_endpoint, livereload_script
from blink.livereload.hub import Hub
from blink.livereload.inject import SCRIPT_PATH
from blink.livereload.middleware import LiveReloadMiddleware

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Coroutine

    from blink.config import BlinkConfig
    from blink.observability.log import EventLog


def create_app(
    config: BlinkConfig,
    *,
    hub: Hub | None = None,
    coordinator: ReloadCoordinator | None = None,
    log: EventLog | None = None,
) -> Starlette:
    """Build the dev server app for *config*.

    The hub and coordinator are created here unless supplied; whichever are
    used are exposed on ``app.state`` for other components to reach.

    Raises:
        ConfigError: If the root is not a directory.

    """
    if not config.root.is_dir():
        msg = f"Site root {config.root} is not a directory"
        raise ConfigError(msg)

    hub = hub if hub is not None else Hub(log=log)
    coordinator = coordinator if coordinator is not None else ReloadCoordinator(
        hub,
        window=config.debounce_window,
        queue_size=config.reload_queue_size,
        log=log,
    )
    watcher = ResourceWatcher(config, coordinator) if config.watch else None

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        stop = asyncio.Event()
        loops: list[Coroutine[object, object, None]] = [hub.run(stop), coordinator.run(stop)]
        if watcher is not None:
            loops.append(watcher.run(stop))
        tasks = [asyncio.create_task(loop) for loop in loops]
        try:
            yield
        finally:
            stop.set()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    print(f"  livereload: loop failed at shutdown: {result!r}", file=sys.stderr)

    app = Starlette(
        routes=[
            WebSocketRoute(
                WEBSOCKET_PATH,
                livereload_endpoint(hub, mailbox_size=config.mailbox_size),
            ),
            Route(SCRIPT_PATH, livereload_script),
            Mount("/", app=StaticFiles(directory=config.root, html=True)),
        ],
        middleware=[Middleware(LiveReloadMiddleware, port=config.port, log=log)],
        lifespan=lifespan,
    )
    app.state.hub = hub
    app.state.coordinator = coordinator
    app.state.config = config
    return app


def dev(root: str | Path = ".", **kwargs: object) -> None:
    """Serve *root* with live reload until interrupted.

    Args:
        root: Directory to serve and watch.
        **kwargs: Override BlinkConfig fields.

    """
    import uvicorn

    config = load_config(Path(root), **kwargs)
    app = create_app(config)

    print(
        f"  blink serving {config.root} at http://{config.host}:{config.port}/"
        f" (reload window {config.debounce_ms}ms, watch {'on' if config.watch else 'off'})",
        file=sys.stderr,
    )
    uvicorn.run(app, host=config.host, port=config.port, log_level="warning")
