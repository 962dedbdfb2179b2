"""Blink — live reload for local development servers.

Serve a directory, edit a file, and every open browser tab reloads once the
burst of changes settles.

Quick start::

    import blink

    blink.dev("my-site/")

Building blocks, for embedding in another server::

    from blink.livereload import Hub, ReloadCoordinator, inject_livereload

    hub = Hub()
    coordinator = ReloadCoordinator(hub)
    # run hub.run(stop) and coordinator.run(stop) as tasks,
    # call coordinator.submit(resource) from the watcher,
    # pass responses through inject_livereload(response, port)

"""

__version__ = "0.1.0-dev"
__all__ = [
    "BlinkConfig",
    "__version__",
    "create_app",
    "dev",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API.

    Keeps ``import blink`` fast; Starlette and watchfiles load on first use.
    """
    if name == "BlinkConfig":
        from blink.config import BlinkConfig

        return BlinkConfig

    if name == "create_app":
        from blink.app import create_app

        return create_app

    if name == "dev":
        from blink.app import dev

        return dev

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
