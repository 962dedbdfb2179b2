"""Live reload — change debouncing, client fan-out and HTML injection.

Flow:
    ResourceWatcher -> ReloadCoordinator.submit() -> Hub.broadcast()
        -> Connection mailboxes -> browsers

The listener script reaches the browser through ``inject_livereload``.
"""

from blink.livereload.debounce import ReloadCoordinator, reload_message
from blink.livereload.hub import Connection, Hub, Transport
from blink.livereload.inject import (
    SCRIPT_PATH,
    ProxyResponse,
    html_injector,
    inject_livereload,
    script_tag,
)

__all__ = [
    "SCRIPT_PATH",
    "Connection",
    "Hub",
    "ProxyResponse",
    "ReloadCoordinator",
    "Transport",
    "html_injector",
    "inject_livereload",
    "reload_message",
    "script_tag",
]
