"""Blink configuration.

BlinkConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BlinkConfig:
    """Configuration for a blink dev server.

    Attributes:
        root: Directory served over HTTP and watched for changes.
              Always resolved to an absolute path on construction.
        host: Bind address.
        port: Bind port. Also the port the injected script connects back to.
        debounce_ms: Quiet window, in milliseconds, before a burst of changes
            is flushed as one reload.
        reload_queue_size: Capacity of the change intake queue.
        mailbox_size: Capacity of each client's outbound mailbox.
        watch: Start the filesystem watcher with the server.
        ignore_dirs: Directory names never reported by the watcher.

    """

    root: Path = field(default_factory=Path.cwd)
    host: str = "127.0.0.1"
    port: int = 3000
    debounce_ms: int = 200
    reload_queue_size: int = 128
    mailbox_size: int = 256
    watch: bool = True
    ignore_dirs: frozenset[str] = frozenset(
        {".git", ".hg", ".venv", "__pycache__", "node_modules"}
    )

    def __post_init__(self) -> None:
        # watchfiles reports absolute paths; keep root comparable with them.
        if not self.root.is_absolute():
            object.__setattr__(self, "root", self.root.resolve())
        if not isinstance(self.ignore_dirs, frozenset):
            object.__setattr__(self, "ignore_dirs", frozenset(self.ignore_dirs))

    @property
    def debounce_window(self) -> float:
        """Quiet window in seconds."""
        return self.debounce_ms / 1000
