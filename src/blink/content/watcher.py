"""File watcher — reports changed files to the reload coordinator.

Runs ``watchfiles.awatch`` on the served root inside the event loop and turns
each relevant change into a ``Resource`` submitted for a debounced reload.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from watchfiles import Change, awatch

if TYPE_CHECKING:
    import asyncio

    from blink.config import BlinkConfig
    from blink.livereload.debounce import ReloadCoordinator


@dataclass(frozen=True, slots=True)
class Resource:
    """A resource whose change should reload the browser.

    Attributes:
        name: Display name (the file name).
        uid: Stable identifier (path relative to the served root).
        kind: Broad resource type, derived from the file suffix.

    """

    name: str
    uid: str
    kind: str


_KIND_BY_SUFFIX: dict[str, str] = {
    ".html": "page",
    ".htm": "page",
    ".md": "content",
    ".css": "stylesheet",
    ".js": "script",
    ".mjs": "script",
    ".json": "data",
    ".yaml": "data",
    ".yml": "data",
    ".toml": "data",
}

# Editor swap and backup files.
_TEMP_SUFFIXES = (".swp", ".swx", ".tmp", "~")


def resource_for_path(path: Path, config: BlinkConfig) -> Resource | None:
    """Map a changed file to a Resource.

    Returns None for files outside the root, hidden files, editor temp
    files, and anything under an ignored directory.

    """
    try:
        rel = path.relative_to(config.root)
    except ValueError:
        return None

    parts = rel.parts
    if not parts:
        return None
    if any(part in config.ignore_dirs or part.startswith(".") for part in parts):
        return None
    if path.name.endswith(_TEMP_SUFFIXES):
        return None

    kind = _KIND_BY_SUFFIX.get(path.suffix.lower(), "asset")
    return Resource(name=path.name, uid=rel.as_posix(), kind=kind)


class ResourceWatcher:
    """Watches the served root and submits changed files for reload.

    Args:
        config: Supplies the root and ignore list.
        coordinator: Receives a ``Resource`` per relevant change.

    """

    def __init__(self, config: BlinkConfig, coordinator: ReloadCoordinator) -> None:
        self._config = config
        self._coordinator = coordinator

    def handle_changes(self, changes: set[tuple[Change, str]]) -> int:
        """Submit every relevant change in one watchfiles batch.

        Returns the number of resources submitted.

        """
        submitted = 0
        for _change, path_str in sorted(changes, key=lambda c: c[1]):
            resource = resource_for_path(Path(path_str), self._config)
            if resource is None:
                continue
            self._coordinator.submit(resource)
            submitted += 1
        return submitted

    async def run(self, stop: asyncio.Event) -> None:
        """Watch until *stop* is set."""
        async for changes in awatch(
            self._config.root,
            stop_event=stop,
            debounce=50,
            step=50,
        ):
            self.handle_changes(changes)
