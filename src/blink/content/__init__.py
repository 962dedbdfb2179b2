"""Content layer — detecting which served resources changed."""

from blink.content.watcher import Resource, ResourceWatcher, resource_for_path

__all__ = [
    "Resource",
    "ResourceWatcher",
    "resource_for_path",
]
