"""Blink error hierarchy.

All blink-specific errors inherit from BlinkError for easy catching.
"""


class BlinkError(Exception):
    """Base error for all blink operations."""


class ConfigError(BlinkError):
    """Invalid or unreadable configuration."""


class TransportError(BlinkError):
    """A notification channel failed to read, write, or was closed by the peer."""


class InjectionError(BlinkError):
    """An HTML response body could not be decoded for script injection."""


class ReloadError(BlinkError):
    """Invalid use of the reload pipeline (debounce window, queue sizes)."""
