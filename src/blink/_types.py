"""Shared type definitions for blink."""

from collections.abc import Callable
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from blink.livereload.inject import ProxyResponse

# Wire payload pushed to notification clients
type ReloadMessage = str

# Why a client left the registry
type DisconnectReason = Literal["closed", "unresponsive"]

# Response post-processing hook installed on the HTTP path
type ResponseHook = Callable[[ProxyResponse], ProxyResponse]
