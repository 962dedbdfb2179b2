"""HTML injection — writes the live-reload listener into outgoing pages.

Works on a fully buffered, mutable response: headers, a body stream and the
declared body length.  Only ``text/html`` responses are touched.  Gzip bodies
are inflated, edited and re-deflated; any other encoding is left alone.

The script tag goes right before the *last* ``</body>`` (matched without
regard to case).  Pages without one are served exactly as they came in.
"""

from __future__ import annotations

import gzip
import io
import sys
import zlib
from dataclasses import dataclass
from typing import TYPE_CHECKING, BinaryIO

from blink._errors import InjectionError
from blink.observability.events import HTMLInjected, now_ns

if TYPE_CHECKING:
    from starlette.datastructures import MutableHeaders

    from blink._types import ResponseHook
    from blink.observability.log import EventLog

SCRIPT_PATH = "/grafanactl/assets/livereload.js"

_ANCHOR = b"</body>"


@dataclass(slots=True)
class ProxyResponse:
    """A buffered HTTP response on its way to the browser.

    Attributes:
        headers: Case-insensitive response headers.
        body: Readable body stream.  Replaced, never edited in place.
        content_length: Declared body length, ``-1`` when unknown.
        url: Request URL, for diagnostics only.

    """

    headers: MutableHeaders
    body: BinaryIO
    content_length: int = -1
    url: str = ""


def script_tag(port: int) -> bytes:
    """Return the listener tag pointing the browser at *port*."""
    return f'<script src="{SCRIPT_PATH}" data-port="{port}"></script>'.encode()


def is_html(content_type: str) -> bool:
    return "text/html" in content_type.lower()


def inject_livereload(
    response: ProxyResponse,
    port: int,
    *,
    log: EventLog | None = None,
) -> ProxyResponse:
    """Insert the listener script into *response* and fix up its length.

    Mutates and returns *response*.  Non-HTML responses are returned
    untouched without reading the body.

    Raises:
        InjectionError: If a gzip body cannot be inflated.

    """
    content_type = response.headers.get("content-type", "")
    if not is_html(content_type):
        return response

    compressed = response.headers.get("content-encoding", "").strip().lower() == "gzip"

    raw = response.body.read()
    response.body.close()

    body = _gunzip(raw, response.url) if compressed else raw

    anchor = body.lower().rfind(_ANCHOR)
    if anchor == -1:
        print(
            f"  inject: no </body> in {response.url or 'response'}, skipping",
            file=sys.stderr,
        )
        response.body = io.BytesIO(raw)
        return response

    injected = b"".join((body[:anchor], script_tag(port), b"\n", body[anchor:]))
    if compressed:
        injected = gzip.compress(injected)

    response.body = io.BytesIO(injected)
    response.content_length = len(injected)
    response.headers["content-length"] = str(len(injected))

    if log is not None:
        log.append(
            HTMLInjected(
                url=response.url,
                body_size=len(body),
                compressed=compressed,
                timestamp_ns=now_ns(),
            )
        )
    return response


def html_injector(port: int, *, log: EventLog | None = None) -> ResponseHook:
    """Return ``inject_livereload`` bound to *port*, for use as a response hook."""

    def hook(response: ProxyResponse) -> ProxyResponse:
        return inject_livereload(response, port, log=log)

    return hook


def _gunzip(raw: bytes, url: str) -> bytes:
    try:
        return gzip.decompress(raw)
    except (OSError, EOFError, zlib.error) as exc:
        msg = f"Cannot decode gzip body of {url or 'response'}: {exc}"
        raise InjectionError(msg) from exc
