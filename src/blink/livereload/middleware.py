"""Starlette middleware applying the HTML injector to every response."""

from __future__ import annotations

import io
import sys
from typing import TYPE_CHECKING

from starlette.datastructures import MutableHeaders
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from blink._errors import InjectionError
from blink.livereload.inject import ProxyResponse, html_injector, is_html

if TYPE_CHECKING:
    from starlette.middleware.base import RequestResponseEndpoint
    from starlette.requests import Request
    from starlette.types import ASGIApp

    from blink.observability.log import EventLog


class LiveReloadMiddleware(BaseHTTPMiddleware):
    """Buffers HTML responses and writes the listener script into them.

    A body that cannot be decoded is served as it came, with a warning.

    """

    def __init__(self, app: ASGIApp, port: int, log: EventLog | None = None) -> None:
        super().__init__(app)
        self._inject = html_injector(port, log=log)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        if not is_html(response.headers.get("content-type", "")):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])  # type: ignore[attr-defined]
        proxied = ProxyResponse(
            headers=MutableHeaders(raw=list(response.headers.raw)),
            body=io.BytesIO(body),
            content_length=len(body),
            url=str(request.url),
        )
        try:
            self._inject(proxied)
        except InjectionError as exc:
            print(f"  inject: {exc}; serving unmodified", file=sys.stderr)
            return Response(body, status_code=response.status_code, headers=response.headers)

        return Response(
            proxied.body.read(),
            status_code=response.status_code,
            headers=proxied.headers,
        )
