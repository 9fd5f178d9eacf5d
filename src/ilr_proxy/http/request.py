"""Immutable inbound HTTP request.

Frozen metadata from the ASGI scope plus async access to the body, so
the proxy engine can stream it upstream without buffering.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, urlsplit

from ilr_proxy._internal.asgi import Receive
from ilr_proxy.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable inbound HTTP request.

    ``path`` is the decoded path only — never the query string, which
    stays in ``query_string`` and is forwarded verbatim.
    """

    method: str
    path: str
    raw_path: bytes
    query_string: bytes
    headers: Headers
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: per-request cache (dict contents are mutable, the field is not)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def host(self) -> str:
        """The inbound ``Host`` header, falling back to the ASGI server address."""
        value = self.headers.get("host")
        if value:
            return value
        if self.server is not None:
            host, port = self.server
            return f"{host}:{port}"
        return ""

    @property
    def referer_path(self) -> str:
        """Path component of the ``Referer`` header.

        Empty when the header is missing or does not parse as a URL, so
        shared-path fallback simply finds no match.
        """
        if "_referer_path" in self._cache:
            return self._cache["_referer_path"]
        raw = self.headers.get("referer", "") or ""
        try:
            path = urlsplit(raw).path
        except ValueError:
            path = ""
        self._cache["_referer_path"] = path
        return path

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def has_body(self) -> bool:
        """True if the client declared a body (length or chunked framing)."""
        if self.content_length:
            return True
        return "chunked" in (self.headers.get("transfer-encoding") or "").lower()

    @property
    def target_path(self) -> str:
        """Path as sent on the wire (percent-encoding preserved)."""
        if self.raw_path:
            return self.raw_path.decode("latin-1")
        return quote(self.path, safe="/:@!$&'()*+,;=~")

    # -- Async body access --

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: dict[str, Any], receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=scope.get("raw_path") or b"",
            query_string=scope.get("query_string", b""),
            headers=Headers(tuple(scope.get("headers", ()))),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
