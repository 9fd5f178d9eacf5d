"""Async test client for the proxy.

Drives the ASGI callable in-process — no sockets. Pair it with an
``httpx.MockTransport`` on the ``ProxyApp`` to stand in for origins.
"""

from typing import Any

from ilr_proxy.app import ProxyApp
from ilr_proxy.http.headers import Headers
from ilr_proxy.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for ``ProxyApp``.

    Returns the same ``Response`` type the proxy builds locally, with
    every response header (including ``content-length``) preserved.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/news", headers={"Referer": "..."})
            assert response.headers["x-ilr-proxy-source"] == "d9.example.edu"
    """

    __slots__ = ("app", "client_addr", "host")

    def __init__(
        self,
        app: ProxyApp,
        *,
        host: str = "www.example.edu",
        client_addr: tuple[str, int] = ("203.0.113.7", 50000),
    ) -> None:
        self.app = app
        self.host = host
        self.client_addr = client_addr

    async def __aenter__(self) -> "TestClient":
        await self.app.engine.open()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.app.engine.aclose()

    async def get(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str, *, headers: dict[str, str] | None = None) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send a POST request."""
        return await self.request("POST", path, headers=headers, body=body)

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app."""
        # Split path and query string
        if "?" in path:
            path_part, query_string = path.split("?", 1)
        else:
            path_part = path
            query_string = ""

        request_body = body or b""
        merged: dict[str, str] = {"host": self.host}
        if request_body:
            merged["content-length"] = str(len(request_body))
        for name, value in (headers or {}).items():
            merged[name.lower()] = value

        raw_headers = [
            (name.encode("latin-1"), value.encode("latin-1")) for name, value in merged.items()
        ]

        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "scheme": "http",
            "path": path_part,
            "raw_path": path_part.encode("latin-1"),
            "query_string": query_string.encode("latin-1"),
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": self.client_addr,
        }

        body_sent = False

        async def receive() -> dict[str, Any]:
            nonlocal body_sent
            if not body_sent:
                body_sent = True
                return {"type": "http.request", "body": request_body, "more_body": False}
            return {"type": "http.disconnect"}

        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        headers_out = Headers(response_headers)
        return Response(
            body=b"".join(response_body_parts),
            status=response_status,
            content_type=headers_out.get("content-type", "") or "",
            headers=headers_out,
        )
