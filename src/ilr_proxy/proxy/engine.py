"""Proxy engine — one forward attempt per request over ``httpx``.

Owns the only shared resource in the process: an ``httpx.AsyncClient``
connection pool. Everything else it touches belongs to the request in
flight.
"""

import logging
from collections.abc import AsyncIterator
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx

from ilr_proxy.errors import UpstreamError
from ilr_proxy.http.headers import Headers
from ilr_proxy.http.response import StreamingResponse
from ilr_proxy.proxy.rewrite import OutboundRequest, strip_hop_by_hop

logger = logging.getLogger("ilr_proxy.server")


class ProxyEngine:
    """Forward ``OutboundRequest`` objects and relay the upstream response.

    Redirects are passed through to the client, bodies are relayed raw
    (no decompression), and no request is ever retried.

    Usage::

        engine = ProxyEngine(timeout=30.0)
        await engine.open()
        response = await engine.forward(outbound)
        ...
        await engine.aclose()

    Pass ``transport`` (e.g. ``httpx.MockTransport``) to swap the network.
    """

    __slots__ = ("_client", "timeout", "transport")

    def __init__(
        self,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_open(self) -> bool:
        return self._client is not None and not self._client.is_closed

    async def open(self) -> httpx.AsyncClient:
        """Create the connection pool. Idempotent; returns the client."""
        if self._client is not None and not self._client.is_closed:
            return self._client
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            # Set-Cookie belongs to the browser, never to the shared pool.
            cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
            follow_redirects=False,
            trust_env=False,
            transport=self.transport,
        )
        return self._client

    async def aclose(self) -> None:
        """Close the connection pool."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def forward(self, outbound: OutboundRequest) -> StreamingResponse:
        """Send *outbound* once and return the upstream response, unread.

        Raises:
            UpstreamError: If the origin cannot be reached or the
                exchange fails before response headers arrive.
        """
        client = await self.open()

        try:
            # Built directly so the client adds none of its default headers.
            request = httpx.Request(
                outbound.method,
                outbound.url,
                headers=list(outbound.headers.raw),
                content=outbound.content,
                extensions={"timeout": httpx.Timeout(self.timeout).as_dict()},
            )
            upstream = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise UpstreamError(outbound.host, _describe(exc)) from exc
        except httpx.InvalidURL as exc:
            raise UpstreamError(outbound.host, str(exc)) from exc

        logger.debug(
            "%s %s -> %s %d", outbound.method, outbound.target, outbound.host, upstream.status_code
        )
        return StreamingResponse(
            chunks=_relay(upstream, outbound.host),
            status=upstream.status_code,
            headers=strip_hop_by_hop(Headers(upstream.headers.raw)),
            close=upstream.aclose,
        )

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"ProxyEngine(timeout={self.timeout!r}, {state})"


async def _relay(upstream: httpx.Response, host: str) -> AsyncIterator[bytes]:
    """Yield the raw upstream body, closing the response when done."""
    try:
        async for chunk in upstream.aiter_raw():
            yield chunk
    except httpx.HTTPError as exc:
        raise UpstreamError(host, _describe(exc)) from exc
    finally:
        await upstream.aclose()


def _describe(exc: httpx.HTTPError) -> str:
    """Error text that is never empty (httpx timeouts often have no message)."""
    return str(exc) or type(exc).__name__
