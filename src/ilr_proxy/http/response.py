"""HTTP responses, immutable once built.

``with_replaced_header`` returns a new object. ``Response`` carries a body
generated by the proxy itself (error pages); ``StreamingResponse``
relays an upstream body chunk by chunk.
"""

from collections.abc import AsyncIterator, Awaitable, Callable
from dataclasses import dataclass, field, replace

from ilr_proxy.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Response:
    """A response generated locally by the proxy."""

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: Headers = field(default_factory=Headers)

    # -- Chainable transformations --

    def with_replaced_header(self, name: str, value: str) -> "Response":
        """Return a new Response where *name* has exactly one value."""
        return replace(self, headers=self.headers.replacing(name, value))

    # -- Body helpers --

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body


@dataclass(frozen=True, slots=True)
class StreamingResponse:
    """An upstream response relayed to the client as it arrives.

    ``headers`` are the upstream headers (hop-by-hop already removed),
    including its own ``Content-Type`` and ``Content-Length``.
    ``close`` releases the upstream connection once the body is sent
    or abandoned.

    Shares ``with_replaced_header`` with ``Response`` so the annotator
    does not need to know which kind it is handling.
    """

    chunks: AsyncIterator[bytes]
    status: int = 200
    headers: Headers = field(default_factory=Headers)
    close: Callable[[], Awaitable[None]] | None = field(default=None, repr=False, compare=False)

    def with_replaced_header(self, name: str, value: str) -> "StreamingResponse":
        """Return a new StreamingResponse where *name* has exactly one value."""
        return replace(self, headers=self.headers.replacing(name, value))


type AnyResponse = Response | StreamingResponse
