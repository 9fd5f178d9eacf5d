"""Request rewriter — derive the outbound request for a chosen origin.

Pure and synchronous: reads the inbound ``Request`` and the frozen
``Origin``/``RuleTable``, returns a new ``OutboundRequest``. Nothing
shared is touched.
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass

from ilr_proxy.http.headers import Headers
from ilr_proxy.http.request import Request
from ilr_proxy.routing.origin import Origin
from ilr_proxy.routing.rules import ForwardedHostPolicy, RuleTable

# RFC 9110 section 7.6.1, plus the legacy proxy names httputil strips.
HOP_BY_HOP_HEADERS = (
    "connection",
    "keep-alive",
    "proxy-authenticate",
    "proxy-authorization",
    "proxy-connection",
    "te",
    "trailer",
    "transfer-encoding",
    "upgrade",
)


@dataclass(frozen=True, slots=True)
class OutboundRequest:
    """The request the engine sends to an origin."""

    method: str
    origin: Origin
    target: str
    headers: Headers
    content: AsyncIterator[bytes] | None = None

    @property
    def url(self) -> str:
        """Absolute URL dialed on the origin."""
        return f"{self.origin.scheme}://{self.origin.host}{self.target}"

    @property
    def host(self) -> str:
        """Host (and port) dialed — what the annotator reports."""
        return self.origin.host


def strip_hop_by_hop(headers: Headers) -> Headers:
    """Remove hop-by-hop headers, including any named in ``Connection``."""
    named = [
        token.strip()
        for value in headers.get_list("connection")
        for token in value.split(",")
        if token.strip()
    ]
    return headers.without(*HOP_BY_HOP_HEADERS, *named)


def forwarded_proto(request: Request) -> str:
    """Client-facing protocol: inbound ``X-Forwarded-Proto`` or ``http``."""
    return request.headers.get("x-forwarded-proto") or "http"


def rewrite_request(request: Request, origin: Origin, table: RuleTable) -> OutboundRequest:
    """Build the outbound request for *origin*.

    - ``X-Forwarded-Proto`` carries the client-facing protocol when the
      table forwards it; the origin is always dialed with its own scheme.
    - ``X-Forwarded-Host`` follows ``table.forwarded_host``.
    - ``Host`` is the origin host so name-based virtual hosts resolve.
    - The client address is appended to ``X-Forwarded-For``.
    """
    headers = strip_hop_by_hop(request.headers)

    if table.forward_proto:
        headers = headers.replacing("x-forwarded-proto", forwarded_proto(request))

    policy = table.forwarded_host
    if policy is ForwardedHostPolicy.OVERWRITE:
        headers = headers.replacing("x-forwarded-host", request.host)
    elif policy is ForwardedHostPolicy.SET_IF_ABSENT and "x-forwarded-host" not in headers:
        headers = headers.appending("x-forwarded-host", request.host)

    if request.client is not None:
        prior = ", ".join(headers.get_list("x-forwarded-for"))
        client_ip = request.client[0]
        headers = headers.replacing(
            "x-forwarded-for", f"{prior}, {client_ip}" if prior else client_ip
        )

    headers = headers.replacing("host", origin.host)

    target = origin.join_path(request.target_path)
    if request.query_string:
        target = f"{target}?{request.query_string.decode('latin-1')}"

    return OutboundRequest(
        method=request.method,
        origin=origin,
        target=target,
        headers=headers,
        content=request.stream() if request.has_body else None,
    )
