"""ASGI handler — the per-request proxy pipeline.

The only component that touches raw ASGI directly. Converts the scope
into a ``Request``, routes it, rewrites it for the chosen origin,
forwards it, annotates the response, and sends it back.
"""

from collections.abc import Mapping

from ilr_proxy._internal.asgi import Receive, Scope, Send
from ilr_proxy.errors import UpstreamError
from ilr_proxy.http.request import Request
from ilr_proxy.proxy.annotate import annotate_response
from ilr_proxy.proxy.engine import ProxyEngine
from ilr_proxy.proxy.rewrite import rewrite_request
from ilr_proxy.routing.origin import Origin, OriginLabel
from ilr_proxy.routing.router import Router
from ilr_proxy.server.errors import ErrorReporter, bad_gateway, log_proxy_error, report
from ilr_proxy.server.sender import send_response, send_streaming_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    origins: Mapping[OriginLabel, Origin],
    engine: ProxyEngine,
    reporter: ErrorReporter = log_proxy_error,
) -> None:
    """Proxy a single HTTP request. One forward attempt, no retries."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    label = router.resolve(request.path, request.referer_path)
    origin = origins[label]
    outbound = rewrite_request(request, origin, router.table)

    try:
        upstream = await engine.forward(outbound)
    except UpstreamError as exc:
        report(reporter, exc, request.path)
        await send_response(bad_gateway(), send)
        return

    response = annotate_response(upstream, outbound.host)
    await send_streaming_response(response, send, path=request.path, reporter=reporter)
