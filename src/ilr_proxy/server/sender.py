"""ASGI response sending — translates proxy responses to ASGI messages.

Handles locally generated single-body responses and relayed upstream
streams.
"""

from ilr_proxy._internal.asgi import Send
from ilr_proxy.errors import UpstreamError
from ilr_proxy.http.response import Response, StreamingResponse
from ilr_proxy.server.errors import ErrorReporter, log_proxy_error, report


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send) -> None:
    """Translate a locally built Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    raw_headers.extend(
        (name.lower(), value)
        for name, value in response.headers.raw
        if name.lower() not in (b"content-type", b"content-length")
    )

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": body,
        }
    )


async def send_streaming_response(
    response: StreamingResponse,
    send: Send,
    *,
    path: str = "",
    reporter: ErrorReporter = log_proxy_error,
) -> None:
    """Relay an upstream response.

    Headers go out as the origin sent them (hop-by-hop already removed),
    so upstream ``Content-Length`` framing is kept. If the upstream
    fails mid-body the error goes to *reporter* and the body is closed;
    the status line has already been sent and cannot change.
    """
    raw_headers = [(name.lower(), value) for name, value in response.headers.raw]

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )

    try:
        async for chunk in response.chunks:
            if chunk:
                await send(
                    {
                        "type": "http.response.body",
                        "body": chunk,
                        "more_body": True,
                    }
                )
    except UpstreamError as exc:
        report(reporter, exc, path)
    finally:
        if response.close is not None:
            await response.close()

    await send(
        {
            "type": "http.response.body",
            "body": b"",
            "more_body": False,
        }
    )
