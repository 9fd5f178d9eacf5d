"""Failure reporting for forward attempts.

The reporter hook sees every upstream failure; the handler then sends
``bad_gateway()`` to the client. Nothing here retries or reroutes.
"""

import logging
from collections.abc import Callable

from ilr_proxy.http.response import Response

logger = logging.getLogger("ilr_proxy.server")

# Receives (error, original request path)
type ErrorReporter = Callable[[Exception, str], None]


def log_proxy_error(exc: Exception, path: str) -> None:
    """Default reporter: one log line per failed forward."""
    logger.error("Proxy error: %s for path %s.", exc, path)


def report(reporter: ErrorReporter, exc: Exception, path: str) -> None:
    """Call *reporter*, falling back to the log if the hook itself fails."""
    try:
        reporter(exc, path)
    except Exception:
        logger.exception("Error reporter failed for path %s", path)
        log_proxy_error(exc, path)


def bad_gateway() -> Response:
    """Client-facing response for a forward that could not complete."""
    return Response(body="Bad Gateway", status=502)
