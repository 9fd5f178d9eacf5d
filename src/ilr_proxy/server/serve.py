"""Server startup — runs the proxy under pounce.

pounce's ``run()`` takes an import string, but the proxy is a live
``ProxyApp`` object built from validated configuration, so
``pounce.Server`` is used directly with the ASGI callable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ilr_proxy.app import ProxyApp


def run_server(
    app: ProxyApp,
    host: str = "0.0.0.0",
    port: int = 8080,
    *,
    log_level: str = "info",
    request_timeout: float = 30.0,
    keep_alive_timeout: float = 5.0,
) -> None:
    """Serve *app* until shutdown.

    Runs a single worker: the upstream connection pool belongs to one
    event loop, and asyncio already interleaves every in-flight request.

    Args:
        app: The proxy application.
        host: Bind address (default: 0.0.0.0 for all interfaces).
        port: Bind port.
        log_level: Log level (debug, info, warning, error, critical).
        request_timeout: Individual request timeout (seconds). Kept in
            step with the upstream timeout so pounce does not cut off a
            response the engine is still waiting for.
        keep_alive_timeout: Keep-alive connection timeout (seconds).
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        log_level=log_level,
        keep_alive_timeout=keep_alive_timeout,
        request_timeout=request_timeout,
    )
    server = Server(config, app)
    server.run()
