"""The proxy application — an ASGI 3.0 callable.

Everything is resolved in ``__init__``: the rule table, the router, and
the origins are frozen values shared read-only by every request. The
only runtime state is the engine's connection pool, opened on lifespan
startup and closed on shutdown.
"""

import logging

import httpx

from ilr_proxy._internal.asgi import Receive, Scope, Send
from ilr_proxy.config import ProxyConfig
from ilr_proxy.proxy.engine import ProxyEngine
from ilr_proxy.routing.origin import Origin, OriginLabel
from ilr_proxy.routing.router import Router
from ilr_proxy.server.errors import ErrorReporter, log_proxy_error
from ilr_proxy.server.handler import handle_request

logger = logging.getLogger("ilr_proxy.server")


class ProxyApp:
    """The path-routing reverse proxy.

    Usage::

        from ilr_proxy import ProxyApp, ProxyConfig

        app = ProxyApp(ProxyConfig.from_env())
        app.run()

    Raises ``ConfigurationError`` from the constructor if an origin URL
    the rule table needs is missing or malformed.
    """

    __slots__ = ("config", "engine", "origins", "reporter", "router")

    def __init__(
        self,
        config: ProxyConfig,
        *,
        reporter: ErrorReporter = log_proxy_error,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.origins: dict[OriginLabel, Origin] = config.origins()
        self.router = Router(config.table)
        self.reporter = reporter
        self.engine = ProxyEngine(timeout=config.upstream_timeout, transport=transport)

    def log_origins(self) -> None:
        """Announce each configured origin."""
        legacy = self.origins.get(OriginLabel.LEGACY)
        latest = self.origins.get(OriginLabel.LATEST)
        logger.info("Routing with the %s rule table.", self.router.table.name)
        if legacy is not None:
            logger.info("Drupal Legacy served from %s.", legacy)
        if latest is not None:
            logger.info("Drupal Latest served from %s.", latest)

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Start serving with pounce (blocks until shutdown)."""
        from ilr_proxy.server.serve import run_server

        _host = host or self.config.listen
        _port = port or self.config.port

        self.log_origins()
        logger.info("Listening on %s:%s", _host, _port)
        run_server(
            self,
            host=_host,
            port=_port,
            log_level=self.config.log_level,
            request_timeout=self.config.upstream_timeout,
        )

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point.

        Handles lifespan scopes directly, then sends HTTP scopes through
        the proxy pipeline.
        """
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        await handle_request(
            scope,
            receive,
            send,
            router=self.router,
            origins=self.origins,
            engine=self.engine,
            reporter=self.reporter,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol: open and close the upstream pool."""
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    await self.engine.open()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                await self.engine.aclose()
                await send({"type": "lifespan.shutdown.complete"})
                return

    def __repr__(self) -> str:
        return f"ProxyApp({self.router.table.name!r})"
