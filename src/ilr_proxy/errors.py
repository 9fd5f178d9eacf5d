"""ilr-proxy exception hierarchy.

Shared across config, routing, the proxy engine, and the CLI so every
module raises and catches the same types.
"""


class ProxyError(Exception):
    """Base for all ilr-proxy errors."""


class ConfigurationError(ProxyError):
    """Raised when proxy configuration is missing or invalid.

    Fatal at startup: the CLI logs it and exits before any socket opens.
    """


class UpstreamError(ProxyError):
    """Raised when a forward attempt to an origin cannot complete.

    Wraps the underlying ``httpx`` error (DNS failure, refused connection,
    timeout, reset) together with the origin host that was dialed.
    """

    def __init__(self, host: str, detail: str) -> None:
        self.host = host
        self.detail = detail
        super().__init__(f"{host}: {detail}")
