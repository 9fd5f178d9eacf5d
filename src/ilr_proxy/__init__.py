"""ilr-proxy — path-routing reverse proxy for an incremental site migration.

Sends each request to the "latest" or "legacy" origin by URL path
prefix, falling back to the referer for shared endpoints such as
``/views/ajax``, and tags every response with ``X-ILR-Proxy-Source``.

Basic usage::

    from ilr_proxy import ProxyApp, ProxyConfig

    app = ProxyApp(ProxyConfig.from_env())
    app.run()

Routing only::

    from ilr_proxy import LATEST_BIASED, Router

    Router(LATEST_BIASED).resolve("/news/today", "")  # OriginLabel.LATEST
"""

__version__ = "0.1.0"
__all__ = [
    "LATEST_BIASED",
    "LEGACY_BIASED",
    "SINGLE_ORIGIN",
    "ConfigurationError",
    "Origin",
    "OriginLabel",
    "ProxyApp",
    "ProxyConfig",
    "ProxyError",
    "Router",
    "RuleTable",
    "UpstreamError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import ilr_proxy`` fast; httpx and dotenv load only when the
    app or config is first used.
    """
    if name == "ProxyApp":
        from ilr_proxy.app import ProxyApp

        return ProxyApp

    if name == "ProxyConfig":
        from ilr_proxy.config import ProxyConfig

        return ProxyConfig

    if name in ("ProxyError", "ConfigurationError", "UpstreamError"):
        from ilr_proxy import errors

        return getattr(errors, name)

    if name in ("Origin", "OriginLabel"):
        from ilr_proxy.routing import origin

        return getattr(origin, name)

    if name == "Router":
        from ilr_proxy.routing.router import Router

        return Router

    if name in ("LATEST_BIASED", "LEGACY_BIASED", "SINGLE_ORIGIN", "RuleTable"):
        from ilr_proxy.routing import rules

        return getattr(rules, name)

    msg = f"module 'ilr_proxy' has no attribute {name!r}"
    raise AttributeError(msg)
