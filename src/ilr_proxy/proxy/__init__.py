"""Proxying — request rewriting, response annotation, and forwarding.

    rewrite_request -- derive the outbound request for the chosen origin
    annotate_response -- tag the response with X-ILR-Proxy-Source
    ProxyEngine -- forward once over httpx and relay the response
"""

from ilr_proxy.proxy.annotate import SOURCE_HEADER, annotate_response
from ilr_proxy.proxy.engine import ProxyEngine
from ilr_proxy.proxy.rewrite import (
    HOP_BY_HOP_HEADERS,
    OutboundRequest,
    forwarded_proto,
    rewrite_request,
    strip_hop_by_hop,
)

__all__ = [
    "HOP_BY_HOP_HEADERS",
    "SOURCE_HEADER",
    "OutboundRequest",
    "ProxyEngine",
    "annotate_response",
    "forwarded_proto",
    "rewrite_request",
    "strip_hop_by_hop",
]
