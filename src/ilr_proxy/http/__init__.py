"""HTTP primitives — Headers, inbound Request, and proxy responses."""

from ilr_proxy.http.headers import Headers
from ilr_proxy.http.request import Request
from ilr_proxy.http.response import AnyResponse, Response, StreamingResponse

__all__ = ["AnyResponse", "Headers", "Request", "Response", "StreamingResponse"]
