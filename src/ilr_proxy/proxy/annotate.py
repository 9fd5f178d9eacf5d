"""Response annotator — tag every proxied response with its origin."""

from ilr_proxy.http.response import AnyResponse

SOURCE_HEADER = "X-ILR-Proxy-Source"


def annotate_response[R: AnyResponse](response: R, dialed_host: str) -> R:
    """Set ``X-ILR-Proxy-Source`` to the host that served *response*.

    Any value the origin already sent under that name is replaced.
    """
    return response.with_replaced_header(SOURCE_HEADER, dialed_host)
