"""``ilr-proxy resolve`` — dry-run the router for one path.

Accepts the referer the way a browser sends it (a full URL) or as a
bare path, and prints the chosen origin label.
"""

import argparse
from urllib.parse import urlsplit

from ilr_proxy.routing.router import Router
from ilr_proxy.routing.rules import get_table


def run_resolve(args: argparse.Namespace) -> None:
    """Print the label the router picks for ``args.path``."""
    # Not urlsplit: a path such as //news would parse as a netloc.
    path = args.path.partition("#")[0].partition("?")[0] or "/"
    try:
        referer_path = urlsplit(args.referer).path
    except ValueError:
        referer_path = ""

    router = Router(get_table(args.rules))
    print(router.resolve(path, referer_path))
