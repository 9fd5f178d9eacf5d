"""ilr-proxy CLI — serve the proxy and inspect its rule tables.

Entry point registered as ``ilr-proxy`` in ``pyproject.toml``::

    [project.scripts]
    ilr-proxy = "ilr_proxy.cli:main"
"""

import argparse
import sys

from ilr_proxy.routing.rules import TABLES


def _add_rules_arg(parser: argparse.ArgumentParser, default: str | None) -> None:
    parser.add_argument(
        "--rules",
        choices=sorted(TABLES),
        default=default,
        help="Rule table to use (default: $PROXY_RULES or latest-biased)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``ilr-proxy`` command."""
    parser = argparse.ArgumentParser(
        prog="ilr-proxy",
        description="Path-routing reverse proxy for an incremental Drupal migration.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- ilr-proxy run ----------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the proxy server")
    _add_rules_arg(run_parser, default=None)
    run_parser.add_argument("--listen", default=None, help="Bind address (default: $LISTEN)")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port (default: $PORT)")
    run_parser.add_argument(
        "--log-level",
        choices=("debug", "info", "warning", "error", "critical"),
        default=None,
        help="Log level (default: $LOG_LEVEL or info)",
    )

    # -- ilr-proxy routes -------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List a rule table")
    _add_rules_arg(routes_parser, default="latest-biased")

    # -- ilr-proxy resolve ------------------------------------------------
    resolve_parser = subparsers.add_parser(
        "resolve", help="Show which origin a path routes to"
    )
    resolve_parser.add_argument("path", help="Request path (e.g. /news/today)")
    resolve_parser.add_argument("--referer", default="", help="Referer URL or path")
    _add_rules_arg(resolve_parser, default="latest-biased")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from ilr_proxy.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from ilr_proxy.cli._routes import run_routes

        run_routes(args)
    elif args.command == "resolve":
        from ilr_proxy.cli._resolve import run_resolve

        run_resolve(args)
