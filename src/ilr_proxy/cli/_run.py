"""``ilr-proxy run`` — validate configuration and start the server.

Configuration comes from the environment (and ``.env``); command-line
flags override it. Any configuration error ends the process with exit
code 1 before a socket is opened.
"""

import argparse
import logging

from ilr_proxy.app import ProxyApp
from ilr_proxy.config import ProxyConfig
from ilr_proxy.errors import ConfigurationError

logger = logging.getLogger("ilr_proxy.cli")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def run_server(args: argparse.Namespace) -> None:
    """Build the config and app, then serve until shutdown."""
    logging.basicConfig(level=(args.log_level or "info").upper(), format=_LOG_FORMAT)

    try:
        config = ProxyConfig.from_env(
            rules=args.rules,
            listen=args.listen,
            port=args.port,
            log_level=args.log_level,
        )
        app = ProxyApp(config)
    except ConfigurationError as exc:
        logger.critical("%s", exc)
        raise SystemExit(1) from exc

    logging.getLogger().setLevel(config.log_level.upper())
    app.run()
