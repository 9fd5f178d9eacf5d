"""Proxy configuration.

ProxyConfig is a frozen dataclass — immutable after creation, built once
at startup (usually via ``from_env()``) and passed explicitly to the app.
"""

import os
from collections.abc import Mapping
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

from ilr_proxy.errors import ConfigurationError
from ilr_proxy.routing.origin import Origin, OriginLabel, parse_origin
from ilr_proxy.routing.rules import RuleTable, get_table

LATEST_URL_VAR = "DRUPAL_LATEST_URL"
LEGACY_URL_VAR = "DRUPAL_LEGACY_URL"

_LEVELS = ("debug", "info", "warning", "error", "critical")


@dataclass(frozen=True, slots=True)
class ProxyConfig:
    """Proxy configuration. Immutable after creation.

    Only ``legacy_url`` and ``port`` are required::

        config = ProxyConfig(
            legacy_url="https://d7.example.edu",
            latest_url="https://d9.example.edu",
            port=8080,
        )
    """

    # Origins
    legacy_url: str
    latest_url: str | None = None
    rules: str = "latest-biased"

    # Server
    port: int = 8080
    listen: str = "0.0.0.0"

    # Upstream
    upstream_timeout: float = 30.0

    # Logging
    log_level: str = "info"

    @property
    def table(self) -> RuleTable:
        """The rule table named by ``rules``."""
        return get_table(self.rules)

    def origins(self) -> dict[OriginLabel, Origin]:
        """Parse and validate the origin URLs the rule table needs.

        Raises:
            ConfigurationError: If a required URL is missing or malformed,
                or the rule table name is unknown.
        """
        table = self.table
        origins: dict[OriginLabel, Origin] = {}
        if OriginLabel.LATEST in table.labels:
            if not self.latest_url:
                msg = f"Error loading {LATEST_URL_VAR} env var."
                raise ConfigurationError(msg)
            origins[OriginLabel.LATEST] = parse_origin(
                OriginLabel.LATEST, self.latest_url, source=LATEST_URL_VAR
            )
        if not self.legacy_url:
            msg = f"Error loading {LEGACY_URL_VAR} env var."
            raise ConfigurationError(msg)
        origins[OriginLabel.LEGACY] = parse_origin(
            OriginLabel.LEGACY, self.legacy_url, source=LEGACY_URL_VAR
        )
        return origins

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        dotenv: bool = True,
        **overrides: object,
    ) -> "ProxyConfig":
        """Build a config from environment variables.

        A ``.env`` file in the working directory is loaded first when
        *dotenv* is true; variables already set in the environment win.
        Keyword *overrides* (e.g. CLI flags) replace environment values;
        ``None`` overrides are ignored.

        Raises:
            ConfigurationError: Naming the first missing or invalid variable.
        """
        if environ is None:
            if dotenv:
                load_dotenv(find_dotenv(usecwd=True), override=False)
            environ = os.environ

        values: dict[str, object] = {
            "latest_url": environ.get(LATEST_URL_VAR),
            "legacy_url": environ.get(LEGACY_URL_VAR),
            "rules": environ.get("PROXY_RULES") or "latest-biased",
            "listen": environ.get("LISTEN") or "0.0.0.0",
            "port": _parse_int(environ, "PORT"),
            "upstream_timeout": _parse_float(environ, "UPSTREAM_TIMEOUT", default=30.0),
            "log_level": (environ.get("LOG_LEVEL") or "info").lower(),
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        if values["log_level"] not in _LEVELS:
            msg = f"Error loading LOG_LEVEL env var: {values['log_level']!r} is not a log level."
            raise ConfigurationError(msg)

        config = cls(**values)  # type: ignore[arg-type]
        # Fail fast: no partial startup on a bad origin URL.
        config.origins()
        if config.port is None:
            msg = "Error loading PORT env var."
            raise ConfigurationError(msg)
        return config


def _parse_int(environ: Mapping[str, str], name: str, default: int | None = None) -> int | None:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        msg = f"Error loading {name} env var: {raw!r} is not an integer."
        raise ConfigurationError(msg) from None


def _parse_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        msg = f"Error loading {name} env var: {raw!r} is not a number."
        raise ConfigurationError(msg) from None
