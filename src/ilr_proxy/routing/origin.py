"""Origin labels and resolved upstream destinations.

An ``Origin`` is built once at startup from a base URL and never changes.
Handlers share the same instances without locking.
"""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlsplit

from ilr_proxy.errors import ConfigurationError

_SCHEMES = frozenset({"http", "https"})


class OriginLabel(Enum):
    """Symbolic name for an upstream origin — the router's output."""

    LATEST = "latest"
    LEGACY = "legacy"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Origin:
    """A resolved upstream destination.

    ``host`` is the network location exactly as dialed (``host`` or
    ``host:port``). ``base_path`` is joined in front of every forwarded
    request path and is empty for origins configured without a path.
    """

    label: OriginLabel
    scheme: str
    host: str
    base_path: str = ""

    @property
    def url(self) -> str:
        """Base URL of this origin."""
        return f"{self.scheme}://{self.host}{self.base_path}"

    def join_path(self, path: str) -> str:
        """Join *path* onto the base path with exactly one slash between them."""
        if not self.base_path:
            return path
        base = self.base_path.rstrip("/")
        if not path:
            return base or "/"
        if path.startswith("/"):
            return base + path
        return f"{base}/{path}"

    def __str__(self) -> str:
        return self.url


def parse_origin(label: OriginLabel, raw_url: str, *, source: str = "") -> Origin:
    """Parse a base URL into an ``Origin``.

    Args:
        label: The label this origin serves.
        raw_url: Base URL such as ``https://d7.example.edu``.
        source: Name of the setting the URL came from, used in error
            messages (e.g. ``"DRUPAL_LEGACY_URL"``).

    Raises:
        ConfigurationError: If the URL cannot be parsed or lacks a
            supported scheme or a host.
    """
    where = source or f"{label} origin URL"
    try:
        parts = urlsplit(raw_url.strip())
        # Accessing .port validates a numeric port.
        parts.port  # noqa: B018
    except ValueError as exc:
        msg = f"Error loading {where}: {raw_url!r} is not a valid URL ({exc})."
        raise ConfigurationError(msg) from exc

    scheme = parts.scheme.lower()
    if scheme not in _SCHEMES:
        msg = f"Error loading {where}: {raw_url!r} must start with http:// or https://."
        raise ConfigurationError(msg)
    if not parts.netloc or not parts.hostname:
        msg = f"Error loading {where}: {raw_url!r} has no host."
        raise ConfigurationError(msg)

    # Drop userinfo; host is what gets dialed and reported to clients.
    host = parts.netloc.rpartition("@")[2]
    base_path = parts.path if parts.path not in ("", "/") else ""
    return Origin(label=label, scheme=scheme, host=host, base_path=base_path)
