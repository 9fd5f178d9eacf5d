"""Prefix router with referer fallback for shared paths.

Two ordered linear scans composed together. Tables hold tens of
prefixes, so a scan beats building any index.
"""

from ilr_proxy.routing.origin import OriginLabel
from ilr_proxy.routing.rules import RuleTable


class Router:
    """Resolves a request path (and referer path) to an ``OriginLabel``.

    Holds only a frozen ``RuleTable``; ``resolve()`` is pure and safe to
    call from any number of concurrent handlers.
    """

    __slots__ = ("table",)

    def __init__(self, table: RuleTable) -> None:
        self.table = table

    def resolve(self, path: str, referer_path: str = "") -> OriginLabel:
        """Pick the origin for *path*.

        ``path`` and ``referer_path`` must be path-only strings (no
        scheme, host, query, or fragment). Always returns a label.
        """
        table = self.table

        if table.home_page is not None and (path == "/" or path.startswith("/?")):
            return table.home_page

        label = self._match_primary(path)
        if label is not None:
            return label

        for shared in table.shared_paths:
            if path.startswith(shared):
                label = self._match_primary(referer_path)
                if label is not None:
                    return label
                break

        return table.default

    def _match_primary(self, path: str) -> OriginLabel | None:
        """First primary rule (declared order) whose prefix *path* starts with."""
        for rule in self.table.rules:
            if rule.matches(path):
                return rule.label
        return None

    def __repr__(self) -> str:
        return f"Router({self.table.name!r})"
