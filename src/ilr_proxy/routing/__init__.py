"""Routing — path-prefix rule tables and the Router that evaluates them.

Tables are declared as module constants and never change at runtime.
"""

from ilr_proxy.routing.origin import Origin, OriginLabel, parse_origin
from ilr_proxy.routing.router import Router
from ilr_proxy.routing.rules import (
    LATEST_BIASED,
    LEGACY_BIASED,
    SINGLE_ORIGIN,
    TABLES,
    ForwardedHostPolicy,
    PathRule,
    RuleTable,
    get_table,
)

__all__ = [
    "LATEST_BIASED",
    "LEGACY_BIASED",
    "SINGLE_ORIGIN",
    "TABLES",
    "ForwardedHostPolicy",
    "Origin",
    "OriginLabel",
    "PathRule",
    "Router",
    "RuleTable",
    "get_table",
    "parse_origin",
]
