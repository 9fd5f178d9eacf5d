"""``ilr-proxy routes`` — print a rule table.

Needs no origin URLs; it only reads the built-in tables.
"""

import argparse

from ilr_proxy.routing.rules import get_table


def run_routes(args: argparse.Namespace) -> None:
    """Print the primary prefixes, shared paths, and fallbacks of a table."""
    table = get_table(args.rules)

    rows: list[tuple[str, str]] = []
    if table.home_page is not None:
        rows.append(("/ (home page)", str(table.home_page)))
    rows.extend((rule.prefix, str(rule.label)) for rule in table.rules)
    rows.extend((shared, "(referer)") for shared in table.shared_paths)
    rows.append(("* (default)", str(table.default)))

    max_prefix = max(max(len(r[0]) for r in rows), 6)  # "PREFIX" header
    fmt = f"{{:<{max_prefix}}}  {{}}"
    print(f"Rule table: {table.name}")
    print(fmt.format("PREFIX", "ORIGIN"))
    print("-" * min(max_prefix + 10, 80))
    for prefix, origin in rows:
        print(fmt.format(prefix, origin))
