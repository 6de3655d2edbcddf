"""``lectern routes``: list content routes.

Prints PATH, TEMPLATE, and SOURCE for every route in the table.
"""

import argparse
from pathlib import Path

from lectern.cli._resolve import freeze_or_exit, load_site_or_exit


def run_routes(args: argparse.Namespace) -> None:
    """List the route table of a site."""
    site = load_site_or_exit(args.target)
    freeze_or_exit(site)

    state = site.state
    routes = state.routes
    if not routes:
        print("No routes found.")
        return

    content_root = state.config.path("content_dir")
    rows: list[tuple[str, str, str]] = []
    for path in routes:
        source = routes.source(path)
        try:
            shown = str(source.relative_to(content_root))
        except ValueError:
            shown = str(source)
        rows.append((path, routes.template(path) or "-", shown))

    max_path = max(4, *(len(r[0]) for r in rows))
    max_template = max(8, *(len(r[1]) for r in rows))

    fmt = f"{{:<{max_path}}}  {{:<{max_template}}}  {{}}"
    print(fmt.format("PATH", "TEMPLATE", "SOURCE"))
    sep_len = max_path + max_template + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for path, template, source in rows:
        print(fmt.format(path, template, source))

    for collision in routes.collisions:
        print(f"! {collision.path}: {Path(collision.winner).name} replaces {Path(collision.replaced).name}")
