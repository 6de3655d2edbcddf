"""``lectern run``: start the pounce server for a site."""

import argparse

from lectern.cli._resolve import freeze_or_exit, load_site_or_exit


def run_server(args: argparse.Namespace) -> None:
    """Resolve the target, apply CLI overrides, and serve it.

    Content, module, and asset errors are reported before the server
    binds its port.
    """
    site = load_site_or_exit(args.target)

    changes: dict[str, object] = {}
    if args.host:
        changes["host"] = args.host
    if args.port:
        changes["port"] = args.port
    if args.debug:
        changes["debug"] = True
    if args.build_assets:
        changes["build_assets"] = True
    if changes:
        site.configure(**changes)

    freeze_or_exit(site)

    # Reload re-imports import-string targets; directory targets reload in place
    app_path = args.target if ":" in args.target else None
    site.run(app_path=app_path)
