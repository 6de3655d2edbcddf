"""``lectern check``: validate a site before serving it.

Exits with code 1 if errors are found.
"""

import argparse

from lectern.cli._resolve import freeze_or_exit, load_site_or_exit


def run_check(args: argparse.Namespace) -> None:
    """Load the site and delegate to ``Site.check()``."""
    site = load_site_or_exit(args.target)
    freeze_or_exit(site)
    site.check()
