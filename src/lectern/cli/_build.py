"""``lectern build``: run the asset pipeline without serving."""

import argparse
import sys

from lectern.assets import AssetPipeline
from lectern.cli._resolve import load_site_or_exit
from lectern.errors import AssetError


def run_build(args: argparse.Namespace) -> None:
    """Compile a site's assets into its compiled directory."""
    site = load_site_or_exit(args.target)
    try:
        report = AssetPipeline(site.config).build()
    except AssetError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for path in [*report.copied, *report.compiled]:
        print(f"  {path}")
    if report.skipped:
        print(f"Skipped: {', '.join(report.skipped)}")
