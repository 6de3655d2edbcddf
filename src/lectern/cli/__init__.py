"""Lectern CLI: serve, inspect, validate, and build a site.

Entry point registered as ``lectern`` in ``pyproject.toml``::

    [project.scripts]
    lectern = "lectern.cli:main"

Every command takes a TARGET: a site directory (laid out by convention)
or a ``module:attribute`` import string naming a ``Site``.
"""

import argparse
import logging
import sys


def _add_target(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "target",
        help="Site directory or import string (e.g. mysite.app:site)",
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``lectern`` command."""
    parser = argparse.ArgumentParser(
        prog="lectern",
        description="Lectern: a filesystem-driven content server.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command")

    # -- lectern run ------------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    _add_target(run_parser)
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode (reload on content changes, tracebacks in 500 pages)",
    )
    run_parser.add_argument(
        "--build-assets",
        action="store_true",
        help="Compile assets before the site loads",
    )

    # -- lectern routes ---------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List content routes")
    _add_target(routes_parser)

    # -- lectern check ----------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate routes and modules")
    _add_target(check_parser)

    # -- lectern build ----------------------------------------------------
    build_parser = subparsers.add_parser("build", help="Compile assets only")
    _add_target(build_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "run":
        from lectern.cli._run import run_server

        run_server(args)
    elif args.command == "routes":
        from lectern.cli._routes import run_routes

        run_routes(args)
    elif args.command == "check":
        from lectern.cli._check import run_check

        run_check(args)
    elif args.command == "build":
        from lectern.cli._build import run_build

        run_build(args)
