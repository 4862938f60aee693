"""Whisker CLI — whisker serve / whisker connect.

Entry point for the ``whisker`` command-line interface.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

DEFAULT_CLIENT_CONFIG = Path.home() / ".whisker" / "client.json"


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the whisker CLI."""
    parser = argparse.ArgumentParser(
        prog="whisker",
        description="Push changed source files to live pages.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # whisker serve
    serve_parser = subparsers.add_parser(
        "serve",
        help="Watch a directory and broadcast changed files",
    )
    serve_parser.add_argument("root", nargs="?", default=".", help="Directory to watch")
    serve_parser.add_argument("--host", default=None, help="Bind address (default localhost)")
    serve_parser.add_argument("--port", type=int, default=None, help="Bind port (default 8888)")
    serve_parser.add_argument(
        "--glob",
        action="append",
        dest="patterns",
        default=None,
        help="Watched file pattern, repeatable (default **/*.js and **/*.css)",
    )
    serve_parser.add_argument(
        "--verbose", "-v", action="store_true", default=None, help="Log pipeline activity",
    )

    # whisker connect
    connect_parser = subparsers.add_parser(
        "connect",
        help="Connect to an update server as a client",
    )
    connect_parser.add_argument("hostname", help="Hostname of the page being developed")
    connect_parser.add_argument(
        "--config",
        default=str(DEFAULT_CLIENT_CONFIG),
        help="Client configuration file",
    )
    connect_parser.add_argument(
        "--enable", action="store_true", help="Enable updates for this hostname first",
    )
    connect_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Show session log lines",
    )

    return parser


def _get_version() -> str:
    """Get the package version."""
    from whisker import __version__

    return __version__


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    from whisker.app import connect, serve

    if args.command == "serve":
        serve(
            root=args.root,
            host=args.host,
            port=args.port,
            patterns=tuple(args.patterns) if args.patterns else None,
            verbose=args.verbose,
        )
    elif args.command == "connect":
        sys.exit(
            connect(args.hostname, args.config, enable=args.enable, verbose=args.verbose)
        )


if __name__ == "__main__":
    main()
