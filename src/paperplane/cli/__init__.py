"""Paperplane CLI — serve a handler from an import string.

Entry point registered as ``paperplane`` in ``pyproject.toml``::

    [project.scripts]
    paperplane = "paperplane.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``paperplane`` command."""
    parser = argparse.ArgumentParser(
        prog="paperplane",
        description="Paperplane — serve pure Request -> Response handlers over ASGI.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- paperplane run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the server")
    run_parser.add_argument(
        "app",
        help="Import string (e.g. myapp:app) naming a Mount or a handler",
    )
    run_parser.add_argument("--host", default=None, help="Bind host address")
    run_parser.add_argument("--port", type=int, default=None, help="Bind port number")
    run_parser.add_argument(
        "--log-level",
        default=None,
        choices=("debug", "info", "warning", "error"),
        help="Logging level (default: from the app config)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from paperplane.cli._run import run_server

        run_server(args)
