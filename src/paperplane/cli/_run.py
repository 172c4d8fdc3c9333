"""``paperplane run`` — server command.

Resolves an import string to a Mount, configures logging, and starts
the pounce server.
"""

import argparse
import logging
import sys

from paperplane.cli._resolve import as_mount, load_object

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def run_server(args: argparse.Namespace) -> None:
    """Start serving ``args.app``.

    CLI flags override the mount's config. Reloading re-imports the
    import string, so it is only offered to pounce when the string names
    a ``Mount`` itself rather than a bare handler.
    """
    try:
        obj = load_object(args.app)
        app = as_mount(obj, args.app)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    level = (args.log_level or app.config.log_level).upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)

    from paperplane.server.dev import run_server as start

    start(
        app,
        args.host or app.config.host,
        args.port or app.config.port,
        reload=app.config.debug,
        app_path=args.app if obj is app else None,
    )
