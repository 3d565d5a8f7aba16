"""
Command line entrypoint for bundleconsole.

Version: 0.1.0
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional

from bundleconsole import __version__
from bundleconsole.cli.commands import handle_action, handle_list, handle_serve, handle_show
from bundleconsole.config import load_config
from bundleconsole.core.actions import REFRESH, REFRESH_PACKAGES, START, STOP, UNINSTALL
from bundleconsole.core.logging_utils import apply_logging_config

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect and control the modules of a framework runtime.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Directory holding bundleconsole.yaml")
    parser.add_argument("--config", default=None, help="Config file, relative to --root unless absolute")
    parser.add_argument("--snapshot", default=None, help="Runtime snapshot to serve (overrides the config)")
    parser.add_argument("--boot-delegation", default=None, help="Boot delegation property (overrides the config)")
    parser.add_argument("--log-level", default=None, help="Log level (overrides the config)")

    subcommands = parser.add_subparsers(dest="command")

    serve_parser = subcommands.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default=None)
    serve_parser.add_argument("--port", type=int, default=None)

    list_parser = subcommands.add_parser("list", help="List installed bundles")
    list_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    show_parser = subcommands.add_parser("show", help="Show the details of one bundle")
    show_parser.add_argument("identifier", help="Bundle id or symbolic-name[:version]")
    show_parser.add_argument("--json", action="store_true", help="Print raw JSON")

    action_parser = subcommands.add_parser("action", help="Start, stop, refresh or uninstall a bundle")
    action_parser.add_argument("identifier", help="Bundle id or symbolic-name[:version]")
    action_parser.add_argument("action", choices=[START, STOP, REFRESH, UNINSTALL, REFRESH_PACKAGES])

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entrypoint for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return

    config = load_config(args.root, config_file=args.config)
    if args.snapshot:
        config.framework.snapshot = args.snapshot
    if args.boot_delegation is not None:
        config.framework.boot_delegation = args.boot_delegation
    if args.log_level:
        config.logging.level = args.log_level

    if args.command == "serve":
        if args.host:
            config.server.host = args.host
        if args.port:
            config.server.port = args.port
        handle_serve(config)
        return

    active_level = apply_logging_config(config.logging)
    logger.debug("Log level set to %s", active_level)

    if args.command == "list":
        handle_list(args, config)
    elif args.command == "show":
        handle_show(args, config)
    elif args.command == "action":
        handle_action(args, config)


if __name__ == "__main__":
    main()
