"""CLI command handlers for bundleconsole.

Version: 0.1.0
"""

from __future__ import annotations

import argparse
import json
import re
import sys

from bundleconsole.config import ConsoleConfig
from bundleconsole.core.console import BundleConsole
from bundleconsole.core.display import LINE_BREAK
from bundleconsole.core.snapshot import SnapshotRegistry
from bundleconsole.server.api import ConsoleAPIServer

_TAG_RE = re.compile(r"<[^>]+>")


def build_console(config: ConsoleConfig) -> BundleConsole:
    if not config.framework.snapshot:
        print("❌ No snapshot configured (use --snapshot or framework.snapshot)", file=sys.stderr)
        sys.exit(1)
    registry = SnapshotRegistry.from_yaml(config.framework.snapshot)
    return BundleConsole(registry, boot_delegation=config.framework.boot_delegation)


def to_plain_text(value: str) -> list[str]:
    """Split a display value on line breaks and drop markup."""
    return [_TAG_RE.sub("", line) for line in value.split(LINE_BREAK) if line]


def handle_serve(config: ConsoleConfig) -> None:
    """Handle `bundleconsole serve`."""
    ConsoleAPIServer(config=config).start()


def handle_list(args: argparse.Namespace, config: ConsoleConfig) -> None:
    """Handle `bundleconsole list`."""
    console = build_console(config)
    data = console.list_data()

    if args.json:
        print(json.dumps(data, indent=2, ensure_ascii=False))
        return

    print("  ".join(data["status"]["text"]))
    if "error" in data:
        print(data["error"])
        return

    print(f"\n{'ID':>5}  {'State':<12} Name")
    print(f"{'-'*5}  {'-'*12} {'-'*40}")
    for bundle in data["data"]:
        print(f"{bundle['id']:>5}  {bundle['state']:<12} {bundle['name']}")


def handle_show(args: argparse.Namespace, config: ConsoleConfig) -> None:
    """Handle `bundleconsole show <identifier>`."""
    console = build_console(config)
    module = console.find(args.identifier)

    if module is None:
        print(f"❌ No bundle matches '{args.identifier}'", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(console.bundle_properties(module), indent=2, ensure_ascii=False))
        return

    info = console.bundle_info(module)
    print(f"\n{'='*60}")
    print(f"  {info['name']} ({info['id']}) - {info['state']}")
    print(f"{'='*60}\n")
    for row in console.details(module):
        lines = to_plain_text(row.value) or [""]
        print(f"{row.label + ':':<22} {lines[0]}")
        for line in lines[1:]:
            print(f"{'':<22} {line}")


def handle_action(args: argparse.Namespace, config: ConsoleConfig) -> None:
    """Handle `bundleconsole action <identifier> <action>`."""
    console = build_console(config)
    result = console.perform_action(args.identifier, args.action)

    if result is None:
        print(f"❌ No bundle matches '{args.identifier}'", file=sys.stderr)
        sys.exit(1)

    if "state" in result:
        print(f"✅ {result['name']} ({result['id']}) is now {result['state']}")
    else:
        print(json.dumps(result))
