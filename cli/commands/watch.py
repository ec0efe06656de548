"""Watch command: convert notes on change (daemon mode)."""
from __future__ import annotations

import argparse
import sys

from cli.core import run_async, vault_root


def cmd_watch(args: argparse.Namespace) -> None:
    """Watch a vault and convert embed paths as notes change."""
    root = vault_root(getattr(args, "path", "."))

    from path_converter.watch_vault import run_watch

    print(f"Watching {root}", file=sys.stderr)
    try:
        run_async(run_watch(root))
    except KeyboardInterrupt:
        print("\nStopping watcher...", file=sys.stderr)
