"""Normalize command: print a note with converted embed paths."""
from __future__ import annotations

import argparse
import sys


def cmd_normalize(args: argparse.Namespace) -> None:
    from path_converter.normalizer import normalize
    from path_converter.settings import Settings
    from path_converter.watch_core.eligibility import resolve_target_separator

    if args.file == "-":
        content = sys.stdin.read()
    else:
        with open(args.file, "r", encoding="utf-8", newline="") as f:
            content = f.read()
    target = resolve_target_separator(Settings(os_type=args.os_type))
    sys.stdout.write(normalize(content, target))
