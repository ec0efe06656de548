"""Convert command: one-shot sweep over the whole vault."""
from __future__ import annotations

import argparse

from cli.core import build_plugin, output_json, run_async


def cmd_convert(args: argparse.Namespace) -> None:
    plugin = build_plugin(getattr(args, "path", "."))
    result = run_async(plugin.process_all_files())
    output_json(
        {
            "ok": result.error_count == 0,
            "vault": str(plugin.store.root),
            "os_type": plugin.settings.os_type,
            "total": result.total,
            "success_count": result.success_count,
            "error_count": result.error_count,
        }
    )
