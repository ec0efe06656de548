"""Config commands: show and edit the persisted converter settings."""
from __future__ import annotations

import argparse

from cli.core import build_plugin, output_json, run_async


def _describe(plugin) -> dict:
    return {
        "vault": str(plugin.store.root),
        "settings_file": str(plugin.settings_store.path),
        "settings": plugin.settings.to_blob(),
        "target_separator": plugin.processor.target_separator(),
    }


def cmd_config(args: argparse.Namespace) -> None:
    from path_converter.settings_panel import SettingsPanel

    plugin = build_plugin(getattr(args, "path", "."))
    if args.config_command == "show":
        output_json({"ok": True, **_describe(plugin)})
        return

    panel = SettingsPanel(plugin)
    out = {"ok": True}
    if args.exclude is not None:
        panel.set_excluded_folders(args.exclude)
    if args.os_type is not None:
        result = run_async(panel.set_os_type(args.os_type, convert=not args.no_convert))
        if not result.skipped:
            out["conversion"] = {
                "total": result.total,
                "success_count": result.success_count,
                "error_count": result.error_count,
            }
            out["ok"] = result.error_count == 0
    out.update(_describe(plugin))
    output_json(out)
