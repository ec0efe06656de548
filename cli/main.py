"""CLI entry point: argparse dispatcher for all subcommands."""
from __future__ import annotations

import argparse
import json
import sys
import traceback


# ---------------------------------------------------------------------------
# Command registry: command name → (module_path, function_name)
# Lazy-imported at dispatch time to keep startup fast.
# ---------------------------------------------------------------------------
COMMANDS = {
    "watch":      ("cli.commands.watch",     "cmd_watch"),
    "convert":    ("cli.commands.convert",   "cmd_convert"),
    "config":     ("cli.commands.config",    "cmd_config"),
    "normalize":  ("cli.commands.normalize", "cmd_normalize"),
}

OS_TYPE_CHOICES = ["auto", "windows", "macos"]


# ---------------------------------------------------------------------------
# Parser builder
# ---------------------------------------------------------------------------
def build_parser() -> argparse.ArgumentParser:
    from cli._version import __version__

    parser = argparse.ArgumentParser(
        prog="path-converter",
        description="Normalize path separators in Markdown image embeds across a notes vault",
    )
    parser.add_argument("--debug", action="store_true", help="Show stack traces on error")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    # watch
    p = sub.add_parser("watch", help="Convert notes as they change (daemon)")
    p.add_argument("path", nargs="?", default=".", help="Vault root to watch")

    # convert
    p = sub.add_parser("convert", help="Convert every Markdown file in the vault now")
    p.add_argument("path", nargs="?", default=".", help="Vault root")

    # config
    p = sub.add_parser("config", help="Show or change the vault's converter settings")
    csub = p.add_subparsers(dest="config_command", required=True)
    cp = csub.add_parser("show", help="Print current settings")
    cp.add_argument("path", nargs="?", default=".", help="Vault root")
    cp = csub.add_parser("set", help="Change settings")
    cp.add_argument("path", nargs="?", default=".", help="Vault root")
    cp.add_argument("--os-type", choices=OS_TYPE_CHOICES, help="Separator convention")
    cp.add_argument(
        "--exclude",
        metavar="PREFIXES",
        help="Comma-separated folder prefixes to skip, e.g. node/mx,ex/te",
    )
    cp.add_argument(
        "--no-convert",
        action="store_true",
        help="Do not convert the vault after changing the separator convention",
    )

    # normalize
    p = sub.add_parser("normalize", help="Print a note with its embed paths normalized")
    p.add_argument("file", nargs="?", default="-", help="Markdown file, or - for stdin")
    p.add_argument("--os-type", choices=OS_TYPE_CHOICES, default="auto", help="Separator convention")

    return parser


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
def main(argv=None) -> None:
    parser = build_parser()
    argv = list(sys.argv[1:] if argv is None else argv)
    debug = False
    if "--debug" in argv:
        debug = True
        argv = [arg for arg in argv if arg != "--debug"]
    args = parser.parse_args(argv)
    args.debug = bool(debug or getattr(args, "debug", False))

    entry = COMMANDS.get(args.command)
    if not entry:
        parser.print_help()
        sys.exit(1)

    mod_path, fn_name = entry
    try:
        import importlib
        mod = importlib.import_module(mod_path)
        fn = getattr(mod, fn_name)
        fn(args)
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, default=str)
        sys.stdout.write("\n")
        if args.debug:
            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
