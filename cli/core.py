"""Shared helpers for CLI commands."""
from __future__ import annotations

import asyncio
import json
import sys
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any

# Ensure project root is on sys.path (fallback for development mode)
try:
    import path_converter  # noqa: F401
except ImportError:
    ROOT_DIR = Path(__file__).resolve().parent.parent
    if str(ROOT_DIR) not in sys.path:
        sys.path.insert(0, str(ROOT_DIR))


def output_json(data: Any) -> None:
    """Write JSON to stdout; single place for all commands."""
    if is_dataclass(data):
        data = asdict(data)
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def run_async(coro) -> Any:
    """Run an async coroutine from sync CLI context."""
    return asyncio.run(coro)


def vault_root(path: str | None) -> Path:
    root = Path(path or ".").resolve()
    if not root.is_dir():
        from path_converter.logger import ConfigurationError

        raise ConfigurationError(f"Vault folder not found: {root}")
    return root


def build_plugin(path: str | None):
    """Plugin bound to the vault at ``path`` with settings loaded, not watching."""
    from path_converter.plugin import PathConverterPlugin

    plugin = PathConverterPlugin.for_vault(vault_root(path))
    plugin.load_settings()
    return plugin
