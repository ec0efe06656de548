"""Shared configuration and logging helpers for the vault watcher."""

from __future__ import annotations

import os
from pathlib import Path

from path_converter.logger import get_logger, safe_bool, safe_int


def build_logger():
    return get_logger("path_converter.watch")


LOGGER = build_logger()

ROOT = Path(os.environ.get("PATH_CONVERTER_VAULT", ".")).resolve()

# Quiet window for change notifications on the same file
DEBOUNCE_MS = safe_int(
    os.environ.get("PATH_CONVERTER_DEBOUNCE_MS"), 500, logger=LOGGER, context="PATH_CONVERTER_DEBOUNCE_MS"
)
DEBOUNCE_LEADING = safe_bool(
    os.environ.get("PATH_CONVERTER_DEBOUNCE_LEADING"), True, logger=LOGGER, context="PATH_CONVERTER_DEBOUNCE_LEADING"
)

# Files processed concurrently per sweep batch
BATCH_SIZE = max(
    1,
    safe_int(os.environ.get("PATH_CONVERTER_BATCH_SIZE"), 20, logger=LOGGER, context="PATH_CONVERTER_BATCH_SIZE"),
)

USE_POLLING = safe_bool(os.environ.get("PATH_CONVERTER_USE_POLLING"), False)

SETTINGS_RELPATH = Path(".obsidian") / "plugins" / "path-converter" / "data.json"


def settings_path(vault_root: Path) -> Path:
    """Location of the persisted settings blob for ``vault_root``."""
    override = os.environ.get("PATH_CONVERTER_SETTINGS", "").strip()
    if override:
        return Path(override).expanduser()
    return Path(vault_root) / SETTINGS_RELPATH
