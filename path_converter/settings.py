#!/usr/bin/env python3
"""
Persisted plugin settings.

The on-disk blob keeps the host's shape, ``{"osType": str, "excludedFolders": str}``
with the folders comma separated. Loading merges the blob over the defaults
key by key and never fails; anything unreadable falls back to the default.
"""
import json
import os
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logger import get_logger
from .watch_core.eligibility import OS_AUTO, OS_TYPES, parse_excluded_folders

logger = get_logger(__name__)

DEFAULT_EXCLUDED_FOLDERS = ("node/mx", "ex/te")


@dataclass
class Settings:
    os_type: str = OS_AUTO
    excluded_folders: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDED_FOLDERS))

    def to_blob(self) -> Dict[str, str]:
        return {
            "osType": self.os_type,
            "excludedFolders": ",".join(self.excluded_folders),
        }

    def copy(self) -> "Settings":
        return Settings(self.os_type, list(self.excluded_folders))


DEFAULT_SETTINGS = Settings()


def merge_settings(blob: Optional[Dict[str, Any]]) -> Settings:
    """Overlay a loaded blob on the defaults; unknown keys are ignored."""
    settings = DEFAULT_SETTINGS.copy()
    if not isinstance(blob, dict):
        return settings

    os_type = blob.get("osType")
    if os_type is not None:
        if os_type in OS_TYPES:
            settings.os_type = os_type
        else:
            logger.warning("Unknown osType %r in settings, using %r", os_type, settings.os_type)

    folders = blob.get("excludedFolders")
    if isinstance(folders, str):
        settings.excluded_folders = parse_excluded_folders(folders)
    elif isinstance(folders, list):
        settings.excluded_folders = parse_excluded_folders(",".join(str(f) for f in folders))
    elif folders is not None:
        logger.warning("Ignoring excludedFolders of type %s", type(folders).__name__)
    return settings


class SettingsStore:
    """Loads and saves the settings blob as JSON at ``path``."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> Settings:
        if not self.path.exists():
            return merge_settings(None)
        try:
            with open(self.path, "r", encoding="utf-8-sig") as f:
                blob = json.load(f)
        except (json.JSONDecodeError, ValueError, OSError) as e:
            logger.warning("Failed to read settings from %s: %s", self.path, e)
            blob = None
        return merge_settings(blob)

    def save(self, settings: Settings) -> None:
        """Atomically write settings to prevent a half-written blob."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(f".tmp.{uuid.uuid4().hex[:8]}")
        try:
            with open(temp_path, "w", encoding="utf-8") as f:
                json.dump(settings.to_blob(), f, indent=2, ensure_ascii=False)
            temp_path.replace(self.path)
        except Exception:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise
        logger.debug("saved settings to %s", self.path)


__all__ = ["DEFAULT_SETTINGS", "Settings", "SettingsStore", "merge_settings"]
