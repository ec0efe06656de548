"""Configuration surface: separator convention, excluded folders, convert-all."""

from __future__ import annotations

from typing import Any, Dict, List

from .logger import ConfigurationError, get_logger
from .watch_core.eligibility import OS_AUTO, OS_MACOS, OS_TYPES, OS_WINDOWS, parse_excluded_folders
from .watch_core.orchestrator import SweepResult

logger = get_logger(__name__)

OS_TYPE_LABELS = {
    OS_AUTO: "Detect automatically",
    OS_WINDOWS: "Windows mode (backslash \\)",
    OS_MACOS: "macOS mode (forward slash /)",
}


class SettingsPanel:
    """The three user-facing controls of the plugin.

    Every edit is saved immediately. Switching the separator convention
    also converts the whole vault to the new convention.
    """

    def __init__(self, plugin):
        self.plugin = plugin

    def controls(self) -> List[Dict[str, Any]]:
        settings = self.plugin.settings
        return [
            {
                "name": "Operating system",
                "description": "Choose the path conversion mode",
                "kind": "dropdown",
                "options": dict(OS_TYPE_LABELS),
                "value": settings.os_type,
            },
            {
                "name": "Excluded folders",
                "description": "Folders to skip (use / as separator, separate entries with commas)",
                "kind": "text",
                "placeholder": "node/mx,ex/te",
                "value": ",".join(settings.excluded_folders),
            },
            {
                "name": "Convert all files now",
                "description": "Force reprocessing of every Markdown file",
                "kind": "button",
                "label": "Start conversion",
            },
        ]

    async def set_os_type(self, value: str, *, convert: bool = True) -> SweepResult:
        if value not in OS_TYPES:
            raise ConfigurationError(
                f"Unknown os type {value!r}; expected one of {', '.join(OS_TYPES)}"
            )
        self.plugin.settings.os_type = value
        self.plugin.save_settings()
        logger.info("separator convention set to %s", value)
        if not convert:
            return SweepResult(skipped=True)
        result = await self.plugin.process_all_files()
        if not result.skipped:
            self.plugin.notifier.notify("Automatic conversion finished!")
        return result

    def set_excluded_folders(self, value: str) -> List[str]:
        self.plugin.settings.excluded_folders = parse_excluded_folders(value)
        self.plugin.save_settings()
        logger.info("excluded folders set to %s", self.plugin.settings.excluded_folders)
        return self.plugin.settings.excluded_folders

    async def convert_all(self) -> SweepResult:
        result = await self.plugin.process_all_files()
        if not result.skipped:
            self.plugin.notifier.notify("Manual conversion finished!")
        return result


__all__ = ["OS_TYPE_LABELS", "SettingsPanel"]
