#!/usr/bin/env python3
"""
eligibility.py - File selection and separator convention resolution.

Decides which vault files are considered for path normalization and which
separator the current settings ask for.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from path_converter.normalizer import BACKSLASH, FORWARD_SLASH
from path_converter.vault_store import FileHandle, is_windows as _host_is_windows

MARKDOWN_EXTENSION = "md"

OS_AUTO = "auto"
OS_WINDOWS = "windows"
OS_MACOS = "macos"
OS_TYPES = (OS_AUTO, OS_WINDOWS, OS_MACOS)


def parse_excluded_folders(text: Optional[str]) -> List[str]:
    """Split a comma-separated prefix list, dropping blank entries."""
    if not text:
        return []
    return [s.strip() for s in text.split(",") if s.strip()]


def is_excluded(path: str, excluded_folders: Iterable[str]) -> bool:
    """Plain string-prefix match against the excluded folders.

    Not path-segment aware: ``"ex/te"`` also excludes ``"ex/text/file.md"``.
    """
    return any(path.startswith(prefix) for prefix in excluded_folders if prefix)


def is_eligible(obj, excluded_folders: Iterable[str] = ()) -> bool:
    """True when ``obj`` is a Markdown file outside every excluded folder."""
    if not isinstance(obj, FileHandle):
        return False
    if obj.extension != MARKDOWN_EXTENSION:
        return False
    return not is_excluded(obj.path, excluded_folders)


def resolve_target_separator(settings, is_windows: Optional[bool] = None) -> str:
    """Separator the configured convention asks for.

    ``is_windows`` overrides host detection for the ``auto`` convention.
    """
    os_type = getattr(settings, "os_type", OS_AUTO)
    if os_type == OS_WINDOWS:
        return BACKSLASH
    if os_type == OS_MACOS:
        return FORWARD_SLASH
    if is_windows is None:
        is_windows = _host_is_windows()
    return BACKSLASH if is_windows else FORWARD_SLASH


__all__ = [
    "MARKDOWN_EXTENSION",
    "OS_AUTO",
    "OS_MACOS",
    "OS_TYPES",
    "OS_WINDOWS",
    "is_eligible",
    "is_excluded",
    "parse_excluded_folders",
    "resolve_target_separator",
]
