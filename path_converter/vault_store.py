#!/usr/bin/env python3
"""
Filesystem-backed document store for a notes vault.

Files are addressed by vault-relative, ``/``-joined paths, the same form
the exclusion prefixes are written in. Dot-folders (``.obsidian``, ``.git``,
...) and dot-files are outside the vault index and never surface here.
"""
from __future__ import annotations

import asyncio
import os
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from .logger import StoreError, get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FileHandle:
    """A regular file inside the vault."""

    path: str

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def extension(self) -> str:
        name = self.name
        if "." not in name:
            return ""
        return name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class FolderHandle:
    """A directory inside the vault."""

    path: str


AbstractFile = Union[FileHandle, FolderHandle]


def is_windows() -> bool:
    """Host OS detection used by the ``auto`` separator convention."""
    return sys.platform.startswith("win")


def _is_hidden(parts) -> bool:
    return any(part.startswith(".") for part in parts)


class VaultStore:
    """Read, write and enumerate Markdown notes below ``root``."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root).resolve()

    def resolve(self, handle: AbstractFile) -> Path:
        return self.root.joinpath(*handle.path.split("/"))

    def relative_path(self, path: Union[str, Path]) -> Optional[str]:
        """Vault-relative ``/`` path for ``path``, or None when outside the vault."""
        p = Path(path)
        if not p.is_absolute():
            p = self.root / p
        try:
            rel = p.resolve().relative_to(self.root)
        except (OSError, ValueError):
            return None
        if not rel.parts:
            return None
        return "/".join(rel.parts)

    def get_abstract_file(self, path: Union[str, Path]) -> Optional[AbstractFile]:
        rel = self.relative_path(path)
        if rel is None or _is_hidden(rel.split("/")):
            return None
        p = self.root.joinpath(*rel.split("/"))
        if p.is_dir():
            return FolderHandle(rel)
        if p.is_file():
            return FileHandle(rel)
        return None

    def list_markdown_files(self) -> List[FileHandle]:
        files: List[FileHandle] = []
        for dirpath, dirnames, filenames in os.walk(self.root):
            # prune dot-folders in place so os.walk skips them
            dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
            rel_dir = Path(dirpath).relative_to(self.root).parts
            for filename in sorted(filenames):
                if filename.startswith("."):
                    continue
                handle = FileHandle("/".join(rel_dir + (filename,)))
                if handle.extension == "md":
                    files.append(handle)
        return files

    def _read_text(self, handle: FileHandle) -> str:
        p = self.resolve(handle)
        try:
            # newline="" keeps CRLF files byte-identical on write-back
            with open(p, "r", encoding="utf-8", newline="") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise StoreError(f"Failed to read {handle.path}: {exc}") from exc

    def _write_text(self, handle: FileHandle, text: str) -> None:
        """Atomically replace the file contents."""
        p = self.resolve(handle)
        temp_path = p.with_name(f".{p.name}.tmp.{uuid.uuid4().hex[:8]}")
        try:
            mode = p.stat().st_mode if p.exists() else None
            with open(temp_path, "w", encoding="utf-8", newline="") as f:
                f.write(text)
            if mode is not None:
                os.chmod(temp_path, mode)
            temp_path.replace(p)
        except OSError as exc:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
            raise StoreError(f"Failed to write {handle.path}: {exc}") from exc

    async def read(self, handle: FileHandle) -> str:
        return await asyncio.to_thread(self._read_text, handle)

    async def write(self, handle: FileHandle, text: str) -> None:
        await asyncio.to_thread(self._write_text, handle, text)
        logger.debug("wrote %s (%d chars)", handle.path, len(text))


__all__ = [
    "AbstractFile",
    "FileHandle",
    "FolderHandle",
    "VaultStore",
    "is_windows",
]
