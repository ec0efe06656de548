"""Single-file read, normalize and write-back for the watcher."""

from __future__ import annotations

from typing import Callable, Optional, Set

from path_converter.normalizer import normalize
from path_converter.vault_store import FileHandle

from .config import LOGGER as logger
from .eligibility import resolve_target_separator


class FileProcessor:
    """Rewrites embed separators in one file at a time per path.

    A file already being processed is not touched by a second caller;
    the request is remembered and the file is processed once more after the
    current pass finishes, so the latest content is always converted.
    """

    def __init__(
        self,
        store,
        settings_provider: Callable[[], object],
        *,
        is_windows: Optional[bool] = None,
    ):
        self.store = store
        self._settings_provider = settings_provider
        self._is_windows = is_windows
        self._in_flight: Set[str] = set()
        self._rerun: Set[str] = set()

    def in_flight(self, path: str) -> bool:
        return path in self._in_flight

    def target_separator(self) -> str:
        return resolve_target_separator(self._settings_provider(), self._is_windows)

    async def process_file(self, file: FileHandle) -> bool:
        """Convert ``file`` in place. True when new content was written."""
        key = file.path
        if key in self._in_flight:
            self._rerun.add(key)
            logger.debug("[busy] %s queued behind in-flight pass", key)
            return False

        self._in_flight.add(key)
        try:
            changed = await self._convert(file)
            while key in self._rerun:
                self._rerun.discard(key)
                changed = await self._convert(file) or changed
            return changed
        finally:
            self._in_flight.discard(key)
            self._rerun.discard(key)

    async def _convert(self, file: FileHandle) -> bool:
        content = await self.store.read(file)
        new_content = normalize(content, self.target_separator())
        if new_content == content:
            return False
        await self.store.write(file, new_content)
        logger.info("Updated file: %s", file.path)
        return True


__all__ = ["FileProcessor"]
