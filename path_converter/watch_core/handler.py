"""Watchdog event handler that turns filesystem events into vault change notifications."""

from __future__ import annotations

import asyncio
import os
from typing import Callable, Optional

from watchdog.events import FileSystemEventHandler

from path_converter.vault_store import AbstractFile, VaultStore

from .config import LOGGER

# Change notification kinds
MODIFY = "modify"
SAVE = "save"


class VaultEventHandler(FileSystemEventHandler):
    """Forwards ``(kind, abstract_file)`` pairs to ``on_change``.

    Watchdog calls the ``on_*`` hooks from its observer thread; when a loop
    is given, the callback is marshalled onto that loop's thread.
    """

    def __init__(
        self,
        store: VaultStore,
        on_change: Callable[[str, AbstractFile], None],
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        super().__init__()
        self.store = store
        self.on_change = on_change
        self.loop = loop

    def _emit(self, kind: str, src_path) -> None:
        handle = self.store.get_abstract_file(os.fsdecode(src_path))
        if handle is None:
            return
        if self.loop is None:
            self.on_change(kind, handle)
            return
        try:
            self.loop.call_soon_threadsafe(self.on_change, kind, handle)
        except RuntimeError:
            # loop already closed during shutdown
            LOGGER.debug("dropped %s event for %s after loop shutdown", kind, handle.path)

    def on_modified(self, event):
        if not event.is_directory:
            self._emit(MODIFY, event.src_path)

    def on_created(self, event):
        if not event.is_directory:
            self._emit(MODIFY, event.src_path)

    def on_closed(self, event):
        if not event.is_directory:
            self._emit(SAVE, event.src_path)

    def on_moved(self, event):
        # editors that save through a temp file + rename land here
        if not event.is_directory:
            self._emit(MODIFY, event.dest_path)


__all__ = ["MODIFY", "SAVE", "VaultEventHandler"]
