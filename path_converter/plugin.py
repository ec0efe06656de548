#!/usr/bin/env python3
"""
Host lifecycle for the path converter.

Wires the vault store, change notifications, per-file debounce, single-file
processor and sweep orchestrator together:

    change event -> eligibility -> debounce (per file) -> read -> normalize -> write

A sweep runs the same read/normalize/write path over every Markdown file,
bypassing the debounce layer.
"""
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from .logger import get_logger
from .settings import DEFAULT_SETTINGS, Settings, SettingsStore
from .settings_panel import SettingsPanel
from .vault_store import AbstractFile, FileHandle, VaultStore
from .watch_core.config import (
    BATCH_SIZE,
    DEBOUNCE_LEADING,
    DEBOUNCE_MS,
    USE_POLLING,
    settings_path,
)
from .watch_core.debounce import KeyedDebouncer
from .watch_core.eligibility import is_eligible
from .watch_core.handler import VaultEventHandler
from .watch_core.notify import ConsoleNotifier, Notifier
from .watch_core.orchestrator import BatchOrchestrator, SweepResult
from .watch_core.processor import FileProcessor
from .watch_core.utils import create_observer

logger = get_logger(__name__)


class PathConverterPlugin:
    def __init__(
        self,
        store: VaultStore,
        *,
        settings_store: Optional[SettingsStore] = None,
        notifier: Optional[Notifier] = None,
        debounce_ms: float = DEBOUNCE_MS,
        leading: bool = DEBOUNCE_LEADING,
        batch_size: int = BATCH_SIZE,
        is_windows: Optional[bool] = None,
        use_polling: bool = USE_POLLING,
    ):
        self.store = store
        self.settings_store = settings_store
        self.notifier = notifier or ConsoleNotifier()
        self.settings: Settings = DEFAULT_SETTINGS.copy()
        self.use_polling = use_polling
        self.processor = FileProcessor(store, lambda: self.settings, is_windows=is_windows)
        self.orchestrator = BatchOrchestrator(
            self.notifier, batch_size=batch_size, is_eligible=self.should_process_file
        )
        self.debounced_process_file = KeyedDebouncer(
            self._process_changed, debounce_ms, leading, key=lambda f: f.path
        )
        self.panel = None
        self._observer = None

    @classmethod
    def for_vault(
        cls, root: Union[str, Path], notifier: Optional[Notifier] = None, **kwargs
    ) -> "PathConverterPlugin":
        """Plugin for ``root`` with settings persisted in the vault's config folder."""
        store = VaultStore(root)
        return cls(
            store,
            settings_store=SettingsStore(settings_path(store.root)),
            notifier=notifier,
            **kwargs,
        )

    @property
    def is_processing(self) -> bool:
        return self.orchestrator.is_processing

    async def on_load(self, *, watch: bool = True) -> None:
        logger.info("Path converter loaded for %s", self.store.root)
        self.load_settings()
        self.panel = SettingsPanel(self)
        if watch:
            self._observer = self._subscribe(asyncio.get_running_loop())

    def on_unload(self) -> None:
        self.debounced_process_file.cancel()
        if self._observer is not None:
            self._observer.stop()
            self._observer.join()
            self._observer = None
        logger.info("Path converter unloaded")

    def _subscribe(self, loop: asyncio.AbstractEventLoop):
        handler = VaultEventHandler(self.store, self.on_vault_event, loop)
        obs = create_observer(self.use_polling)
        obs.schedule(handler, str(self.store.root), recursive=True)
        obs.start()
        return obs

    def should_process_file(self, file: Optional[AbstractFile]) -> bool:
        return is_eligible(file, self.settings.excluded_folders)

    def on_vault_event(self, kind: str, file: AbstractFile) -> None:
        if self.should_process_file(file):
            logger.debug("[%s] %s", kind, file.path)
            self.debounced_process_file(file)

    async def _process_changed(self, file: FileHandle) -> None:
        try:
            await self.processor.process_file(file)
        except Exception:
            logger.error("Failed to process %s", file.path, exc_info=True)

    async def process_all_files(self) -> SweepResult:
        if self.orchestrator.is_processing:
            # let the orchestrator report the busy state without walking the vault
            return await self.orchestrator.process_all((), self.processor.process_file)
        files = await asyncio.to_thread(self.store.list_markdown_files)
        return await self.orchestrator.process_all(files, self.processor.process_file)

    def load_settings(self) -> Settings:
        if self.settings_store is not None:
            self.settings = self.settings_store.load()
        else:
            self.settings = DEFAULT_SETTINGS.copy()
        return self.settings

    def save_settings(self) -> None:
        if self.settings_store is not None:
            self.settings_store.save(self.settings)


__all__ = ["PathConverterPlugin"]
