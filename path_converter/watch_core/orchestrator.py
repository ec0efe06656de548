"""Whole-vault sweep driven in fixed-size concurrent batches."""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Iterable, Optional

from path_converter.logger import ContextLogger
from path_converter.vault_store import FileHandle

from .config import BATCH_SIZE, LOGGER
from .notify import Notifier


@dataclass
class SweepResult:
    success_count: int = 0
    error_count: int = 0
    total: int = 0
    skipped: bool = False


class BatchOrchestrator:
    """Runs one sweep at a time over an enumerated file list.

    Files inside a batch are processed concurrently; batches run strictly one
    after another. A failing file is counted and logged and never stops the
    rest of the sweep.
    """

    def __init__(
        self,
        notifier: Notifier,
        *,
        batch_size: int = BATCH_SIZE,
        is_eligible: Optional[Callable[[FileHandle], bool]] = None,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.notifier = notifier
        self.batch_size = batch_size
        self._is_eligible = is_eligible or (lambda f: True)
        self._processing = False

    @property
    def is_processing(self) -> bool:
        return self._processing

    async def process_all(
        self,
        files: Iterable[FileHandle],
        process_one: Callable[[FileHandle], Awaitable[object]],
    ) -> SweepResult:
        if self._processing:
            self.notifier.notify("A conversion is already running, please wait...")
            LOGGER.info("sweep requested while another sweep is running; ignored")
            return SweepResult(skipped=True)

        self._processing = True
        result = SweepResult()
        log = ContextLogger(LOGGER, sweep_id=uuid.uuid4().hex[:8])
        try:
            eligible = [f for f in files if self._is_eligible(f)]
            result.total = len(eligible)
            self.notifier.notify(f"Processing {result.total} files...", 5000)
            log.info("sweep started", total=result.total, batch_size=self.batch_size)

            for start in range(0, result.total, self.batch_size):
                batch = eligible[start:start + self.batch_size]
                outcomes = await asyncio.gather(
                    *(process_one(f) for f in batch), return_exceptions=True
                )
                for file, outcome in zip(batch, outcomes):
                    if isinstance(outcome, Exception):
                        result.error_count += 1
                        log.error(
                            f"Failed to process {file.path}",
                            exc_info=(type(outcome), outcome, outcome.__traceback__),
                            file=file.path,
                        )
                    elif isinstance(outcome, BaseException):
                        raise outcome
                    else:
                        result.success_count += 1
                done = min(start + self.batch_size, result.total)
                self.notifier.notify(f"Processed {done}/{result.total} files...", 3000)
        finally:
            self._processing = False
            self.notifier.notify(
                f"Done! Succeeded: {result.success_count}, failed: {result.error_count}",
                10000,
            )
            log.info(
                "sweep finished",
                success=result.success_count,
                errors=result.error_count,
            )
        return result


__all__ = ["BatchOrchestrator", "SweepResult"]
