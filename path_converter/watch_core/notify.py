"""User-visible transient notifications."""

from __future__ import annotations

import sys
from typing import List, Optional, Protocol, Tuple

from path_converter.logger import safe_print

from .config import LOGGER


class Notifier(Protocol):
    def notify(self, message: str, timeout_ms: Optional[int] = None) -> None:
        ...


class ConsoleNotifier:
    """Prints notices to stderr; the timeout is informational only."""

    def __init__(self, stream=None):
        self._stream = stream

    def notify(self, message: str, timeout_ms: Optional[int] = None) -> None:
        LOGGER.debug("notice: %s", message)
        safe_print(f"[notice] {message}", file=self._stream or sys.stderr)


class MemoryNotifier:
    """Keeps notices in memory, for embedding hosts that render them later."""

    def __init__(self):
        self.messages: List[Tuple[str, Optional[int]]] = []

    def notify(self, message: str, timeout_ms: Optional[int] = None) -> None:
        self.messages.append((message, timeout_ms))

    def texts(self) -> List[str]:
        return [m for m, _ in self.messages]


__all__ = ["ConsoleNotifier", "MemoryNotifier", "Notifier"]
