"""Misc utilities shared across watch_core modules."""

from __future__ import annotations

import sys
from typing import Type

from watchdog.observers import Observer

from path_converter.logger import safe_print


def create_observer(use_polling: bool, observer_cls: Type[Observer] = Observer) -> Observer:
    """Create a watchdog observer based on configuration."""
    if use_polling:
        try:
            from watchdog.observers.polling import PollingObserver  # type: ignore

            obs = PollingObserver()
            safe_print("[watch_mode] Using polling observer for filesystem events", file=sys.stderr)
            return obs
        except ImportError:
            safe_print(
                "[watch_mode] Polling observer unavailable, falling back to default Observer",
                file=sys.stderr,
            )
    return observer_cls()


__all__ = ["create_observer"]
