#!/usr/bin/env python3
from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import Optional, Union

from path_converter.logger import safe_print
from path_converter.plugin import PathConverterPlugin
from path_converter.watch_core.config import (
    DEBOUNCE_LEADING,
    DEBOUNCE_MS,
    LOGGER,
    ROOT as WATCH_ROOT,
)
from path_converter.watch_core.notify import Notifier

logger = LOGGER


async def run_watch(
    root: Union[str, Path] = WATCH_ROOT,
    *,
    notifier: Optional[Notifier] = None,
    stop: Optional[asyncio.Event] = None,
) -> None:
    """Watch ``root`` until cancelled or until ``stop`` is set."""
    plugin = PathConverterPlugin.for_vault(root, notifier=notifier)
    await plugin.on_load()
    safe_print(
        f"Watch mode: vault={plugin.store.root} convention={plugin.settings.os_type} "
        f"separator={plugin.processor.target_separator()!r} "
        f"debounce={DEBOUNCE_MS}ms leading={DEBOUNCE_LEADING}",
        file=sys.stderr,
    )
    try:
        while stop is None or not stop.is_set():
            await asyncio.sleep(1.0 if stop is None else 0.05)
    finally:
        plugin.on_unload()


def main() -> None:
    root = Path(sys.argv[1]).resolve() if len(sys.argv) > 1 else WATCH_ROOT
    try:
        asyncio.run(run_watch(root))
    except KeyboardInterrupt:
        safe_print("\nStopping watcher...", file=sys.stderr)


if __name__ == "__main__":
    main()
