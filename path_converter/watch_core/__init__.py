"""Core building blocks for the vault watcher.

Modules:
    config: shared configuration constants and logger
    eligibility: file selection and separator convention resolution
    debounce: per-call and per-file debounced triggers
    handler: watchdog event handler logic
    processor: single-file read/normalize/write-back
    orchestrator: batched whole-vault sweep
    notify: user-visible notifications
"""

from . import config, eligibility, debounce, notify, processor, orchestrator, handler, utils

__all__ = [
    "config",
    "eligibility",
    "debounce",
    "notify",
    "processor",
    "orchestrator",
    "handler",
    "utils",
]
