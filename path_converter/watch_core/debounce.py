"""Debounced triggers used by the watcher."""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Callable, Dict, Hashable, Optional, Set

from .config import LOGGER


class Debouncer:
    """Collapses bursts of calls into at most one execution per quiet window.

    Every call cancels the pending timer and schedules a new one ``wait_ms``
    ahead. With ``leading`` the wrapped function runs on the first call of a
    burst and the trailing timer only closes the window; without it the
    function runs once, with the latest arguments, when the window closes.

    Timers live on the running asyncio loop, so calls must come from the loop
    thread. Awaitable results are scheduled as tasks.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        wait_ms: float = 300,
        leading: bool = False,
        *,
        on_idle: Optional[Callable[[], None]] = None,
    ):
        self._fn = fn
        self.wait = float(wait_ms) / 1000.0
        self.leading = leading
        self._timer: asyncio.TimerHandle | None = None
        self._last_result: Any = None
        self._tasks: Set[asyncio.Future] = set()
        self._on_idle = on_idle

    @property
    def pending(self) -> bool:
        return self._timer is not None

    @property
    def last_result(self) -> Any:
        return self._last_result

    @property
    def tasks(self) -> Set[asyncio.Future]:
        return set(self._tasks)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        loop = asyncio.get_running_loop()
        was_pending = self._timer is not None
        if was_pending:
            self._timer.cancel()
        if self.leading and not was_pending:
            self._last_result = self._invoke(args, kwargs)
        self._timer = loop.call_later(self.wait, self._fire, args, kwargs)
        return self._last_result

    def cancel(self) -> None:
        """Discard the pending window without invoking the function."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, args, kwargs) -> None:
        self._timer = None
        try:
            if not self.leading:
                self._last_result = self._invoke(args, kwargs)
        finally:
            if self._on_idle is not None:
                self._on_idle()

    def _invoke(self, args, kwargs) -> Any:
        result = self._fn(*args, **kwargs)
        if inspect.isawaitable(result):
            task = asyncio.ensure_future(result)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return task
        return result


def make_debouncer(fn: Callable[..., Any], wait_ms: float = 300, leading: bool = False) -> Debouncer:
    return Debouncer(fn, wait_ms, leading)


def _first_arg(*args: Any, **kwargs: Any) -> Hashable:
    return args[0]


class KeyedDebouncer:
    """One independent :class:`Debouncer` per key.

    A burst on one key never resets or suppresses the window of another.
    Idle debouncers are dropped once their window closes.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        wait_ms: float = 300,
        leading: bool = False,
        *,
        key: Callable[..., Hashable] = _first_arg,
    ):
        self._fn = fn
        self.wait_ms = wait_ms
        self.leading = leading
        self._key = key
        self._debouncers: Dict[Hashable, Debouncer] = {}
        # tasks still running after their debouncer went idle
        self._tasks: Set[asyncio.Future] = set()

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        k = self._key(*args, **kwargs)
        debouncer = self._debouncers.get(k)
        if debouncer is None:
            debouncer = Debouncer(
                self._fn, self.wait_ms, self.leading, on_idle=lambda: self._forget(k)
            )
            self._debouncers[k] = debouncer
        return debouncer(*args, **kwargs)

    def pending_keys(self) -> Set[Hashable]:
        return {k for k, d in self._debouncers.items() if d.pending}

    def tasks(self) -> Set[asyncio.Future]:
        out: Set[asyncio.Future] = set(self._tasks)
        for d in self._debouncers.values():
            out |= d.tasks
        return out

    def cancel(self, key: Optional[Hashable] = None) -> None:
        """Cancel the window for ``key``, or every window when ``key`` is None."""
        if key is not None:
            debouncer = self._debouncers.pop(key, None)
            if debouncer is not None:
                debouncer.cancel()
            return
        count = len(self._debouncers)
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        self._debouncers.clear()
        if count:
            LOGGER.debug("cancelled %d pending debounce window(s)", count)

    def _forget(self, key: Hashable) -> None:
        debouncer = self._debouncers.get(key)
        if debouncer is not None and not debouncer.pending:
            del self._debouncers[key]
            for task in debouncer.tasks:
                self._tasks.add(task)
                task.add_done_callback(self._tasks.discard)


__all__ = ["Debouncer", "KeyedDebouncer", "make_debouncer"]
