"""Tests for the batched whole-vault sweep."""
import asyncio

import pytest

from path_converter.vault_store import FileHandle
from path_converter.watch_core.notify import MemoryNotifier
from path_converter.watch_core.orchestrator import BatchOrchestrator, SweepResult

pytestmark = pytest.mark.unit


class CountingNotifier(MemoryNotifier):
    """Records how many files had started when each progress notice went out."""

    def __init__(self, calls):
        super().__init__()
        self.calls = calls
        self.started_at_progress = []

    def notify(self, message, timeout_ms=None):
        super().notify(message, timeout_ms)
        if message.startswith("Processed "):
            self.started_at_progress.append(len(self.calls))


def _files(n):
    return [FileHandle(f"notes/{i:02d}.md") for i in range(n)]


@pytest.mark.asyncio
async def test_sweep_counts_successes_and_failures_in_batches():
    calls = []
    active = {"now": 0, "peak": 0}
    failing = {"notes/03.md", "notes/21.md", "notes/44.md"}

    async def process_one(f):
        calls.append(f.path)
        active["now"] += 1
        active["peak"] = max(active["peak"], active["now"])
        await asyncio.sleep(0.01)
        active["now"] -= 1
        if f.path in failing:
            raise OSError(f"disk error on {f.path}")

    notifier = CountingNotifier(calls)
    orch = BatchOrchestrator(notifier, batch_size=20)
    result = await orch.process_all(_files(45), process_one)

    assert result == SweepResult(success_count=42, error_count=3, total=45)
    assert notifier.started_at_progress == [20, 40, 45]
    assert active["peak"] == 20
    assert sorted(calls) == [f.path for f in _files(45)]
    assert notifier.texts() == [
        "Processing 45 files...",
        "Processed 20/45 files...",
        "Processed 40/45 files...",
        "Processed 45/45 files...",
        "Done! Succeeded: 42, failed: 3",
    ]
    assert not orch.is_processing


@pytest.mark.asyncio
async def test_sweep_filters_ineligible_files():
    seen = []

    async def process_one(f):
        seen.append(f.path)

    orch = BatchOrchestrator(MemoryNotifier(), is_eligible=lambda f: f.path.endswith("1.md"))
    result = await orch.process_all(_files(12), process_one)

    assert seen == ["notes/01.md", "notes/11.md"]
    assert result.total == 2
    assert result.success_count == 2


@pytest.mark.asyncio
async def test_overlapping_sweep_is_a_noop():
    gate = asyncio.Event()
    calls = []

    async def slow(f):
        calls.append(f.path)
        await gate.wait()

    notifier = MemoryNotifier()
    orch = BatchOrchestrator(notifier, batch_size=20)
    first = asyncio.create_task(orch.process_all(_files(3), slow))
    await asyncio.sleep(0)
    assert orch.is_processing

    other_calls = []

    async def should_not_run(f):
        other_calls.append(f.path)

    second = await orch.process_all(_files(5), should_not_run)
    assert second == SweepResult(skipped=True)
    assert other_calls == []
    assert "A conversion is already running, please wait..." in notifier.texts()

    gate.set()
    result = await first
    assert result.success_count == 3
    assert len(calls) == 3
    assert not orch.is_processing


@pytest.mark.asyncio
async def test_processing_flag_cleared_when_sweep_errors():
    def broken_filter(f):
        raise RuntimeError("filter blew up")

    notifier = MemoryNotifier()
    orch = BatchOrchestrator(notifier, is_eligible=broken_filter)

    async def process_one(f):
        return None

    with pytest.raises(RuntimeError):
        await orch.process_all(_files(2), process_one)
    assert not orch.is_processing
    assert notifier.texts()[-1] == "Done! Succeeded: 0, failed: 0"


@pytest.mark.asyncio
async def test_empty_vault_sweep():
    notifier = MemoryNotifier()
    orch = BatchOrchestrator(notifier)

    async def process_one(f):
        raise AssertionError("no files expected")

    result = await orch.process_all([], process_one)
    assert result == SweepResult()
    assert notifier.texts() == ["Processing 0 files...", "Done! Succeeded: 0, failed: 0"]


def test_batch_size_must_be_positive():
    with pytest.raises(ValueError):
        BatchOrchestrator(MemoryNotifier(), batch_size=0)
