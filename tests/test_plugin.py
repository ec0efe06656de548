#!/usr/bin/env python3
"""
Tests for the plugin lifecycle and its settings panel.

These tests verify that:
1. Change events are filtered, debounced per file and converted
2. The whole-vault sweep converts every eligible note
3. Settings panel edits persist and trigger conversions
4. Unloading cancels pending debounced work
"""
import asyncio
import json

import pytest

from path_converter.logger import ConfigurationError
from path_converter.plugin import PathConverterPlugin
from path_converter.settings import Settings, SettingsStore
from path_converter.vault_store import FileHandle, FolderHandle, VaultStore
from path_converter.watch_core.handler import MODIFY, SAVE
from path_converter.watch_core.notify import MemoryNotifier

pytestmark = pytest.mark.unit


def _plugin(vault, **kwargs):
    kwargs.setdefault("debounce_ms", 50)
    kwargs.setdefault("leading", True)
    kwargs.setdefault("is_windows", False)
    return PathConverterPlugin(
        VaultStore(vault),
        settings_store=SettingsStore(vault / ".obsidian" / "plugins" / "path-converter" / "data.json"),
        notifier=MemoryNotifier(),
        **kwargs,
    )


async def _drain(plugin):
    tasks = plugin.debounced_process_file.tasks()
    if tasks:
        await asyncio.gather(*tasks)


def _read(vault, rel):
    return (vault / rel).read_text(encoding="utf-8")


@pytest.mark.asyncio
async def test_on_load_reads_persisted_settings(vault):
    store = SettingsStore(vault / ".obsidian" / "plugins" / "path-converter" / "data.json")
    store.save(Settings("windows", ["archive"]))
    plugin = _plugin(vault)

    await plugin.on_load(watch=False)

    assert plugin.settings == Settings("windows", ["archive"])
    assert plugin.panel is not None
    assert [c["kind"] for c in plugin.panel.controls()] == ["dropdown", "text", "button"]
    plugin.on_unload()


@pytest.mark.asyncio
async def test_change_event_converts_file(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    await _drain(plugin)

    assert _read(vault, "notes/a.md") == "![cover](images/cover.png)\n"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_ineligible_events_are_ignored(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    plugin.panel.set_excluded_folders("notes/")

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    plugin.on_vault_event(SAVE, FileHandle("images/cover.png"))
    plugin.on_vault_event(MODIFY, FolderHandle("notes"))

    assert plugin.debounced_process_file.pending_keys() == set()
    assert _read(vault, "notes/a.md") == "![cover](images\\cover.png)\n"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_edits_to_different_files_do_not_suppress_each_other(vault):
    (vault / "notes" / "c.md").write_text("![z](img\\z.png)", encoding="utf-8")
    plugin = _plugin(vault, debounce_ms=500)
    await plugin.on_load(watch=False)

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    plugin.on_vault_event(MODIFY, FileHandle("notes/c.md"))
    await _drain(plugin)

    assert _read(vault, "notes/a.md") == "![cover](images/cover.png)\n"
    assert _read(vault, "notes/c.md") == "![z](img/z.png)"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_processing_errors_are_logged_not_raised(vault, caplog):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    (vault / "notes" / "a.md").unlink()

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    await _drain(plugin)

    assert any("notes/a.md" in r.getMessage() for r in caplog.records)
    plugin.on_unload()


@pytest.mark.asyncio
async def test_unload_cancels_pending_trailing_work(vault):
    plugin = _plugin(vault, leading=False)
    await plugin.on_load(watch=False)

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    assert plugin.debounced_process_file.pending_keys() == {"notes/a.md"}
    plugin.on_unload()
    await asyncio.sleep(0.15)

    assert _read(vault, "notes/a.md") == "![cover](images\\cover.png)\n"


@pytest.mark.asyncio
async def test_trailing_mode_converts_after_quiet_window(vault):
    plugin = _plugin(vault, leading=False)
    await plugin.on_load(watch=False)

    plugin.on_vault_event(MODIFY, FileHandle("notes/a.md"))
    plugin.on_vault_event(SAVE, FileHandle("notes/a.md"))
    assert _read(vault, "notes/a.md") == "![cover](images\\cover.png)\n"

    await asyncio.sleep(0.15)
    await _drain(plugin)
    assert _read(vault, "notes/a.md") == "![cover](images/cover.png)\n"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_process_all_files_skips_excluded_and_hidden(vault):
    (vault / "archive").mkdir()
    (vault / "archive" / "old.md").write_text("![o](x\\o.png)", encoding="utf-8")
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    plugin.panel.set_excluded_folders("arch")

    result = await plugin.process_all_files()

    assert (result.total, result.success_count, result.error_count) == (2, 2, 0)
    assert _read(vault, "notes/a.md") == "![cover](images/cover.png)\n"
    assert _read(vault, "archive/old.md") == "![o](x\\o.png)"
    assert _read(vault, ".obsidian/hidden.md") == "![x](a\\b.png)\n"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_set_os_type_saves_and_converts(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    (vault / "notes" / "b.md").write_text("![p](a/b/c.png)", encoding="utf-8")

    result = await plugin.panel.set_os_type("windows")

    assert result.success_count == 2
    assert _read(vault, "notes/b.md") == "![p](a\\b\\c.png)"
    blob = json.loads(plugin.settings_store.path.read_text(encoding="utf-8"))
    assert blob["osType"] == "windows"
    assert plugin.notifier.texts()[-1] == "Automatic conversion finished!"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_set_os_type_without_conversion(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)

    result = await plugin.panel.set_os_type("macos", convert=False)

    assert result.skipped
    assert plugin.settings.os_type == "macos"
    assert _read(vault, "notes/a.md") == "![cover](images\\cover.png)\n"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_invalid_os_type_rejected(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    with pytest.raises(ConfigurationError):
        await plugin.panel.set_os_type("linux")
    assert plugin.settings.os_type == "auto"
    plugin.on_unload()


@pytest.mark.asyncio
async def test_convert_all_notifies_completion(vault):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)

    result = await plugin.panel.convert_all()

    assert result.error_count == 0
    assert plugin.notifier.texts()[-1] == "Manual conversion finished!"
    assert not plugin.is_processing
    plugin.on_unload()


@pytest.mark.asyncio
async def test_sweep_requested_while_busy_does_not_walk_vault(vault, monkeypatch):
    plugin = _plugin(vault)
    await plugin.on_load(watch=False)
    release = asyncio.Event()
    listings = []
    original_list = plugin.store.list_markdown_files

    def counting_list():
        listings.append(1)
        return original_list()

    async def blocked(file):
        await release.wait()
        return False

    monkeypatch.setattr(plugin.store, "list_markdown_files", counting_list)
    monkeypatch.setattr(plugin.processor, "process_file", blocked)

    first = asyncio.create_task(plugin.process_all_files())
    while not plugin.is_processing:
        await asyncio.sleep(0.01)
    second = await plugin.process_all_files()
    release.set()
    done = await first

    assert second.skipped
    assert not done.skipped
    assert listings == [1]
    assert "A conversion is already running, please wait..." in plugin.notifier.texts()
    plugin.on_unload()


@pytest.mark.integration
@pytest.mark.asyncio
async def test_watchdog_observer_converts_saved_note(vault):
    plugin = _plugin(vault, use_polling=True)
    await plugin.on_load(watch=True)
    try:
        # let the observer take its initial snapshot
        await asyncio.sleep(0.5)
        note = vault / "notes" / "b.md"
        note.write_text("![n](new\\pic.png)\n", encoding="utf-8")
        for _ in range(100):
            await asyncio.sleep(0.05)
            if _read(vault, "notes/b.md") == "![n](new/pic.png)\n":
                break
        assert _read(vault, "notes/b.md") == "![n](new/pic.png)\n"
    finally:
        plugin.on_unload()
