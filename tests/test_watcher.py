from __future__ import annotations

import json
from types import SimpleNamespace

from chatcal.store import RecordStore
from chatcal.watcher import ImportFolderHandler, ImportFolderWatcher


EXPORT = {"chat_list": [{"chat_id": "d1", "messages": [{"role": "user", "content": "hi"}]}]}


def _event(path, event_type="created", is_directory=False):
    return SimpleNamespace(src_path=str(path), event_type=event_type, is_directory=is_directory)


def _handler(store):
    handler = ImportFolderHandler(store)
    handler.settle_delay = 0
    return handler


def test_new_json_file_is_imported_once(tmp_path):
    store = RecordStore()
    handler = _handler(store)
    path = tmp_path / "deepseek_export.json"
    path.write_text(json.dumps(EXPORT), encoding="utf-8")

    handler.on_any_event(_event(path))
    assert [r.id for r in store.snapshot()] == ["d1"]

    # Same mtime -> ignored
    handler.on_any_event(_event(path, "modified"))
    assert len(store.snapshot()) == 1


def test_non_json_and_irrelevant_events_are_ignored(tmp_path):
    store = RecordStore()
    handler = _handler(store)
    txt = tmp_path / "notes.txt"
    txt.write_text("hello", encoding="utf-8")
    js = tmp_path / "chatgpt.json"
    js.write_text(json.dumps({"conversations": [{"conversation": "x"}]}), encoding="utf-8")

    handler.on_any_event(_event(txt))
    handler.on_any_event(_event(js, "deleted"))
    handler.on_any_event(_event(tmp_path, "created", is_directory=True))
    assert store.snapshot() == ()


def test_broken_file_does_not_raise(tmp_path):
    store = RecordStore()
    path = tmp_path / "broken.json"
    path.write_text("{nope", encoding="utf-8")
    result = _handler(store).import_file(path)
    assert result.outcomes[0].error_code == "MALFORMED_JSON"
    assert store.snapshot() == ()


def test_watcher_refuses_missing_folder(tmp_path):
    watcher = ImportFolderWatcher(tmp_path / "missing", RecordStore())
    assert watcher.start() is False
    watcher.stop()
