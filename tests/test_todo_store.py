"""
Unit tests for TodoStore against a temporary backing file.
"""
from __future__ import annotations

import asyncio
import json
import sys
import time
from pathlib import Path

import pytest

# Make the todo_api package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from todo_api.domain.todos import SEED_TEXTS  # noqa: E402
from todo_api.repositories import json_storage  # noqa: E402
from todo_api.services.todo_store import (  # noqa: E402
    InvalidTodoError,
    TodoNotFoundError,
    TodoStore,
)


@pytest.fixture()
def data_file(tmp_path):
    return tmp_path / "todos.json"


@pytest.fixture()
def store(data_file):
    s = TodoStore(data_file)
    s.load()
    return s


def test_load_seeds_defaults_and_persists_when_file_missing(data_file):
    s = TodoStore(data_file)
    s.load()

    items = s.list()
    assert [i["id"] for i in items] == [1, 2, 3]
    assert [i["text"] for i in items] == list(SEED_TEXTS)
    assert all(i["completed"] is False for i in items)
    assert json.loads(data_file.read_text(encoding="utf-8")) == items


def test_load_adopts_existing_array_verbatim(data_file):
    legacy = [{"id": 7, "text": "  keep spacing  ", "completed": "yes"}, {"odd": True}]
    data_file.write_text(json.dumps(legacy), encoding="utf-8")

    s = TodoStore(data_file)
    s.load()

    assert s.list() == legacy


@pytest.mark.parametrize("content", ["not json", "{\"id\": 1}", ""])
def test_load_falls_back_to_seed_on_unusable_file(data_file, content):
    data_file.write_text(content, encoding="utf-8")

    s = TodoStore(data_file)
    s.load()

    assert [i["text"] for i in s.list()] == list(SEED_TEXTS)
    assert json.loads(data_file.read_text(encoding="utf-8")) == s.list()


def test_load_falls_back_to_seed_on_deeply_nested_file(data_file):
    data_file.write_text("[" * 200000 + "]" * 200000, encoding="utf-8")

    s = TodoStore(data_file)
    s.load()

    assert [i["id"] for i in s.list()] == [1, 2, 3]


def test_insert_trims_text_and_appends(store):
    before = store.list()
    item = store.insert("  write tests  ")

    assert item["text"] == "write tests"
    assert item["completed"] is False
    assert item["createdAt"].endswith("Z")
    assert "updatedAt" not in item
    assert store.list() == before + [item]


@pytest.mark.parametrize("bad", [None, "", "   ", 42, True, ["x"]])
def test_insert_rejects_invalid_text(store, bad):
    before = store.list()
    with pytest.raises(InvalidTodoError):
        store.insert(bad)
    assert store.list() == before


def test_sequential_inserts_get_distinct_ids(store):
    existing = {i["id"] for i in store.list()}
    ids = [store.insert(f"task {n}")["id"] for n in range(50)]

    assert len(set(ids)) == 50
    assert existing.isdisjoint(ids)
    assert ids == sorted(ids)


def test_ids_are_not_reused_after_delete(store):
    last = store.insert("last one")
    store.remove_by_id(last["id"])

    assert store.insert("again")["id"] > last["id"]


def test_id_counter_starts_above_stored_ids(data_file):
    data_file.write_text(json.dumps([{"id": 10**15, "text": "future", "completed": False}]), encoding="utf-8")
    s = TodoStore(data_file)
    s.load()

    assert s.insert("next")["id"] == 10**15 + 1


def test_find_index_by_id(store):
    item = store.insert("find me")
    assert store.find_index_by_id(item["id"]) == 3
    assert store.find_index_by_id(123) is None
    assert store.find_index_by_id(None) is None


def test_update_applies_only_present_fields(store):
    item = store.update_by_id(1, {"completed": True})

    assert item["completed"] is True
    assert item["text"] == SEED_TEXTS[0]
    assert item["updatedAt"].endswith("Z")

    item = store.update_by_id(1, {"text": "  renamed "})
    assert item["text"] == "renamed"
    assert item["completed"] is True


def test_update_with_empty_patch_only_stamps_updated_at(store):
    original = dict(store.list()[1])
    item = store.update_by_id(2, {})

    assert item["text"] == original["text"]
    assert item["completed"] == original["completed"]
    assert "updatedAt" in item


def test_update_unknown_id_raises_not_found(store):
    before = [dict(i) for i in store.list()]
    with pytest.raises(TodoNotFoundError):
        store.update_by_id(999, {"completed": True})
    assert store.list() == before


@pytest.mark.parametrize("patch", [
    {"completed": "true"},
    {"completed": 1},
    {"completed": None},
    {"text": "   "},
    {"text": None},
    {"text": "valid", "completed": "no"},
])
def test_update_rejects_invalid_fields_without_partial_changes(store, patch):
    before = dict(store.list()[0])
    with pytest.raises(InvalidTodoError):
        store.update_by_id(1, patch)
    assert store.list()[0] == before


def test_remove_by_id(store):
    removed = store.remove_by_id(2)

    assert removed["id"] == 2
    assert [i["id"] for i in store.list()] == [1, 3]
    with pytest.raises(TodoNotFoundError):
        store.remove_by_id(2)


def test_stats(store):
    store.update_by_id(1, {"completed": True})
    assert store.stats() == {"total": 3, "completed": 1, "pending": 2, "completionRate": 33}


def test_save_round_trip(store, data_file):
    store.insert("persist me")
    store.update_by_id(3, {"completed": True})
    store.remove_by_id(1)
    assert asyncio.run(store.save()) is True

    reloaded = TodoStore(data_file)
    reloaded.load()
    assert reloaded.list() == store.list()


def test_save_writes_pretty_printed_array(store, data_file):
    asyncio.run(store.save())
    raw = data_file.read_text(encoding="utf-8")
    assert raw.startswith("[\n  {")


def _overlapping_saves(store, text):
    """Start a save, mutate while it is in flight, then save again."""
    async def run():
        first = asyncio.create_task(store.save())
        await asyncio.sleep(0)
        store.insert(text)
        visible = [i["text"] for i in store.list()]
        pending = not first.done()
        second = asyncio.create_task(store.save())
        results = await asyncio.gather(first, second)
        return visible, pending, results

    return asyncio.run(run())


def test_overlapping_saves_snapshot_early_and_write_in_order(store, data_file, monkeypatch):
    real_write = json_storage.write_text
    payloads = []

    def slow_write(path, payload):
        payloads.append(payload)
        if len(payloads) % 2 == 1:
            time.sleep(0.2)
        real_write(path, payload)

    monkeypatch.setattr(json_storage, "write_text", slow_write)

    # twice, each under its own event loop
    for text in ("added mid-save", "added in second loop"):
        visible, pending, results = _overlapping_saves(store, text)

        assert pending
        assert visible[-1] == text
        assert results == [True, True]
        assert text not in payloads[-2]
        assert text in payloads[-1]
        assert json.loads(data_file.read_text(encoding="utf-8")) == store.list()


def test_save_failure_is_reported_not_raised(tmp_path):
    errors = []
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    # parent "directory" is a regular file, so every write fails
    s = TodoStore(blocker / "todos.json", on_save_error=errors.append)
    s.load()
    assert len(errors) == 1

    item = s.insert("still in memory")
    assert asyncio.run(s.save()) is False
    assert len(errors) == 2
    assert isinstance(errors[-1], OSError)
    assert s.list()[-1] == item


def test_reset_restores_defaults(store, data_file):
    store.insert("extra")
    store.reset()

    assert [i["text"] for i in store.list()] == list(SEED_TEXTS)
    assert json.loads(data_file.read_text(encoding="utf-8")) == store.list()
