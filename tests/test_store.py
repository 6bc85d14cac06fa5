import json
import logging
import sqlite3
from pathlib import Path

import pytest

from lighttable.kv import MemoryKeyValueStore, SqliteKeyValueStore, storage_available
from lighttable.store import HighlightStore


def _store() -> HighlightStore:
    return HighlightStore(MemoryKeyValueStore())


def test_load_without_stored_data_returns_empty_groups() -> None:
    store = _store()
    assert store.load("AABBCCDD", 3) == [[], [], []]
    assert store.load("AABBCCDD", 0) == []


def test_load_pads_and_truncates_to_expected_groups() -> None:
    store = _store()
    store.save("AABBCCDD", [[1, 0, 0, 0, 0, 0], [0, 1, 0, 0, 0, 0], [0, 0, 1, 0, 0, 0]])

    assert store.load("AABBCCDD", 5) == [
        [1, 0, 0, 0, 0, 0],
        [0, 1, 0, 0, 0, 0],
        [0, 0, 1, 0, 0, 0],
        [],
        [],
    ]
    assert store.load("AABBCCDD", 2) == [[1, 0, 0, 0, 0, 0], [0, 1, 0, 0, 0, 0]]
    for count in range(6):
        assert len(store.load("AABBCCDD", count)) == count


def test_save_leaves_other_pages_untouched() -> None:
    store = _store()
    store.save("11223344", [[1, 1, 0, 0, 1, 1]])
    store.save("AABBCCDD", [[0, 1, 0, 1, 0, 1], [1, 0, 0, 0, 0, 0]])

    assert store.load("11223344", 1) == [[1, 1, 0, 0, 1, 1]]
    assert store.load("AABBCCDD", 2) == [[0, 1, 0, 1, 0, 1], [1, 0, 0, 0, 0, 0]]

    store.save("AABBCCDD", [[0] * 6, [0] * 6])
    assert store.load("11223344", 1) == [[1, 1, 0, 0, 1, 1]]


def test_blob_is_json_shard_mapping() -> None:
    kv = MemoryKeyValueStore()
    store = HighlightStore(kv, storage_key="mw:lightTable")
    store.save("0FF47C63", [[0, 1, 1, 0, 1, 0]])
    store.save("02B75ABA", [[0, 1, 0, 1, 1, 0]])
    store.save("AABBCCDD", [[0, 1, 0, 1, 0, 1]])

    assert json.loads(kv.items["mw:lightTable"]) == {
        "0": "0FF47C63a!02B75ABAW",
        "A": "AABBCCDDV",
    }


def test_unparseable_blob_is_treated_as_empty(caplog: pytest.LogCaptureFixture) -> None:
    kv = MemoryKeyValueStore({"lighttable": "{not-json"})
    store = HighlightStore(kv)
    with caplog.at_level(logging.WARNING):
        assert store.load("AABBCCDD", 1) == [[]]
    assert "unparseable" in caplog.text

    kv.items["lighttable"] = "[1, 2]"
    assert store.read_blob() == {}

    store.save("AABBCCDD", [[1]])
    assert store.load("AABBCCDD", 1) == [[1, 0, 0, 0, 0, 0]]


def test_forget_removes_one_page() -> None:
    store = _store()
    store.save("AABBCCDD", [[1]])
    store.save("A0000000", [[1]])

    assert store.forget("AABBCCDD") is True
    assert store.forget("AABBCCDD") is False
    assert store.load("AABBCCDD", 1) == [[]]
    assert store.load("A0000000", 1) == [[1, 0, 0, 0, 0, 0]]


def test_named_groups_merge_instead_of_replacing() -> None:
    store = _store()
    store.save_named("choir", {"soprano": 1})
    store.save_named("choir", {"alto": 0})
    assert store.load_named("choir") == {"soprano": 1, "alto": 0}

    store.save_named("choir", {"soprano": 0})
    assert store.load_named("choir") == {"soprano": 0, "alto": 0}


def test_load_named_distinguishes_absent_from_empty() -> None:
    store = _store()
    assert store.load_named("choir") is None

    store.save_named("choir", {})
    assert store.load_named("choir") == {}


def test_named_groups_live_under_their_own_keys() -> None:
    kv = MemoryKeyValueStore()
    store = HighlightStore(kv)
    store.save("AABBCCDD", [[1]])
    store.save_named("choir", {"soprano": True})
    store.save_named("band", {"drums": 1})

    assert json.loads(kv.items["lighttable:choir"]) == {"soprano": 1}
    assert store.named_groups() == ["band", "choir"]
    assert store.load("AABBCCDD", 1) == [[1, 0, 0, 0, 0, 0]]


def test_invalid_named_value_is_treated_as_absent() -> None:
    kv = MemoryKeyValueStore({"lighttable:choir": "[1]"})
    store = HighlightStore(kv)
    assert store.load_named("choir") is None

    store.save_named("choir", {"alto": 1})
    assert store.load_named("choir") == {"alto": 1}


def test_stats_counts_shards_and_pages() -> None:
    store = _store()
    store.save("0FF47C63", [[1], [0]])
    store.save("02B75ABA", [[1]])
    store.save("AABBCCDD", [[1]])
    store.save_named("choir", {"alto": 1})

    stats = store.stats()
    assert stats["shards"] == 2
    assert stats["pages"] == 3
    assert stats["groups"] == 4
    assert stats["named_groups"] == 1
    assert stats["blob_bytes"] > 0


def test_sqlite_store_persists_across_connections(tmp_path: Path) -> None:
    db_path = tmp_path / "highlights.sqlite"
    store = HighlightStore(SqliteKeyValueStore(db_path))
    store.save("AABBCCDD", [[0, 1, 0, 1, 0, 1]])
    store.save_named("choir", {"soprano": 1})
    store.close()

    reopened = HighlightStore(SqliteKeyValueStore(db_path))
    try:
        assert reopened.load("AABBCCDD", 1) == [[0, 1, 0, 1, 0, 1]]
        assert reopened.load_named("choir") == {"soprano": 1}
        assert reopened.named_groups() == ["choir"]
    finally:
        reopened.close()


def test_storage_available_on_working_backends(tmp_path: Path) -> None:
    kv = MemoryKeyValueStore()
    assert storage_available(kv) is True
    assert kv.items == {}

    sqlite_kv = SqliteKeyValueStore(tmp_path / "check.sqlite")
    assert storage_available(sqlite_kv) is True
    sqlite_kv.close()
    # Closed connections refuse writes.
    assert storage_available(sqlite_kv) is False


def test_storage_available_reports_failing_store() -> None:
    class BrokenStore(MemoryKeyValueStore):
        def set_item(self, key: str, value: str) -> None:
            raise sqlite3.OperationalError("disk I/O error")

    assert storage_available(BrokenStore()) is False


def test_storage_available_leaves_existing_keys_alone() -> None:
    kv = MemoryKeyValueStore({"test": "keep", "lighttable": "{}"})
    for _ in range(3):
        assert storage_available(kv) is True
    assert kv.items == {"test": "keep", "lighttable": "{}"}


def test_named_marks_read_like_numbers() -> None:
    stored = {"a": "0", "b": "1", "c": " 1 ", "d": "", "e": "nope", "f": None, "g": 1.0, "h": False}
    kv = MemoryKeyValueStore({"lighttable:choir": json.dumps(stored)})
    store = HighlightStore(kv)

    assert store.load_named("choir") == {
        "a": 0,
        "b": 1,
        "c": 1,
        "d": 0,
        "e": 0,
        "f": 0,
        "g": 1,
        "h": 0,
    }

    store.save_named("choir", {"i": "0"})
    assert json.loads(kv.items["lighttable:choir"])["a"] == 0
    assert store.load_named("choir")["i"] == 0
