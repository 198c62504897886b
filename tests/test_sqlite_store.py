"""
Tests for the read-only SQLite key-value store.
"""
import os
import tempfile

import pytest

from vscdb_recover.readers import SQLiteKeyValueStore, StoreOpenError


@pytest.fixture
def sample_db(make_vscdb):
    return make_vscdb({
        "ItemTable": [
            ("composer.composerData", {"conversation": []}),
            ("workbench.colorTheme", "Dark+"),
        ],
        "cursorDiskKV": [
            ("aiService.prompts", [{"prompt": "hi"}]),
            ("composerData:abc", {"x": 1}),
            ("bubbleId:abc:1", {"text": "ignored"}),
        ],
    })


def test_list_table_names(sample_db):
    with SQLiteKeyValueStore(sample_db) as store:
        assert store.list_table_names() == ["ItemTable", "cursorDiskKV"]


def test_read_all_rows(sample_db):
    with SQLiteKeyValueStore(sample_db) as store:
        rows = store.read_all_rows("ItemTable")
    keys = [key for key, _ in rows]
    assert keys == ["composer.composerData", "workbench.colorTheme"]
    assert rows[1][1] == "Dark+"


def test_read_rows_matching_like_pattern(sample_db):
    with SQLiteKeyValueStore(sample_db) as store:
        rows = store.read_rows_matching("cursorDiskKV", "composer%")
    assert [key for key, _ in rows] == ["composerData:abc"]


def test_like_pattern_is_case_insensitive(sample_db):
    with SQLiteKeyValueStore(sample_db) as store:
        rows = store.read_rows_matching("cursorDiskKV", "AISERVICE.%")
    assert [key for key, _ in rows] == ["aiService.prompts"]


def test_missing_table_raises(sample_db):
    import sqlite3

    with SQLiteKeyValueStore(sample_db) as store:
        with pytest.raises(sqlite3.OperationalError):
            store.read_all_rows("nope")


def test_blob_values_are_returned_as_bytes(make_vscdb):
    path = make_vscdb({"ItemTable": [("chat.data", b'{"a": 1}')]})
    with SQLiteKeyValueStore(path) as store:
        (key, value), = store.read_all_rows("ItemTable")
    assert key == "chat.data"
    assert value == b'{"a": 1}'


def test_store_is_read_only(sample_db):
    import sqlite3

    with SQLiteKeyValueStore(sample_db) as store:
        with pytest.raises(sqlite3.OperationalError):
            store.connection.execute("DELETE FROM ItemTable")


def test_missing_file_raises_store_open_error(tmp_path):
    with pytest.raises(StoreOpenError):
        SQLiteKeyValueStore(tmp_path / "missing.vscdb")


def test_non_database_file_raises_store_open_error():
    fd, path = tempfile.mkstemp(suffix='.vscdb')
    os.write(fd, b"this is definitely not a sqlite database file" * 10)
    os.close(fd)
    try:
        with pytest.raises(StoreOpenError):
            SQLiteKeyValueStore(path)
    finally:
        os.unlink(path)


def test_close_is_idempotent(sample_db):
    store = SQLiteKeyValueStore(sample_db)
    store.close()
    store.close()
