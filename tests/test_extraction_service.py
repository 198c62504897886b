"""
Integration tests for the extraction service over real SQLite files.
"""
from unittest.mock import MagicMock

import pytest

from vscdb_recover.core.models import MessageRole
from vscdb_recover.readers import KeyValueStore, SQLiteKeyValueStore, StoreOpenError
from vscdb_recover.services.extraction import (
    ConversationExtractor,
    EmptyUploadError,
    UnsupportedFileError,
    extract_conversation,
    extract_from_bytes,
    extract_from_path,
    validate_upload_name,
)


@pytest.fixture
def composer_db(make_vscdb):
    return make_vscdb({
        "ItemTable": [
            (
                "composer.composerData",
                {
                    "allComposers": [],
                    "conversation": [
                        {"type": 1, "text": "How do I sort a list?", "timingInfo": {"clientStartTime": 1704067200000}},
                        {"type": 2, "text": "Use sorted().", "timingInfo": {"clientRpcSendTime": 1704067201000}},
                    ],
                },
            ),
            ("workbench.colorTheme", "Default Dark+"),
        ],
        "cursorDiskKV": [
            ("composerData:abc", {"composerId": "abc"}),
        ],
    })


@pytest.fixture
def ai_service_db(make_vscdb):
    return make_vscdb({
        "ItemTable": [
            ("aiService.prompts", [{"text": "first question"}, {"text": "second question"}]),
            (
                "aiService.generations",
                [
                    {"textDescription": "first answer", "unixMs": 1000},
                    {"textDescription": "second answer", "unixMs": 2000},
                ],
            ),
        ],
    })


def test_extract_composer_conversation(composer_db):
    result = extract_from_path(composer_db)

    assert result.tables == ["ItemTable", "cursorDiskKV"]
    assert [(m.role, m.text) for m in result.messages] == [
        (MessageRole.USER, "How do I sort a list?"),
        (MessageRole.ASSISTANT, "Use sorted()."),
    ]
    assert set(result.raw) == {"composer.composerData", "conversation", "composerData:abc"}
    assert result.build_report.strategy == "composer"


def test_extract_ai_service_conversation(ai_service_db):
    result = extract_from_path(ai_service_db)

    assert [m.text for m in result.messages] == [
        "first question",
        "first answer",
        "second question",
        "second answer",
    ]
    assert result.messages[0].timestamp == "1970-01-01T00:00:00.999Z"


def test_no_recognized_data_is_not_an_error(make_vscdb):
    path = make_vscdb({"ItemTable": [("editor.fontSize", "14"), ("chat.settings", "x")]})

    result = extract_from_path(path)

    assert result.messages == []
    assert result.raw == {"chat.settings": "x"}
    assert result.tables == ["ItemTable"]


def test_database_without_tables(make_vscdb):
    result = extract_from_path(make_vscdb({}))
    assert result.to_dict() == {"messages": [], "raw": {}, "tables": []}


def test_caller_owned_store_is_not_closed(composer_db):
    store = SQLiteKeyValueStore(composer_db)
    try:
        extract_conversation(store)
        # Still usable after extraction
        assert store.list_table_names()
    finally:
        store.close()


def test_extract_with_mocked_store():
    store = MagicMock(spec=KeyValueStore)
    store.list_table_names.return_value = ["ItemTable"]
    store.read_all_rows.return_value = [("aiService.prompts", '[{"prompt": "hi"}]')]

    result = ConversationExtractor().extract(store)

    assert [m.text for m in result.messages] == ["hi"]
    store.close.assert_not_called()


def test_scanner_settings_from_environment(monkeypatch, make_vscdb):
    monkeypatch.setenv("VSCDB_RECOVER_KEY_SUBSTRINGS", "aiservice.prompts")
    path = make_vscdb({"ItemTable": [("aiService.prompts", [{"prompt": "q"}]), ("chat.x", "y")]})

    result = extract_from_path(path)

    assert set(result.raw) == {"aiService.prompts"}


def test_extract_from_bytes(composer_db):
    with open(composer_db, "rb") as handle:
        data = handle.read()

    result = extract_from_bytes(data, "state.vscdb")

    assert len(result.messages) == 2


def test_extract_from_empty_bytes():
    with pytest.raises(EmptyUploadError):
        extract_from_bytes(b"", "state.vscdb")


def test_extract_from_garbage_bytes():
    with pytest.raises(StoreOpenError):
        extract_from_bytes(b"not a database at all" * 20, "state.vscdb")


def test_extract_from_missing_path(tmp_path):
    with pytest.raises(StoreOpenError):
        extract_from_path(tmp_path / "nope.vscdb")


@pytest.mark.parametrize("name", ["state.vscdb", "state.vscdb.backup", "x/y/state.vscdb"])
def test_validate_upload_name_accepts(name):
    assert validate_upload_name(name) == name


@pytest.mark.parametrize("name", [None, "", "state.db", "state.vscdb.bak", "notes.txt"])
def test_validate_upload_name_rejects(name):
    with pytest.raises(UnsupportedFileError):
        validate_upload_name(name)
