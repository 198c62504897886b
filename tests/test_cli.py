"""
Tests for the Click CLI.
"""
import json

import pytest
from click.testing import CliRunner

from vscdb_recover.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def chat_db(make_vscdb):
    return make_vscdb({
        "ItemTable": [
            (
                "composer.composerData",
                {
                    "conversation": [
                        {"type": 1, "text": "Where is the config file?", "timingInfo": {"clientStartTime": 1000}},
                        {"type": 2, "text": "It lives in ~/.config.", "timingInfo": {"clientStartTime": 2000}},
                    ]
                },
            ),
        ],
    })


def test_extract_prints_conversation(runner, chat_db):
    result = runner.invoke(cli, ['extract', chat_db])

    assert result.exit_code == 0, result.output
    assert "2 messages — 1 user, 1 assistant" in result.output
    assert "[composer-0] You (1970-01-01T00:00:01.000Z)" in result.output
    assert "It lives in ~/.config." in result.output


def test_extract_role_filter(runner, chat_db):
    result = runner.invoke(cli, ['extract', chat_db, '--role', 'assistant'])

    assert result.exit_code == 0
    assert "It lives in ~/.config." in result.output
    assert "Where is the config file?" not in result.output


def test_extract_writes_export_into_directory(runner, chat_db, tmp_path):
    result = runner.invoke(cli, ['extract', chat_db, '--output', str(tmp_path), '--mode', 'raw'])

    assert result.exit_code == 0, result.output
    exports = list(tmp_path.glob("*-raw.json"))
    assert len(exports) == 1
    data = json.loads(exports[0].read_text(encoding="utf-8"))
    assert data["tables"] == ["ItemTable"]
    assert [m["id"] for m in data["messages"]] == ["composer-0", "composer-1"]


def test_extract_writes_conversation_file(runner, chat_db, tmp_path):
    target = tmp_path / "messages.json"
    result = runner.invoke(cli, ['extract', chat_db, '-o', str(target)])

    assert result.exit_code == 0, result.output
    data = json.loads(target.read_text(encoding="utf-8"))
    assert [m["role"] for m in data] == ["user", "assistant"]


def test_extract_without_conversation(runner, make_vscdb):
    path = make_vscdb({"ItemTable": [("editor.fontSize", "14")]})
    result = runner.invoke(cli, ['extract', path])

    assert result.exit_code == 0
    assert "No conversation data found." in result.output


def test_extract_invalid_database_aborts(runner, tmp_path):
    bogus = tmp_path / "state.vscdb"
    bogus.write_bytes(b"garbage" * 100)

    result = runner.invoke(cli, ['extract', str(bogus)])

    assert result.exit_code != 0
    assert "Failed to load database" in result.output


def test_tables_command(runner, chat_db):
    result = runner.invoke(cli, ['tables', chat_db])

    assert result.exit_code == 0
    assert "ItemTable" in result.output
    assert "conversation" in result.output
    assert "Strategy: composer, messages: 2" in result.output


def test_search_command(runner, chat_db):
    result = runner.invoke(cli, ['search', chat_db, 'CONFIG'])

    assert result.exit_code == 0
    assert "Found 2 messages matching 'CONFIG'" in result.output


def test_search_no_hits(runner, chat_db):
    result = runner.invoke(cli, ['search', chat_db, 'kubernetes'])
    assert "No messages found matching 'kubernetes'" in result.output


def test_info_command(runner):
    result = runner.invoke(cli, ['info'])
    assert result.exit_code == 0
    assert "Global database:" in result.output
