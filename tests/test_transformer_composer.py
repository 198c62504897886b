"""
Unit tests for ComposerStrategy.

Tests extraction of the composer ``conversation`` array into messages.
"""
import pytest

from vscdb_recover.core.models import MessageRole, SkipReason
from vscdb_recover.transformers import ComposerStrategy


@pytest.fixture
def strategy():
    return ComposerStrategy()


def _extract(strategy, conversation):
    skips = []
    return strategy.extract({"conversation": conversation}, skips), skips


def test_name(strategy):
    assert strategy.name == "composer"


def test_basic_conversation(strategy):
    messages, skips = _extract(
        strategy,
        [
            {"type": 1, "text": "Hello, how are you?", "timingInfo": {"clientStartTime": 1704067200000}},
            {"type": 2, "text": "I'm doing well!", "timingInfo": {"clientStartTime": 1704067205000}},
        ],
    )

    assert skips == []
    assert [m.id for m in messages] == ["composer-0", "composer-1"]
    assert messages[0].role == MessageRole.USER
    assert messages[0].text == "Hello, how are you?"
    assert messages[0].timestamp == "2024-01-01T00:00:00.000Z"
    assert messages[1].role == MessageRole.ASSISTANT
    assert messages[1].timestamp == "2024-01-01T00:00:05.000Z"
    assert messages[1].raw["type"] == 2


@pytest.mark.parametrize(
    "bubble, role",
    [
        ({"type": 1, "text": "hi"}, MessageRole.USER),
        ({"type": 2, "text": "hi"}, MessageRole.ASSISTANT),
        ({"text": "hi"}, MessageRole.ASSISTANT),
        ({"type": "1", "text": "hi"}, MessageRole.ASSISTANT),
        ({"type": True, "text": "hi"}, MessageRole.ASSISTANT),
        ({"type": 1.0, "text": "hi"}, MessageRole.USER),
    ],
)
def test_role_mapping(strategy, bubble, role):
    messages, _ = _extract(strategy, [bubble])
    assert messages[0].role == role


def test_whitespace_text_is_dropped(strategy):
    messages, skips = _extract(strategy, [{"type": 1, "text": "   "}])
    assert messages == []
    assert skips[0].reason == SkipReason.EMPTY_TEXT


def test_missing_text_is_dropped(strategy):
    messages, _ = _extract(strategy, [{"type": 2, "richText": "{...}"}])
    assert messages == []


def test_non_object_elements_are_skipped(strategy):
    messages, skips = _extract(strategy, ["text", 5, None, [1], {"type": 1, "text": "ok"}])

    assert [m.id for m in messages] == ["composer-4"]
    assert [s.reason for s in skips] == [SkipReason.NOT_AN_OBJECT] * 4


def test_ids_use_original_index(strategy):
    messages, _ = _extract(
        strategy,
        [{"text": ""}, {"text": "first kept"}, {"text": " "}, {"text": "second kept"}],
    )
    assert [m.id for m in messages] == ["composer-1", "composer-3"]


def test_non_string_text_is_coerced(strategy):
    messages, _ = _extract(strategy, [{"text": 42}, {"text": ["a", "b"]}])
    assert [m.text for m in messages] == ["42", "a,b"]


def test_rpc_send_time_fallback(strategy):
    messages, _ = _extract(
        strategy,
        [{"text": "x", "timingInfo": {"clientRpcSendTime": 1000}}],
    )
    assert messages[0].timestamp == "1970-01-01T00:00:01.000Z"


def test_start_time_preferred_over_rpc_send_time(strategy):
    messages, _ = _extract(
        strategy,
        [{"text": "x", "timingInfo": {"clientStartTime": 2000, "clientRpcSendTime": 1000}}],
    )
    assert messages[0].timestamp == "1970-01-01T00:00:02.000Z"


def test_non_numeric_timing_is_ignored(strategy):
    messages, _ = _extract(
        strategy,
        [
            {"text": "a", "timingInfo": {"clientStartTime": "1000"}},
            {"text": "b", "timingInfo": "not an object"},
            {"text": "c", "createdAt": 1000},
        ],
    )
    assert [m.timestamp for m in messages] == [None, None, None]


def test_sorted_by_timestamp(strategy):
    messages, _ = _extract(
        strategy,
        [
            {"type": 2, "text": "late", "timingInfo": {"clientStartTime": 3000}},
            {"type": 1, "text": "early", "timingInfo": {"clientStartTime": 1000}},
        ],
    )
    assert [m.text for m in messages] == ["early", "late"]
    assert [m.id for m in messages] == ["composer-1", "composer-0"]


def test_untimed_messages_keep_encounter_position(strategy):
    messages, _ = _extract(
        strategy,
        [
            {"text": "t3", "timingInfo": {"clientStartTime": 3000}},
            {"text": "none-a"},
            {"text": "t1", "timingInfo": {"clientStartTime": 1000}},
            {"text": "none-b"},
        ],
    )
    assert [m.text for m in messages] == ["t1", "none-a", "t3", "none-b"]


@pytest.mark.parametrize("value", [None, {"a": 1}, "conversation", 3])
def test_non_array_conversation_yields_nothing(strategy, value):
    assert strategy.extract({"conversation": value}, []) == []


def test_missing_conversation_yields_nothing(strategy):
    assert strategy.extract({}, []) == []
