"""
Chronological ordering of recovered messages.

Both extraction strategies sort through ``order_messages``; they differ only
in how equal timestamps and missing timestamps are treated, which is passed
in as policy.
"""

from enum import Enum
from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

from vscdb_recover.core.models import ConversationMessage, MessageRole, SourceKind
from vscdb_recover.core.utils import iso_to_epoch_ms


class TieBreak(str, Enum):
    """How to order two messages with the same timestamp (or none)."""

    STABLE = "stable"  # keep encounter order
    USER_FIRST_THEN_SOURCE = "user_first_then_source"


class MissingTimestamp(str, Enum):
    """Where messages without a timestamp end up."""

    KEEP_POSITION = "keep_position"  # untouched; only timestamped ones move
    LAST = "last"  # after every timestamped message


def parse_message_id(message_id: str) -> Tuple[str, Optional[int]]:
    """
    Split ``"<kind>-<index>"`` into its parts.

    >>> parse_message_id("prompt-12")
    ('prompt', 12)
    """
    kind, sep, index = message_id.rpartition("-")
    if not sep:
        return message_id, None
    try:
        return kind, int(index)
    except ValueError:
        return message_id, None


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_source(a: ConversationMessage, b: ConversationMessage) -> int:
    kind_a, index_a = parse_message_id(a.id)
    kind_b, index_b = parse_message_id(b.id)
    if kind_a == kind_b:
        return _sign((index_a or 0) - (index_b or 0))
    if kind_a == SourceKind.PROMPT.value:
        return -1
    if kind_b == SourceKind.PROMPT.value:
        return 1
    return 0


def _compare_roles(a: ConversationMessage, b: ConversationMessage) -> int:
    if a.role == MessageRole.USER and b.role == MessageRole.ASSISTANT:
        return -1
    if a.role == MessageRole.ASSISTANT and b.role == MessageRole.USER:
        return 1
    return 0


def _make_comparator(tie_break: TieBreak):
    def compare(
        a: Tuple[Optional[int], ConversationMessage],
        b: Tuple[Optional[int], ConversationMessage],
    ) -> int:
        time_a, message_a = a
        time_b, message_b = b

        if time_a is not None and time_b is not None:
            if time_a != time_b:
                return _sign(time_a - time_b)
            if tie_break is TieBreak.STABLE:
                return 0
            return _compare_roles(message_a, message_b) or _compare_source(
                message_a, message_b
            )

        if time_a is not None:
            return -1
        if time_b is not None:
            return 1

        if tie_break is TieBreak.STABLE:
            return 0
        return _compare_source(message_a, message_b)

    return compare


def order_messages(
    messages: Sequence[ConversationMessage],
    tie_break: TieBreak = TieBreak.STABLE,
    missing: MissingTimestamp = MissingTimestamp.LAST,
) -> List[ConversationMessage]:
    """
    Sort messages chronologically.

    Parameters
    ----------
    messages : Sequence[ConversationMessage]
        Messages in encounter order
    tie_break : TieBreak
        Ordering for equal timestamps and for pairs without timestamps
    missing : MissingTimestamp
        Placement of messages without a timestamp

    Returns
    -------
    List[ConversationMessage]
        New list; the input is not modified
    """
    keyed = [(iso_to_epoch_ms(message.timestamp), message) for message in messages]
    sort_key = cmp_to_key(_make_comparator(tie_break))

    if missing is MissingTimestamp.LAST:
        return [message for _, message in sorted(keyed, key=sort_key)]

    slots = [index for index, (ms, _) in enumerate(keyed) if ms is not None]
    timed = sorted((keyed[index] for index in slots), key=sort_key)

    ordered = [message for _, message in keyed]
    for slot, (_, message) in zip(slots, timed):
        ordered[slot] = message
    return ordered
