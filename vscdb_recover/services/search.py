"""
Search and filtering over recovered messages.
"""

from dataclasses import dataclass
from typing import List, Sequence

from vscdb_recover.core.models import ConversationMessage, MessageRole

ALL_ROLES = "all"
DEFAULT_MAX_RESULTS = 10
DEFAULT_CONTEXT_CHARS = 50


@dataclass
class SearchHit:
    """A message matching a query, with a snippet around the first match."""

    message: ConversationMessage
    match_index: int
    snippet: str


def filter_messages(
    messages: Sequence[ConversationMessage],
    query: str = "",
    role: str = ALL_ROLES,
) -> List[ConversationMessage]:
    """
    Filter messages by role and case-insensitive text match.

    Parameters
    ----------
    messages : Sequence[ConversationMessage]
        Messages to filter, order is kept
    query : str
        Text to look for; surrounding whitespace is ignored and an empty
        query matches everything
    role : str
        ``all``, ``user``, ``assistant`` or ``system``

    Returns
    -------
    List[ConversationMessage]
        Matching messages
    """
    needle = query.strip().lower()
    wanted_role = None if role == ALL_ROLES else MessageRole(role)

    if not needle and wanted_role is None:
        return list(messages)

    return [
        message
        for message in messages
        if (wanted_role is None or message.role == wanted_role)
        and (not needle or needle in message.text.lower())
    ]


def search_messages(
    messages: Sequence[ConversationMessage],
    query: str,
    max_results: int = DEFAULT_MAX_RESULTS,
    context_chars: int = DEFAULT_CONTEXT_CHARS,
) -> List[SearchHit]:
    """
    Find messages containing ``query`` and cut a snippet around each match.

    Stops after ``max_results`` hits. ``match_index`` is the position of the
    match within the message text.
    """
    needle = query.strip().lower()
    if not needle:
        return []

    hits: List[SearchHit] = []
    for message in messages:
        if len(hits) >= max_results:
            break

        position = message.text.lower().find(needle)
        if position == -1:
            continue

        start = max(0, position - context_chars)
        end = min(len(message.text), position + len(needle) + context_chars)
        hits.append(
            SearchHit(message=message, match_index=position, snippet=message.text[start:end])
        )

    return hits


def summarize(messages: Sequence[ConversationMessage]) -> str:
    """One-line count summary, e.g. ``3 messages — 2 user, 1 assistant``."""
    users = sum(1 for message in messages if message.role == MessageRole.USER)
    assistants = sum(1 for message in messages if message.role == MessageRole.ASSISTANT)
    return f"{len(messages)} messages — {users} user, {assistants} assistant"
