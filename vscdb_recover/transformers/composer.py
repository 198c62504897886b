"""
Composer conversation strategy.

Newer IDE versions keep a chat as a single ``conversation`` array nested in
``composer.composerData``; the scanner lifts it to the top-level
``conversation`` key. Bubble ``type`` 1 is the user, anything else is the
assistant.
"""

import logging
from typing import Any, List, Mapping, Optional

from vscdb_recover.core.config import CONVERSATION_KEY
from vscdb_recover.core.decoding import ValueKind, is_finite_number, kind_of
from vscdb_recover.core.models import ConversationMessage, MessageRole, Skip, SourceKind
from vscdb_recover.core.ordering import MissingTimestamp, TieBreak, order_messages
from vscdb_recover.transformers.base import BaseStrategy

logger = logging.getLogger(__name__)

USER_BUBBLE_TYPE = 1

# Checked in order; the first numeric one is used
TIMING_FIELDS = ("clientStartTime", "clientRpcSendTime")


class ComposerStrategy(BaseStrategy):
    """Strategy for the composer ``conversation`` array."""

    @property
    def name(self) -> str:
        return "composer"

    def extract(self, raw: Mapping[str, Any], skips: List[Skip]) -> List[ConversationMessage]:
        conversation = self._array_at(raw, CONVERSATION_KEY)
        if conversation is None:
            return []

        source = SourceKind.COMPOSER.value
        messages = []
        for index, bubble in enumerate(conversation):
            text = self._element_text(bubble, ["text"], f"{source}-{index}", skips)
            if text is None:
                continue

            messages.append(
                ConversationMessage(
                    id=f"{source}-{index}",
                    role=self._role(bubble.get("type")),
                    text=text,
                    timestamp=self._bubble_timestamp(bubble),
                    raw=bubble,
                )
            )

        logger.debug(
            "Composer strategy: %d messages from %d bubbles",
            len(messages),
            len(conversation),
        )
        return order_messages(
            messages, tie_break=TieBreak.STABLE, missing=MissingTimestamp.KEEP_POSITION
        )

    @staticmethod
    def _role(bubble_type: Any) -> MessageRole:
        # True == 1 in Python; only a real integer 1 marks a user bubble
        if kind_of(bubble_type) is ValueKind.NUMBER and bubble_type == USER_BUBBLE_TYPE:
            return MessageRole.USER
        return MessageRole.ASSISTANT

    def _bubble_timestamp(self, bubble: Mapping[str, Any]) -> Optional[str]:
        timing = bubble.get("timingInfo")
        if kind_of(timing) is not ValueKind.OBJECT:
            return None

        for field_name in TIMING_FIELDS:
            value = timing.get(field_name)
            if is_finite_number(value):
                return self._timestamp(value)
        return None
