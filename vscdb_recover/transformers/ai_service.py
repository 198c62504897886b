"""
aiService conversation strategy.

Older IDE versions store a chat as two parallel arrays:
``aiService.prompts`` (user turns) and ``aiService.generations`` (assistant
turns). The arrays are indexed independently, but entries at the same index
belong to the same exchange, which is what missing prompt timestamps are
inferred from.
"""

import logging
from typing import Any, Dict, List, Mapping, Tuple

from vscdb_recover.core.config import GENERATIONS_KEY, PROMPTS_KEY
from vscdb_recover.core.models import ConversationMessage, MessageRole, Skip, SourceKind
from vscdb_recover.core.ordering import MissingTimestamp, TieBreak, order_messages
from vscdb_recover.core.utils import epoch_ms_to_iso, iso_to_epoch_ms
from vscdb_recover.transformers.base import BaseStrategy

logger = logging.getLogger(__name__)

PROMPT_TEXT_FIELDS = ["prompt", "text"]
GENERATION_TEXT_FIELDS = ["textDescription", "response", "text"]

# A prompt is placed this many milliseconds before its paired generation
PROMPT_LEAD_MS = 1


class AiServiceStrategy(BaseStrategy):
    """Strategy for the parallel prompts/generations arrays."""

    @property
    def name(self) -> str:
        return "aiService"

    def extract(self, raw: Mapping[str, Any], skips: List[Skip]) -> List[ConversationMessage]:
        prompts = self._collect(
            raw, PROMPTS_KEY, PROMPT_TEXT_FIELDS, SourceKind.PROMPT, MessageRole.USER, skips
        )
        generations = self._collect(
            raw,
            GENERATIONS_KEY,
            GENERATION_TEXT_FIELDS,
            SourceKind.GENERATION,
            MessageRole.ASSISTANT,
            skips,
        )

        inferred = self._infer_prompt_timestamps(prompts, generations)
        if inferred:
            logger.debug("Inferred %d prompt timestamps from generations", inferred)

        merged = [message for _, message in prompts] + [message for _, message in generations]
        if not merged:
            return []

        return order_messages(
            merged,
            tie_break=TieBreak.USER_FIRST_THEN_SOURCE,
            missing=MissingTimestamp.LAST,
        )

    def _collect(
        self,
        raw: Mapping[str, Any],
        key: str,
        text_fields: List[str],
        kind: SourceKind,
        role: MessageRole,
        skips: List[Skip],
    ) -> List[Tuple[int, ConversationMessage]]:
        """Build (original index, message) pairs from one source array."""
        items = self._array_at(raw, key)
        if items is None:
            return []

        collected = []
        for index, item in enumerate(items):
            message_id = f"{kind.value}-{index}"
            text = self._element_text(item, text_fields, message_id, skips)
            if text is None:
                continue

            collected.append(
                (
                    index,
                    ConversationMessage(
                        id=message_id,
                        role=role,
                        text=text,
                        timestamp=self._timestamp(item.get("unixMs")),
                        raw=item,
                    ),
                )
            )
        return collected

    @staticmethod
    def _infer_prompt_timestamps(
        prompts: List[Tuple[int, ConversationMessage]],
        generations: List[Tuple[int, ConversationMessage]],
    ) -> int:
        """
        Give untimed prompts a time just before their same-index generation.

        Only the same original array index is considered; prompts without a
        timed partner keep no timestamp.

        Returns
        -------
        int
            Number of prompts that received a timestamp
        """
        generation_times: Dict[int, int] = {}
        for index, generation in generations:
            ms = iso_to_epoch_ms(generation.timestamp)
            if ms is not None:
                generation_times[index] = ms

        inferred = 0
        for index, prompt in prompts:
            if prompt.timestamp is not None or index not in generation_times:
                continue
            timestamp = epoch_ms_to_iso(generation_times[index] - PROMPT_LEAD_MS)
            if timestamp is not None:
                prompt.timestamp = timestamp
                inferred += 1
        return inferred
