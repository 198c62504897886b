"""
Conversation builder.

Tries each extraction strategy in priority order over the decoded raw map.
The first strategy that yields at least one message wins; outputs of
different strategies are never merged.
"""

import logging
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from vscdb_recover.core.models import BuildReport, ConversationMessage, Skip, SkipReason
from vscdb_recover.transformers.ai_service import AiServiceStrategy
from vscdb_recover.transformers.base import BaseStrategy
from vscdb_recover.transformers.composer import ComposerStrategy

logger = logging.getLogger(__name__)


def default_strategies() -> List[BaseStrategy]:
    """Strategies in priority order: composer first, then aiService."""
    return [ComposerStrategy(), AiServiceStrategy()]


class ConversationBuilder:
    """
    Builds the ordered message list from a raw map.

    Attributes
    ----------
    strategies : List[BaseStrategy]
        Strategies tried in order

    Methods
    -------
    build(raw)
        Ordered messages, possibly empty
    build_with_report(raw)
        Ordered messages plus emit/skip counters
    """

    def __init__(self, strategies: Optional[Sequence[BaseStrategy]] = None):
        self.strategies = list(strategies) if strategies is not None else default_strategies()

    def build(self, raw: Mapping[str, Any]) -> List[ConversationMessage]:
        messages, _ = self.build_with_report(raw)
        return messages

    def build_with_report(
        self, raw: Mapping[str, Any]
    ) -> Tuple[List[ConversationMessage], BuildReport]:
        """
        Build messages and report what was emitted and skipped.

        Parameters
        ----------
        raw : Mapping[str, Any]
            Decoded key -> value map from the scanner

        Returns
        -------
        Tuple[List[ConversationMessage], BuildReport]
            Messages of the winning strategy (empty if none matched) and the
            report. Skips are only kept for the winning strategy, or for all
            strategies when none produced a message.
        """
        all_skips: List[Skip] = []

        for strategy in self.strategies:
            skips: List[Skip] = []
            try:
                messages = strategy.extract(raw, skips)
            except Exception as e:
                logger.error("Strategy %s failed: %s", strategy.name, e, exc_info=True)
                all_skips.append(
                    Skip(
                        reason=SkipReason.STRATEGY_FAILED,
                        source=strategy.name,
                        detail=str(e),
                    )
                )
                continue

            if messages:
                logger.info(
                    "Built %d messages with %s strategy (%d skipped)",
                    len(messages),
                    strategy.name,
                    len(skips),
                )
                report = BuildReport(
                    strategy=strategy.name, emitted=len(messages), skips=skips
                )
                return messages, report

            all_skips.extend(skips)

        logger.info("No conversation data recognized")
        return [], BuildReport(strategy=None, emitted=0, skips=all_skips)


def build_messages(raw: Mapping[str, Any]) -> List[ConversationMessage]:
    """Build messages with the default strategies."""
    return ConversationBuilder().build(raw)
