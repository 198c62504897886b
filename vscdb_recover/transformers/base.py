"""
Base interface for message extraction strategies.

A strategy reads one conversation encoding out of the decoded raw map and
turns it into ordered ``ConversationMessage`` objects. Strategies never
raise for malformed input; they record what they skipped instead.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from vscdb_recover.core.decoding import ValueKind, coerce_text, is_finite_number, kind_of
from vscdb_recover.core.models import Skip, SkipReason
from vscdb_recover.core.utils import epoch_ms_to_iso

logger = logging.getLogger(__name__)


class BaseStrategy(ABC):
    """
    Abstract base class for extraction strategies.

    Attributes
    ----------
    name : str
        Strategy identifier reported in ``BuildReport.strategy``

    Methods
    -------
    extract(raw, skips)
        Build ordered messages from the raw map
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """
        Strategy identifier.

        Returns
        -------
        str
            'composer' or 'aiService'
        """

    @abstractmethod
    def extract(self, raw: Mapping[str, Any], skips: List[Skip]) -> list:
        """
        Extract messages from the raw map.

        Parameters
        ----------
        raw : Mapping[str, Any]
            Decoded key -> value map from the scanner
        skips : List[Skip]
            Collector for skipped elements

        Returns
        -------
        List[ConversationMessage]
            Ordered messages; empty when this encoding is not present
        """

    @staticmethod
    def _array_at(raw: Mapping[str, Any], key: str) -> Optional[list]:
        value = raw.get(key)
        if kind_of(value) is not ValueKind.ARRAY:
            if value is not None:
                logger.debug("Ignoring %s: expected array, got %s", key, kind_of(value).value)
            return None
        return value

    @staticmethod
    def _element_text(
        element: Any, fields: List[str], source: str, skips: List[Skip]
    ) -> Optional[str]:
        """
        Pull display text out of an array element.

        The first field that is present and not null wins. Returns None (and
        records a skip) for non-objects and for whitespace-only text.
        """
        if kind_of(element) is not ValueKind.OBJECT:
            skips.append(Skip(reason=SkipReason.NOT_AN_OBJECT, source=source))
            return None

        value = None
        for field_name in fields:
            if element.get(field_name) is not None:
                value = element[field_name]
                break

        text = coerce_text(value)
        if not text.strip():
            skips.append(Skip(reason=SkipReason.EMPTY_TEXT, source=source))
            return None
        return text

    @staticmethod
    def _timestamp(value: Any) -> Optional[str]:
        if not is_finite_number(value):
            return None
        return epoch_ms_to_iso(value)
