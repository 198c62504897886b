"""
Domain models for conversation recovery.

These models represent recovered messages and extraction results
independent of the IDE's internal storage format.

All models use Pydantic for validation, serialization, and type safety.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MessageRole(str, Enum):
    """Message role types."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"  # Declared for completeness; no extraction path emits it


class SourceKind(str, Enum):
    """Source array a message was recovered from."""

    COMPOSER = "composer"
    PROMPT = "prompt"
    GENERATION = "generation"


class SkipReason(str, Enum):
    """Why a table, row or element did not contribute output."""

    TABLE_LIST_FAILED = "table_list_failed"
    TABLE_READ_FAILED = "table_read_failed"
    MALFORMED_ROW = "malformed_row"
    NOT_AN_OBJECT = "not_an_object"
    EMPTY_TEXT = "empty_text"
    STRATEGY_FAILED = "strategy_failed"


class Skip(BaseModel):
    """A single skipped unit, kept so skip counts are observable."""

    reason: SkipReason
    source: str
    detail: Optional[str] = None


class ConversationMessage(BaseModel):
    """
    A single recovered message.

    ``id`` has the form ``<source kind>-<index in source array>``; ``raw`` holds
    the original record for diagnostics and is never read back.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: str
    role: MessageRole
    text: str
    timestamp: Optional[str] = None
    raw: Any = None

    def to_dict(self, include_raw: bool = True) -> Dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        ``timestamp`` is omitted when absent so exported messages keep the
        same shape as the IDE front end produced.
        """
        data: Dict[str, Any] = {
            "id": self.id,
            "role": self.role.value,
            "text": self.text,
        }
        if self.timestamp is not None:
            data["timestamp"] = self.timestamp
        if include_raw:
            data["raw"] = self.raw
        return data


class ScanReport(BaseModel):
    """Counters collected while scanning the store."""

    tables: List[str] = Field(default_factory=list)
    rows_read: int = 0
    entries: int = 0
    skips: List[Skip] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skips)

    def to_stats(self) -> Dict[str, int]:
        errors = sum(
            1
            for skip in self.skips
            if skip.reason
            in (SkipReason.TABLE_LIST_FAILED, SkipReason.TABLE_READ_FAILED)
        )
        return {"extracted": self.entries, "skipped": self.skipped, "errors": errors}


class BuildReport(BaseModel):
    """Counters collected while building messages."""

    strategy: Optional[str] = None
    emitted: int = 0
    skips: List[Skip] = Field(default_factory=list)

    @property
    def skipped(self) -> int:
        return len(self.skips)

    def to_stats(self) -> Dict[str, int]:
        errors = sum(
            1 for skip in self.skips if skip.reason == SkipReason.STRATEGY_FAILED
        )
        return {"emitted": self.emitted, "skipped": self.skipped, "errors": errors}


class ExtractionResult(BaseModel):
    """
    Output of one extraction run.

    Attributes
    ----------
    messages : List[ConversationMessage]
        Chronologically ordered recovered messages
    raw : Dict[str, Any]
        Every conversation-relevant key found, decoded
    tables : List[str]
        Table names present in the store
    scan_report, build_report
        Skip/emit counters for the two pipeline stages
    """

    messages: List[ConversationMessage] = Field(default_factory=list)
    raw: Dict[str, Any] = Field(default_factory=dict)
    tables: List[str] = Field(default_factory=list)
    scan_report: ScanReport = Field(default_factory=ScanReport)
    build_report: BuildReport = Field(default_factory=BuildReport)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``{messages, raw, tables}`` shape."""
        return {
            "messages": [message.to_dict() for message in self.messages],
            "raw": self.raw,
            "tables": list(self.tables),
        }

    @property
    def stats(self) -> Dict[str, Dict[str, int]]:
        return {
            "scan": self.scan_report.to_stats(),
            "build": self.build_report.to_stats(),
        }
