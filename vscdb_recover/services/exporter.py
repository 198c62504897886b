"""
JSON export of extraction results.

Two shapes are supported: ``conversation`` (the message list only) and
``raw`` (file name, extraction time, tables, raw map and messages).
"""

import json
import logging
import re
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional, Union

from vscdb_recover.core.models import ConversationMessage, ExtractionResult

logger = logging.getLogger(__name__)

_DB_SUFFIX = re.compile(r"\.vscdb(\.backup)?$", re.IGNORECASE)


class ExportMode(str, Enum):
    """Export shapes."""

    CONVERSATION = "conversation"
    RAW = "raw"


def utc_now_iso() -> str:
    """Current UTC time as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    now = datetime.now(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def export_filename(source_name: str, mode: Union[ExportMode, str]) -> str:
    """
    Derive the export file name from the database file name.

    >>> export_filename("state.vscdb.backup", ExportMode.RAW)
    'state-raw.json'
    """
    mode = ExportMode(mode)
    stem = _DB_SUFFIX.sub("", Path(source_name).name)
    return f"{stem}-{mode.value}.json"


def build_export_payload(
    result: ExtractionResult,
    mode: Union[ExportMode, str] = ExportMode.CONVERSATION,
    filename: Optional[str] = None,
    extracted_at: Optional[str] = None,
) -> Any:
    """
    Build the JSON-ready export payload.

    Parameters
    ----------
    result : ExtractionResult
        Extraction to export
    mode : ExportMode or str
        ``conversation`` for messages only, ``raw`` for everything
    filename : str, optional
        Source database file name (raw mode only)
    extracted_at : str, optional
        ISO time of extraction (raw mode only). Defaults to now.

    Returns
    -------
    list or dict
        Message list, or the full raw document
    """
    mode = ExportMode(mode)
    messages = [message.to_dict() for message in result.messages]

    if mode is ExportMode.CONVERSATION:
        return messages

    return {
        "filename": filename,
        "extractedAt": extracted_at or utc_now_iso(),
        "tables": list(result.tables),
        "raw": result.raw,
        "messages": messages,
    }


def dumps_export(payload: Any) -> str:
    """Serialize a payload; values JSON cannot represent are stringified."""
    return json.dumps(payload, indent=2, ensure_ascii=False, default=str)


def write_export(path: Union[str, Path], payload: Any) -> Path:
    """
    Write an export payload to disk.

    Returns
    -------
    Path
        Path that was written
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps_export(payload), encoding="utf-8")
    logger.info("Wrote export to %s", path)
    return path


def messages_from_json(text: str) -> List[ConversationMessage]:
    """
    Load messages back from an export.

    Accepts either export shape.

    Raises
    ------
    ValueError
        If the document holds no message list
    """
    data = json.loads(text)
    if isinstance(data, dict):
        data = data.get("messages")
    if not isinstance(data, list):
        raise ValueError("Export does not contain a message list")
    return [ConversationMessage.model_validate(item) for item in data]
