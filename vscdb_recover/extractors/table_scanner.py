"""
Table scanner for IDE state databases.

Pulls every conversation-relevant (key, value) pair out of a key-value store
into one flat, decoded mapping. ``ItemTable`` is the primary source; rows from
``cursorDiskKV`` are only used for keys ItemTable did not provide.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from vscdb_recover.core.config import (
    COMPOSER_DATA_KEY,
    CONVERSATION_KEY,
    DEFAULT_FALLBACK_PATTERNS,
    DEFAULT_KEY_SUBSTRINGS,
    DISK_KV_TABLE,
    ITEM_TABLE,
    ScannerSettings,
)
from vscdb_recover.core.decoding import ValueKind, decode_scalar, kind_of
from vscdb_recover.core.models import ScanReport, Skip, SkipReason
from vscdb_recover.readers.base import KeyValueStore, Row

logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """Decoded raw map, table names and scan counters."""

    raw: Dict[str, Any] = field(default_factory=dict)
    tables: List[str] = field(default_factory=list)
    report: ScanReport = field(default_factory=ScanReport)


class TableScanner:
    """
    Scanner collecting conversation-relevant entries from a store.

    Attributes
    ----------
    key_substrings : Dict[str, str]
        Lowercased substrings marking an ItemTable key as relevant
    fallback_patterns : List[str]
        LIKE patterns applied to cursorDiskKV, in priority order

    Methods
    -------
    list_tables(store)
        Table names, or an empty list if the store cannot list them
    scan(store)
        Build the raw map
    """

    def __init__(
        self,
        key_substrings: Optional[Mapping[str, str]] = None,
        fallback_patterns: Optional[Sequence[str]] = None,
    ):
        """
        Initialize scanner.

        Parameters
        ----------
        key_substrings : Mapping[str, str], optional
            ``{substring: "relevant"}`` table. Defaults to the built-in list.
        fallback_patterns : Sequence[str], optional
            cursorDiskKV LIKE patterns. Defaults to the built-in list.
        """
        if key_substrings is None:
            key_substrings = DEFAULT_KEY_SUBSTRINGS
        if fallback_patterns is None:
            fallback_patterns = DEFAULT_FALLBACK_PATTERNS

        self.key_substrings = {
            substring.lower(): marker for substring, marker in key_substrings.items()
        }
        self.fallback_patterns = list(fallback_patterns)

    @classmethod
    def from_settings(cls, settings: ScannerSettings) -> "TableScanner":
        return cls(settings.key_substrings, settings.fallback_patterns)

    def is_relevant(self, key: str) -> bool:
        """Check a key against the substring table (case-insensitive)."""
        key_lower = key.lower()
        return any(substring in key_lower for substring in self.key_substrings)

    def list_tables(
        self, store: KeyValueStore, report: Optional[ScanReport] = None
    ) -> List[str]:
        try:
            tables = list(store.list_table_names())
        except Exception as e:
            logger.warning("Could not list tables, treating store as empty: %s", e)
            if report is not None:
                report.skips.append(
                    Skip(reason=SkipReason.TABLE_LIST_FAILED, source="store", detail=str(e))
                )
            return []
        return tables

    def scan(self, store: KeyValueStore) -> ScanResult:
        """
        Collect conversation-relevant entries.

        Parameters
        ----------
        store : KeyValueStore
            Open store. It is not closed here.

        Returns
        -------
        ScanResult
            Raw map, table names and counters
        """
        result = ScanResult()
        result.tables = self.list_tables(store, result.report)
        result.report.tables = list(result.tables)

        if ITEM_TABLE in result.tables:
            self._scan_item_table(store, result)

        if DISK_KV_TABLE in result.tables:
            self._scan_disk_kv(store, result)

        result.report.entries = len(result.raw)
        logger.info(
            "Scan complete: %d tables, %d rows read, %d entries, %d skipped",
            len(result.tables),
            result.report.rows_read,
            result.report.entries,
            result.report.skipped,
        )
        return result

    def _scan_item_table(self, store: KeyValueStore, result: ScanResult) -> None:
        rows = self._read(store.read_all_rows, ITEM_TABLE, None, result.report)

        for key, value in self._decoded_rows(rows, ITEM_TABLE, result.report):
            if self.is_relevant(key):
                result.raw[key] = value

            # Surface the nested composer conversation under a well-known key
            if (
                key == COMPOSER_DATA_KEY
                and kind_of(value) is ValueKind.OBJECT
                and CONVERSATION_KEY in value
            ):
                result.raw[CONVERSATION_KEY] = value[CONVERSATION_KEY]

    def _scan_disk_kv(self, store: KeyValueStore, result: ScanResult) -> None:
        for pattern in self.fallback_patterns:
            rows = self._read(store.read_rows_matching, DISK_KV_TABLE, pattern, result.report)

            for key, value in self._decoded_rows(rows, DISK_KV_TABLE, result.report):
                if key not in result.raw:
                    result.raw[key] = value

    def _read(
        self, reader, table: str, pattern: Optional[str], report: ScanReport
    ) -> List[Row]:
        """Run a store read, treating any failure as zero rows."""
        try:
            if pattern is None:
                rows = list(reader(table))
            else:
                rows = list(reader(table, pattern))
        except Exception as e:
            source = table if pattern is None else f"{table}:{pattern}"
            logger.warning("Failed to read %s, skipping: %s", source, e)
            report.skips.append(
                Skip(reason=SkipReason.TABLE_READ_FAILED, source=source, detail=str(e))
            )
            return []

        report.rows_read += len(rows)
        return rows

    def _decoded_rows(self, rows: Iterable[Any], table: str, report: ScanReport):
        """Yield (key, decoded value) for each well-formed row."""
        for index, row in enumerate(rows):
            try:
                if not isinstance(row, (tuple, list)):
                    raise TypeError(f"row is {type(row).__name__}")
                raw_key, raw_value = row
            except (TypeError, ValueError):
                logger.debug("Malformed row %d in %s: %r", index, table, row)
                report.skips.append(
                    Skip(reason=SkipReason.MALFORMED_ROW, source=table, detail=f"row {index}")
                )
                continue

            if isinstance(raw_key, (bytes, bytearray, memoryview)):
                raw_key = bytes(raw_key).decode("utf-8", errors="replace")
            if not isinstance(raw_key, str):
                logger.debug("Non-text key in %s row %d: %r", table, index, raw_key)
                report.skips.append(
                    Skip(
                        reason=SkipReason.MALFORMED_ROW,
                        source=table,
                        detail=f"row {index}: key of type {type(raw_key).__name__}",
                    )
                )
                continue

            yield raw_key, decode_scalar(raw_value)
