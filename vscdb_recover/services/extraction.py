"""
Conversation extraction service.

Wires the table scanner and the conversation builder together and owns the
lifecycle of stores it opens itself (file paths and uploaded bytes). Stores
passed in by a caller are never closed here.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from vscdb_recover.core.config import ALLOWED_SUFFIXES, load_scanner_settings
from vscdb_recover.core.models import ExtractionResult
from vscdb_recover.extractors.table_scanner import TableScanner
from vscdb_recover.readers.base import KeyValueStore
from vscdb_recover.readers.sqlite_store import SQLiteKeyValueStore
from vscdb_recover.transformers.conversation import ConversationBuilder

logger = logging.getLogger(__name__)


class EmptyUploadError(ValueError):
    """Raised when an uploaded database has no content."""


class UnsupportedFileError(ValueError):
    """Raised when an upload does not have a .vscdb/.vscdb.backup name."""


def validate_upload_name(filename: Optional[str]) -> str:
    """
    Check that a file name looks like an IDE state database.

    Parameters
    ----------
    filename : str, optional
        Name of the uploaded or selected file

    Returns
    -------
    str
        The same file name

    Raises
    ------
    UnsupportedFileError
        If the name does not end with ``.vscdb`` or ``.vscdb.backup``
    """
    if not filename or not filename.endswith(ALLOWED_SUFFIXES):
        raise UnsupportedFileError("Upload must be a .vscdb or .vscdb.backup file")
    return filename


class ConversationExtractor:
    """
    Runs scan + build over a key-value store.

    Attributes
    ----------
    scanner : TableScanner
        Scanner used to collect raw entries
    builder : ConversationBuilder
        Builder used to produce messages
    """

    def __init__(
        self,
        scanner: Optional[TableScanner] = None,
        builder: Optional[ConversationBuilder] = None,
    ):
        if scanner is None:
            scanner = TableScanner.from_settings(load_scanner_settings())
        self.scanner = scanner
        self.builder = builder or ConversationBuilder()

    def extract(self, store: KeyValueStore) -> ExtractionResult:
        """
        Extract the conversation held in a store.

        Parameters
        ----------
        store : KeyValueStore
            Open store, owned by the caller

        Returns
        -------
        ExtractionResult
            Messages, raw map and table names. Messages are empty when no
            recognized conversation data exists.
        """
        scan = self.scanner.scan(store)
        messages, build_report = self.builder.build_with_report(scan.raw)

        return ExtractionResult(
            messages=messages,
            raw=scan.raw,
            tables=scan.tables,
            scan_report=scan.report,
            build_report=build_report,
        )

    def extract_from_path(self, db_path: Union[str, Path]) -> ExtractionResult:
        """
        Open a database file, extract, and close it.

        Raises
        ------
        StoreOpenError
            If the file is missing or not a SQLite database
        """
        with SQLiteKeyValueStore(db_path) as store:
            result = self.extract(store)

        logger.info(
            "Extracted %d messages from %s (%d tables)",
            len(result.messages),
            db_path,
            len(result.tables),
        )
        return result

    def extract_from_bytes(
        self, data: bytes, filename: str = "upload.vscdb"
    ) -> ExtractionResult:
        """
        Extract from an in-memory database image.

        The bytes are spooled to a temporary file that is removed afterwards.

        Raises
        ------
        EmptyUploadError
            If ``data`` is empty
        StoreOpenError
            If the bytes are not a SQLite database
        """
        if not data:
            raise EmptyUploadError("Uploaded file is empty")

        fd, path = tempfile.mkstemp(suffix=".vscdb")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
            logger.debug("Spooled %d bytes of %s to %s", len(data), filename, path)
            return self.extract_from_path(path)
        finally:
            try:
                os.unlink(path)
            except FileNotFoundError:
                pass


def extract_conversation(store: KeyValueStore) -> ExtractionResult:
    """Extract with default scanner and builder settings."""
    return ConversationExtractor().extract(store)


def extract_from_path(db_path: Union[str, Path]) -> ExtractionResult:
    """Extract from a ``.vscdb`` file with default settings."""
    return ConversationExtractor().extract_from_path(db_path)


def extract_from_bytes(data: bytes, filename: str = "upload.vscdb") -> ExtractionResult:
    """Extract from database bytes with default settings."""
    return ConversationExtractor().extract_from_bytes(data, filename)
