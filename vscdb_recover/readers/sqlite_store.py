"""
SQLite-backed key-value store for ``state.vscdb`` files.

Opens the database read-only so that a live IDE database is never modified,
and exposes the ``KeyValueStore`` interface over its two-column tables
(``ItemTable`` and ``cursorDiskKV``).
"""

import logging
import sqlite3
from pathlib import Path
from typing import List, Optional, Union

from vscdb_recover.readers.base import KeyValueStore, Row, StoreOpenError

logger = logging.getLogger(__name__)


def _quote_identifier(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


class SQLiteKeyValueStore(KeyValueStore):
    """
    Read-only SQLite key-value store with context manager support.

    Attributes
    ----------
    db_path : Path
        Path to the ``.vscdb`` file
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Open the database.

        Parameters
        ----------
        db_path : str or Path
            Path to a ``state.vscdb`` (or ``.vscdb.backup``) file

        Raises
        ------
        StoreOpenError
            If the file does not exist or is not a SQLite database
        """
        self.db_path = Path(db_path)
        self._conn: Optional[sqlite3.Connection] = None
        self._connect()

    def _connect(self) -> None:
        """Open a read-only connection and make sure it is a database."""
        if not self.db_path.is_file():
            raise StoreOpenError(f"Database file not found: {self.db_path}")

        uri = f"{self.db_path.resolve().as_uri()}?mode=ro"
        try:
            self._conn = sqlite3.connect(uri, uri=True, check_same_thread=False)
            # sqlite3 opens lazily; touching the schema validates the header
            self._conn.execute("SELECT count(*) FROM sqlite_master").fetchone()
        except sqlite3.Error as e:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
            raise StoreOpenError(f"Failed to open database {self.db_path}: {e}") from e

        logger.debug("Key-value store opened: %s", self.db_path)

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the underlying SQLite connection."""
        if self._conn is None:
            self._connect()
        return self._conn

    def list_table_names(self) -> List[str]:
        try:
            cursor = self.connection.execute(
                "SELECT name FROM sqlite_master WHERE type='table'"
            )
            return [row[0] for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.warning("Could not list tables in %s: %s", self.db_path, e)
            return []

    def read_all_rows(self, table_name: str) -> List[Row]:
        cursor = self.connection.execute(
            f"SELECT key, value FROM {_quote_identifier(table_name)}"
        )
        return [tuple(row) for row in cursor.fetchall()]

    def read_rows_matching(self, table_name: str, like_pattern: str) -> List[Row]:
        cursor = self.connection.execute(
            f"SELECT key, value FROM {_quote_identifier(table_name)} WHERE key LIKE ?",
            (like_pattern,),
        )
        return [tuple(row) for row in cursor.fetchall()]

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Key-value store closed: %s", self.db_path)

    def __enter__(self) -> "SQLiteKeyValueStore":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.close()
