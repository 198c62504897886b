"""
Base interface for key-value stores.

The scanner only needs three operations from a store: listing table names,
reading every row of a table, and reading rows whose key matches a SQL LIKE
pattern. Rows are returned undecoded.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Tuple

Row = Tuple[Any, Any]


class StoreOpenError(Exception):
    """Raised when a store cannot be opened (missing file, not a database)."""


class KeyValueStore(ABC):
    """
    Abstract two-column (key, value) table store.

    Subclasses own the underlying handle. Closing it is the caller's
    responsibility; the extraction pipeline never closes a store it was given.

    Methods
    -------
    list_table_names()
        Names of all tables, in store order
    read_all_rows(table_name)
        Every (key, value) row of a table
    read_rows_matching(table_name, like_pattern)
        Rows whose key matches a LIKE pattern
    """

    @abstractmethod
    def list_table_names(self) -> List[str]:
        """
        List table names.

        Returns
        -------
        List[str]
            Table names. Implementations return an empty list on read errors.
        """

    @abstractmethod
    def read_all_rows(self, table_name: str) -> List[Row]:
        """
        Read every row of a table.

        Parameters
        ----------
        table_name : str
            Table to read

        Returns
        -------
        List[Row]
            (key, value) pairs as stored (text or bytes)
        """

    @abstractmethod
    def read_rows_matching(self, table_name: str, like_pattern: str) -> List[Row]:
        """
        Read rows whose key matches a SQL LIKE pattern.

        Parameters
        ----------
        table_name : str
            Table to read
        like_pattern : str
            Pattern where ``%`` matches any run of characters

        Returns
        -------
        List[Row]
            Matching (key, value) pairs as stored
        """

    def close(self) -> None:
        """Release the underlying handle. No-op by default."""
