"""
Readers exposing IDE state databases as key-value stores.
"""

from .base import KeyValueStore, Row, StoreOpenError
from .sqlite_store import SQLiteKeyValueStore

__all__ = [
    "KeyValueStore",
    "Row",
    "SQLiteKeyValueStore",
    "StoreOpenError",
]
