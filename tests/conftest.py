"""
Shared fixtures: temporary state.vscdb files.
"""
import json
import os
import sqlite3
import tempfile

import pytest


def _write_table(conn, table, rows):
    conn.execute(f'CREATE TABLE IF NOT EXISTS "{table}" (key TEXT UNIQUE ON CONFLICT REPLACE, value BLOB)')
    for key, value in rows:
        if isinstance(value, (dict, list)):
            value = json.dumps(value)
        conn.execute(f'INSERT INTO "{table}" (key, value) VALUES (?, ?)', (key, value))


@pytest.fixture
def make_vscdb():
    """
    Factory creating a temporary .vscdb file.

    Call with ``{table_name: [(key, value), ...]}``; dict/list values are
    stored as JSON text.
    """
    paths = []

    def _make(tables, suffix='.vscdb'):
        fd, path = tempfile.mkstemp(suffix=suffix)
        os.close(fd)
        conn = sqlite3.connect(path)
        try:
            for table, rows in tables.items():
                _write_table(conn, table, rows)
            conn.commit()
        finally:
            conn.close()
        paths.append(path)
        return path

    yield _make

    for path in paths:
        for suffix in ['', '-wal', '-shm', '-journal']:
            try:
                os.unlink(path + suffix)
            except FileNotFoundError:
                pass
