#!/usr/bin/env python3
"""
File Store
==========
Key-value persistence for the n-gram table and the word cache.

Storage: one SQLite file with a single ``data`` table. Values are stored as
JSON text, so a stored table is readable by anything that speaks SQLite and
JSON:

    grams      -> {"c": {"a": 3}, "a": {"t": 1, "r": 1, "n": 1}}
    gram_size  -> 1
    words      -> ["fenter", "sorimal", ...]

Not safe for concurrent writers: two generators sharing one file race on
read-modify-write. Give each worker its own path.
"""

import json
import logging
import secrets
import sqlite3
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, List, Union

from .errors import PersistenceError

logger = logging.getLogger(__name__)


class FileStore:
    """
    SQLite-backed key-value store.

    Usage:
        store = FileStore('tmp/words.data')
        store.store('grams', {'c': {'a': 3}})
        store.retrieve('grams')       # {'c': {'a': 3}}
        store.retrieve('missing')     # None

        # Start from an empty file
        store = FileStore('tmp/words.data', flush_data=True)
    """

    def __init__(self, file_path: Union[str, Path, None] = None, flush_data: bool = False):
        if file_path is None:
            file_path = Path(tempfile.gettempdir()) / f"markov_words_{secrets.token_hex(8)}.db"

        self.file_path = Path(file_path)
        self._init_db()
        if flush_data:
            self.clear()

    def __repr__(self) -> str:
        return f"FileStore({str(self.file_path)!r})"

    @contextmanager
    def _connect(self):
        """Connection that commits on success and is always closed."""
        try:
            conn = sqlite3.connect(self.file_path)
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open store {self.file_path}: {e}") from e
        try:
            with conn:
                yield conn
        except sqlite3.Error as e:
            raise PersistenceError(f"Store {self.file_path} failed: {e}") from e
        finally:
            conn.close()

    def _init_db(self):
        """Create the file (and its directory) and the data table"""
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create directory for {self.file_path}: {e}") from e

        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS data (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
            """)

    def store(self, key: str, value: Any):
        """Persist a JSON-serializable value under key, replacing any previous one."""
        try:
            encoded = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for '{key}' is not serializable: {e}") from e

        with self._connect() as conn:
            conn.execute(
                "INSERT INTO data (key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (str(key), encoded),
            )
        logger.debug(f"Stored '{key}' in {self.file_path} ({len(encoded)} bytes)")

    def retrieve(self, key: str, default: Any = None) -> Any:
        """Value stored under key, or default if it was never stored."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT value FROM data WHERE key = ?", (str(key),)
            ).fetchone()

        if row is None:
            return default
        try:
            return json.loads(row[0])
        except ValueError as e:
            raise PersistenceError(f"Corrupt value for '{key}' in {self.file_path}: {e}") from e

    def exists(self, key: str) -> bool:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT 1 FROM data WHERE key = ?", (str(key),)
            ).fetchone()
        return row is not None

    def delete(self, key: str) -> bool:
        """Remove key. Returns True if something was deleted."""
        with self._connect() as conn:
            cursor = conn.execute("DELETE FROM data WHERE key = ?", (str(key),))
            return cursor.rowcount > 0

    def keys(self) -> List[str]:
        with self._connect() as conn:
            return [row[0] for row in conn.execute("SELECT key FROM data ORDER BY key")]

    def clear(self):
        """Remove every entry"""
        with self._connect() as conn:
            conn.execute("DELETE FROM data")
        logger.debug(f"Flushed {self.file_path}")


__all__ = ['FileStore']
