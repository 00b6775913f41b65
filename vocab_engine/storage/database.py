"""SQLite connection and schema for the vocabulary and cache tables"""

import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.constants import CacheConstants
from ..exceptions import StorageError
from ..logging_config import get_logger

logger = get_logger(__name__)

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS {CacheConstants.VOCABULARY_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL,
    word_key TEXT NOT NULL UNIQUE,
    article TEXT NOT NULL DEFAULT 'none',
    translation TEXT NOT NULL DEFAULT '',
    pronunciation TEXT,
    example_sentence TEXT,
    grammar_note TEXT,
    word_type TEXT NOT NULL DEFAULT 'unknown',
    level TEXT NOT NULL DEFAULT 'A1',
    category TEXT NOT NULL DEFAULT 'general',
    confidence REAL NOT NULL DEFAULT 1.0,
    source TEXT NOT NULL DEFAULT 'manual',
    frequency INTEGER NOT NULL DEFAULT 0,
    last_updated TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_vocabulary_level_category
    ON {CacheConstants.VOCABULARY_TABLE} (level, category);
CREATE INDEX IF NOT EXISTS idx_vocabulary_source
    ON {CacheConstants.VOCABULARY_TABLE} (source);

CREATE TABLE IF NOT EXISTS {CacheConstants.CACHE_TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL,
    language_pair TEXT NOT NULL,
    parsed_data TEXT NOT NULL,
    created_at TEXT NOT NULL,
    accessed_at TEXT NOT NULL,
    access_count INTEGER NOT NULL DEFAULT 1,
    UNIQUE(word, language_pair)
);

CREATE INDEX IF NOT EXISTS idx_cache_access_count
    ON {CacheConstants.CACHE_TABLE} (access_count DESC);
"""


class Database:
    """Thin wrapper over one sqlite3 connection shared by the store and cache.

    Timestamps are written as ISO-8601 strings supplied by the caller so
    that an injected clock controls every age comparison.
    """

    def __init__(self, path: str | Path = ":memory:"):
        self.path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    def connect(self) -> None:
        """Open the connection and create tables if needed"""
        if self._conn is not None:
            return
        if self.path != ":memory:":
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(self.path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA)
            self._conn.commit()
        except sqlite3.Error as e:
            raise StorageError("connect", e) from e
        logger.debug(f"Opened vocabulary database at {self.path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "Database":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def execute(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> sqlite3.Cursor:
        """Run a write statement and commit"""
        try:
            cursor = self.connection.execute(sql, tuple(params))
            self.connection.commit()
            return cursor
        except sqlite3.Error as e:
            self.connection.rollback()
            raise StorageError(operation, e) from e

    def fetch_one(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> sqlite3.Row | None:
        try:
            return self.connection.execute(sql, tuple(params)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(operation, e) from e

    def fetch_all(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> list[sqlite3.Row]:
        try:
            return self.connection.execute(sql, tuple(params)).fetchall()
        except sqlite3.Error as e:
            raise StorageError(operation, e) from e
