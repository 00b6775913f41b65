"""Cache tiers: a bounded volatile map and a durable SQLite table.

Provides:
- MemoryCache: FIFO-bounded in-process tier
- DurableCache: TTL-checked rows in the ``vocabulary_cache`` table
"""

import json
import sqlite3
from collections.abc import Iterable
from datetime import datetime, timedelta
from typing import Any

from ..core.constants import CacheConstants
from ..core.interfaces import Clock
from ..exceptions import CacheError, StorageError
from ..logging_config import get_logger
from ..models.cache_models import CacheEntry
from ..storage.database import Database

logger = get_logger(__name__)

CacheKey = tuple[str, str]
TABLE = CacheConstants.CACHE_TABLE


class MemoryCache:
    """Volatile tier bounded by ``max_size``.

    When full, inserting a new key evicts the earliest-inserted key still
    present (FIFO, not least-recently-used). Re-inserting a present key
    updates it in place and keeps its original position.
    """

    def __init__(
        self,
        max_size: int = 500,
        ttl: timedelta | None = None,
        clock: Clock = datetime.now,
    ):
        if max_size <= 0:
            raise ValueError("max_size must be positive")
        self._cache: dict[CacheKey, CacheEntry] = {}
        self._max_size = max_size
        self._ttl = ttl or timedelta(hours=24)
        self._clock = clock
        self.evictions = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    def get(self, key: CacheKey) -> CacheEntry | None:
        entry = self._cache.get(key)
        if entry is None:
            return None
        now = self._clock()
        if entry.is_expired(self._ttl, now):
            del self._cache[key]
            return None
        entry.touch(now)
        return entry

    def set(self, entry: CacheEntry) -> None:
        key = entry.key
        if key not in self._cache and len(self._cache) >= self._max_size:
            self._evict_oldest()
        self._cache[key] = entry

    def delete(self, key: CacheKey) -> bool:
        return self._cache.pop(key, None) is not None

    def clear(self) -> None:
        self._cache.clear()

    def keys(self) -> list[CacheKey]:
        return list(self._cache.keys())

    def size(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def _evict_oldest(self) -> None:
        # dicts iterate in insertion order
        oldest = next(iter(self._cache))
        del self._cache[oldest]
        self.evictions += 1
        logger.debug(f"Evicted {oldest} from memory cache")


def _row_to_entry(row: sqlite3.Row) -> CacheEntry:
    return CacheEntry(
        word=row["word"],
        language_pair=row["language_pair"],
        data=json.loads(row["parsed_data"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        accessed_at=datetime.fromisoformat(row["accessed_at"]),
        access_count=row["access_count"],
    )


class DurableCache:
    """Durable tier keyed uniquely by ``(word, language_pair)``"""

    def __init__(self, db: Database, ttl: timedelta, clock: Clock = datetime.now):
        self.db = db
        self.ttl = ttl
        self._clock = clock

    def _cutoff(self) -> str:
        """Rows created at or before this instant are expired"""
        return (self._clock() - self.ttl).isoformat()

    def _execute(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> sqlite3.Cursor:
        try:
            return self.db.execute(operation, sql, params)
        except StorageError as e:
            raise CacheError(operation, "durable", e) from e

    def _fetch_one(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> sqlite3.Row | None:
        try:
            return self.db.fetch_one(operation, sql, params)
        except StorageError as e:
            raise CacheError(operation, "durable", e) from e

    def _fetch_all(
        self, operation: str, sql: str, params: Iterable[Any] = ()
    ) -> list[sqlite3.Row]:
        try:
            return self.db.fetch_all(operation, sql, params)
        except StorageError as e:
            raise CacheError(operation, "durable", e) from e

    def get(self, word: str, language_pair: str) -> CacheEntry | None:
        row = self._fetch_one(
            "cache_get",
            f"SELECT * FROM {TABLE} WHERE word = ? AND language_pair = ?",
            (word, language_pair),
        )
        if row is None:
            return None

        entry = _row_to_entry(row)
        now = self._clock()
        if entry.is_expired(self.ttl, now):
            self.delete(word, language_pair)
            return None

        entry.touch(now)
        self._execute(
            "cache_touch",
            f"""
            UPDATE {TABLE}
            SET accessed_at = ?, access_count = access_count + 1
            WHERE word = ? AND language_pair = ?
            """,
            (now.isoformat(), word, language_pair),
        )
        return entry

    def set(self, word: str, language_pair: str, data: Any) -> CacheEntry:
        """Upsert a row; a rewrite restarts its TTL but keeps its access count"""
        now = self._clock()
        self._execute(
            "cache_set",
            f"""
            INSERT INTO {TABLE}
                (word, language_pair, parsed_data, created_at, accessed_at, access_count)
            VALUES (?, ?, ?, ?, ?, 1)
            ON CONFLICT(word, language_pair) DO UPDATE SET
                parsed_data = excluded.parsed_data,
                created_at = excluded.created_at,
                accessed_at = excluded.accessed_at
            """,
            (
                word,
                language_pair,
                json.dumps(data, ensure_ascii=False),
                now.isoformat(),
                now.isoformat(),
            ),
        )
        return CacheEntry(
            word=word,
            language_pair=language_pair,
            data=data,
            created_at=now,
            accessed_at=now,
        )

    def delete(self, word: str, language_pair: str) -> bool:
        cursor = self._execute(
            "cache_delete",
            f"DELETE FROM {TABLE} WHERE word = ? AND language_pair = ?",
            (word, language_pair),
        )
        return cursor.rowcount > 0

    def sweep(self) -> int:
        cursor = self._execute(
            "cache_sweep",
            f"DELETE FROM {TABLE} WHERE created_at <= ?",
            (self._cutoff(),),
        )
        return cursor.rowcount

    def clear(self) -> int:
        return self._execute("cache_clear", f"DELETE FROM {TABLE}").rowcount

    def most_accessed(self, limit: int) -> list[CacheEntry]:
        """Non-expired rows ordered by access count"""
        rows = self._fetch_all(
            "cache_most_accessed",
            f"""
            SELECT * FROM {TABLE}
            WHERE created_at > ?
            ORDER BY access_count DESC, accessed_at DESC
            LIMIT ?
            """,
            (self._cutoff(), limit),
        )
        return [_row_to_entry(row) for row in rows]

    def random(
        self,
        count: int,
        language_pair: str,
        level: str | None = None,
        category: str | None = None,
    ) -> list[CacheEntry]:
        """Random non-expired rows, filtered on their first record"""
        query = f"SELECT * FROM {TABLE} WHERE language_pair = ? AND created_at > ?"
        params: list[Any] = [language_pair, self._cutoff()]
        if level:
            query += " AND json_extract(parsed_data, '$[0].level') = ?"
            params.append(level.upper())
        if category:
            query += " AND json_extract(parsed_data, '$[0].category') = ?"
            params.append(category.lower())
        query += " ORDER BY RANDOM() LIMIT ?"
        params.append(count)
        rows = self._fetch_all("cache_random", query, params)
        return [_row_to_entry(row) for row in rows]

    def totals(self) -> dict[str, Any]:
        row = self._fetch_one(
            "cache_totals",
            f"""
            SELECT
                COUNT(*) AS total_cached,
                COALESCE(SUM(access_count), 0) AS total_accesses,
                COALESCE(AVG(access_count), 0) AS avg_accesses,
                COALESCE(MAX(access_count), 0) AS max_accesses
            FROM {TABLE}
            """,
        )
        return dict(row) if row else {}
