"""Two-tier vocabulary cache facade.

Reads go volatile tier first, then the durable tier (promoting hits);
writes go to the durable tier first, then the volatile tier.
"""

from datetime import datetime
from typing import Any

from ..core.interfaces import CacheManagerInterface, Clock
from ..logging_config import get_logger
from ..models.cache_models import CacheConfig, CacheStats
from ..models.vocabulary import VocabularyRecord
from ..storage.database import Database
from .cache_engine import DurableCache, MemoryCache
from .error_handler import handle_errors

logger = get_logger(__name__)


class CacheManager(CacheManagerInterface):
    """Cache manager facade over the volatile and durable tiers"""

    def __init__(
        self,
        db: Database,
        config: CacheConfig | None = None,
        clock: Clock = datetime.now,
        default_language_pair: str = "de-en",
    ):
        self.config = config or CacheConfig()
        self._clock = clock
        self.default_language_pair = default_language_pair
        self.memory = MemoryCache(
            max_size=self.config.max_memory_entries, ttl=self.config.ttl, clock=clock
        )
        self.durable = DurableCache(db, self.config.ttl, clock=clock)
        self._hits = 0
        self._misses = 0
        self._last_cleanup: datetime | None = None

    @handle_errors(default_return=None, operation_name="cache_get")
    def get(
        self, word: str, language_pair: str
    ) -> list[VocabularyRecord] | None:
        key = (word, language_pair)
        entry = self.memory.get(key)
        if entry is None:
            entry = self.durable.get(word, language_pair)
            if entry is not None:
                # Promotion keeps the durable created_at, so TTL still runs
                # from the original write
                self.memory.set(entry)
                logger.debug(f"Durable cache hit for: {word}")
        else:
            logger.debug(f"Memory cache hit for: {word}")

        if entry is None:
            self._misses += 1
            return None
        self._hits += 1
        return [VocabularyRecord.model_validate(item) for item in entry.data]

    @handle_errors(operation_name="cache_put")
    def put(
        self, word: str, language_pair: str, records: list[VocabularyRecord]
    ) -> None:
        data = [record.model_dump(mode="json") for record in records]
        entry = self.durable.set(word, language_pair, data)
        self.memory.set(entry)

    @handle_errors(default_return=0, operation_name="cache_sweep")
    def sweep(self) -> int:
        removed = self.durable.sweep()
        self._last_cleanup = self._clock()
        logger.info(f"Cleaned up {removed} expired cache entries")
        return removed

    @handle_errors(default_return=0, operation_name="cache_preload")
    def preload(self, limit: int | None = None) -> int:
        limit = self.config.preload_count if limit is None else limit
        if limit <= 0:
            return 0
        entries = self.durable.most_accessed(limit)
        # Least popular first so the most popular are evicted last
        for entry in reversed(entries):
            self.memory.set(entry)
        logger.info(f"Loaded {len(entries)} frequent words to memory cache")
        return len(entries)

    def clear(self) -> None:
        removed = self.durable.clear()
        self.memory.clear()
        self._hits = 0
        self._misses = 0
        logger.info(f"Cache cleared ({removed} durable entries removed)")

    def clear_memory(self) -> None:
        self.memory.clear()

    def stats(self) -> CacheStats:
        totals = self.durable.totals()
        lookups = self._hits + self._misses
        return CacheStats(
            total_cached=totals.get("total_cached", 0),
            total_accesses=totals.get("total_accesses", 0),
            avg_accesses=float(totals.get("avg_accesses", 0.0)),
            max_accesses=totals.get("max_accesses", 0),
            memory_cache_size=self.memory.size(),
            memory_cache_max=self.memory.max_size,
            hits=self._hits,
            misses=self._misses,
            hit_rate=(self._hits / lookups * 100) if lookups else 0.0,
            last_cleanup=self._last_cleanup,
        )

    def random_cached(
        self,
        count: int,
        level: str | None = None,
        category: str | None = None,
        language_pair: str | None = None,
    ) -> list[VocabularyRecord]:
        entries = self.durable.random(
            count, language_pair or self.default_language_pair, level, category
        )
        records: list[VocabularyRecord] = []
        for entry in entries:
            records.extend(VocabularyRecord.model_validate(item) for item in entry.data)
        return records[:count]

    def popular(self, limit: int = 50) -> list[dict[str, Any]]:
        result = []
        for entry in self.durable.most_accessed(limit):
            first = entry.data[0] if entry.data else {}
            result.append(
                {
                    "word": entry.word,
                    "language_pair": entry.language_pair,
                    "access_count": entry.access_count,
                    "data": first,
                }
            )
        return result
