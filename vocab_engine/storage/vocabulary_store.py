"""Permanent store of resolved vocabulary records"""

import sqlite3
from datetime import datetime
from typing import Any

from ..core.constants import CacheConstants
from ..core.interfaces import Clock, VocabularyStoreInterface
from ..logging_config import get_logger
from ..models.vocabulary import VocabularyRecord
from .database import Database

logger = get_logger(__name__)

TABLE = CacheConstants.VOCABULARY_TABLE

RECORD_COLUMNS = (
    "word",
    "article",
    "translation",
    "pronunciation",
    "example_sentence",
    "grammar_note",
    "word_type",
    "level",
    "category",
    "confidence",
    "source",
    "frequency",
)


def word_key(word: str) -> str:
    """Case-insensitive lookup key (umlaut-aware, unlike SQLite NOCASE)"""
    return word.strip().lower()


def row_to_record(row: sqlite3.Row) -> VocabularyRecord:
    data: dict[str, Any] = {name: row[name] for name in RECORD_COLUMNS}
    data["last_updated"] = datetime.fromisoformat(row["last_updated"])
    return VocabularyRecord(**data)


class VocabularyStore(VocabularyStoreInterface):
    """One row per word; a row is only replaced by an equal or better record"""

    def __init__(self, db: Database, clock: Clock = datetime.now):
        self.db = db
        self._clock = clock

    def get_word(self, word: str) -> VocabularyRecord | None:
        row = self.db.fetch_one(
            "get_word", f"SELECT * FROM {TABLE} WHERE word_key = ?", (word_key(word),)
        )
        return row_to_record(row) if row else None

    def has_word(self, word: str) -> bool:
        row = self.db.fetch_one(
            "has_word", f"SELECT 1 FROM {TABLE} WHERE word_key = ?", (word_key(word),)
        )
        return row is not None

    def save_word(self, record: VocabularyRecord) -> bool:
        """Upsert a record.

        Returns False when the stored record has a strictly higher confidence
        and was kept.
        """
        existing = self.get_word(record.word)
        if existing is not None and existing.confidence > record.confidence:
            logger.debug(
                f"Keeping stored '{record.word}' "
                f"({existing.confidence:.2f} > {record.confidence:.2f})"
            )
            return False

        data = record.model_dump(mode="json", include=set(RECORD_COLUMNS))
        values = [data[name] for name in RECORD_COLUMNS]
        columns = ", ".join(RECORD_COLUMNS)
        placeholders = ", ".join("?" for _ in RECORD_COLUMNS)
        updates = ", ".join(f"{name} = excluded.{name}" for name in RECORD_COLUMNS)

        self.db.execute(
            "save_word",
            f"""
            INSERT INTO {TABLE} ({columns}, word_key, last_updated)
            VALUES ({placeholders}, ?, ?)
            ON CONFLICT(word_key) DO UPDATE SET
                {updates}, last_updated = excluded.last_updated
            """,
            [*values, word_key(record.word), self._clock().isoformat()],
        )
        return True

    def random_words(
        self, count: int, level: str | None = None, category: str | None = None
    ) -> list[VocabularyRecord]:
        conditions: list[str] = []
        params: list[Any] = []
        if level:
            conditions.append("level = ?")
            params.append(level.upper())
        if category:
            conditions.append("category = ?")
            params.append(category.lower())

        query = f"SELECT * FROM {TABLE}"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY RANDOM() LIMIT ?"
        params.append(count)

        rows = self.db.fetch_all("random_words", query, params)
        return [row_to_record(row) for row in rows]

    def counts(self) -> dict[str, Any]:
        row = self.db.fetch_one(
            "counts",
            f"""
            SELECT
                COUNT(*) AS total_words,
                COUNT(DISTINCT level) AS levels,
                COUNT(DISTINCT category) AS categories,
                AVG(confidence) AS avg_confidence
            FROM {TABLE}
            """,
        )
        by_source = self.db.fetch_all(
            "counts",
            f"SELECT source, COUNT(*) AS n FROM {TABLE} GROUP BY source ORDER BY source",
        )
        result: dict[str, Any] = dict(row) if row else {"total_words": 0}
        result["avg_confidence"] = result.get("avg_confidence") or 0.0
        result["by_source"] = {r["source"]: r["n"] for r in by_source}
        return result

    def clear(self) -> int:
        cursor = self.db.execute("clear", f"DELETE FROM {TABLE}")
        logger.info(f"Cleared {cursor.rowcount} stored vocabulary records")
        return cursor.rowcount
