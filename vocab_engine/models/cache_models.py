"""Pydantic models for cache-related data structures"""

from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CacheConfig(BaseModel):
    """Configuration for cache behavior"""

    ttl_hours: int = Field(default=24, description="Time to live in hours")
    max_memory_entries: int = Field(
        default=500, description="Capacity of the volatile tier"
    )
    preload_count: int = Field(
        default=100, description="Most-accessed durable entries loaded on startup"
    )

    @field_validator("ttl_hours")
    @classmethod
    def validate_ttl(cls, v: int) -> int:
        """Validate TTL value"""
        if v <= 0:
            raise ValueError("TTL must be positive")
        return v

    @field_validator("max_memory_entries")
    @classmethod
    def validate_max_entries(cls, v: int) -> int:
        """Validate volatile capacity"""
        if v <= 0:
            raise ValueError("Max memory entries must be positive")
        return v

    @field_validator("preload_count")
    @classmethod
    def validate_preload(cls, v: int) -> int:
        if v < 0:
            raise ValueError("Preload count cannot be negative")
        return v

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.ttl_hours)


class CacheEntry(BaseModel):
    """Model for cache entry"""

    word: str = Field(description="Word part of the key")
    language_pair: str = Field(description="Language pair part of the key, e.g. de-en")
    data: Any = Field(description="Cached serialized records")
    created_at: datetime = Field(
        default_factory=datetime.now, description="Creation timestamp"
    )
    accessed_at: datetime = Field(
        default_factory=datetime.now, description="Last access time"
    )
    access_count: int = Field(default=1, description="Access count")

    @field_validator("word", "language_pair")
    @classmethod
    def validate_key(cls, v: str) -> str:
        """Validate cache key parts"""
        if not v or not v.strip():
            raise ValueError("Cache key cannot be empty")
        return v.strip()

    @field_validator("access_count")
    @classmethod
    def validate_access_count(cls, v: int) -> int:
        """Validate access count"""
        if v < 0:
            raise ValueError("Access count cannot be negative")
        return v

    @property
    def key(self) -> tuple[str, str]:
        return (self.word, self.language_pair)

    def is_expired(self, ttl: timedelta, now: datetime) -> bool:
        """An entry is valid only while now - created_at < ttl"""
        return now - self.created_at >= ttl

    def touch(self, now: datetime) -> None:
        """Update access information"""
        self.access_count += 1
        self.accessed_at = now

    model_config = ConfigDict(arbitrary_types_allowed=True)


class CacheStats(BaseModel):
    """Model for cache statistics"""

    total_cached: int = Field(description="Entries in the durable tier")
    total_accesses: int = Field(description="Sum of durable access counts")
    avg_accesses: float = Field(description="Mean durable access count")
    max_accesses: int = Field(description="Highest durable access count")
    memory_cache_size: int = Field(description="Entries in the volatile tier")
    memory_cache_max: int = Field(description="Capacity of the volatile tier")
    hits: int = Field(default=0, description="Read hits since start")
    misses: int = Field(default=0, description="Read misses since start")
    hit_rate: float = Field(default=0.0, description="Cache hit rate percentage")
    last_cleanup: datetime | None = Field(None, description="Last sweep time")

    @field_validator("hit_rate")
    @classmethod
    def validate_hit_rate(cls, v: float) -> float:
        """Validate hit rate percentage"""
        if not 0 <= v <= 100:
            raise ValueError("Hit rate must be between 0 and 100")
        return v
