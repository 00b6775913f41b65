"""Data models for the vocabulary engine"""

from .cache_models import CacheConfig, CacheEntry, CacheStats
from .results import (
    BatchEnrichmentResult,
    EnrichmentOutcome,
    LookupMode,
    ProviderErr,
    ProviderOk,
    ProviderOutcome,
    RawCandidate,
    Resolution,
    ResolutionStatus,
)
from .vocabulary import Article, CEFRLevel, VocabularyRecord, WordType

__all__ = [
    "VocabularyRecord",
    "Article",
    "WordType",
    "CEFRLevel",
    "RawCandidate",
    "ProviderOk",
    "ProviderErr",
    "ProviderOutcome",
    "LookupMode",
    "Resolution",
    "ResolutionStatus",
    "EnrichmentOutcome",
    "BatchEnrichmentResult",
    "CacheEntry",
    "CacheConfig",
    "CacheStats",
]
