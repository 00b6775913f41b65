"""Engine context: every collaborator built once and passed in explicitly"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime

import httpx

from ..config.settings import AppSettings
from ..models.cache_models import CacheConfig
from ..providers import build_providers
from ..storage.database import Database
from ..storage.vocabulary_store import VocabularyStore
from ..utils.cache_manager import CacheManager
from .constants import ProviderConstants, language_pair
from .fallback import FallbackHeuristics
from .interfaces import (
    CacheManagerInterface,
    Clock,
    VocabularyProviderInterface,
    VocabularyStoreInterface,
)
from .quota import QuotaTracker
from .scoring import CandidateScorer

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class EngineContext:
    """Shared state of one engine instance.

    Nothing here is module-global, so two engines (or two tests) never see
    each other's quota counters or cache entries.
    """

    settings: AppSettings
    db: Database
    store: VocabularyStoreInterface
    cache: CacheManagerInterface
    quota: QuotaTracker
    providers: list[VocabularyProviderInterface]
    scorer: CandidateScorer = field(default_factory=CandidateScorer)
    fallback: FallbackHeuristics = field(default_factory=FallbackHeuristics)
    clock: Clock = datetime.now
    sleep: Sleep = asyncio.sleep
    http_client: httpx.AsyncClient | None = None
    owns_http_client: bool = False


def build_context(
    settings: AppSettings,
    *,
    clock: Clock = datetime.now,
    sleep: Sleep = asyncio.sleep,
    http_client: httpx.AsyncClient | None = None,
    providers: Sequence[VocabularyProviderInterface] | None = None,
    db: Database | None = None,
) -> EngineContext:
    """Wire the default collaborators from settings.

    Passing ``providers`` skips building the HTTP adapters entirely; passing
    ``http_client`` shares a caller-owned client (for example one backed by
    ``httpx.MockTransport``).
    """
    db = db or Database(settings.cache.database_path)
    cache_config = CacheConfig(
        ttl_hours=settings.cache.ttl_hours,
        max_memory_entries=settings.cache.max_memory_entries,
        preload_count=settings.cache.preload_count,
    )
    enrichment = settings.enrichment
    pair = language_pair(enrichment.source_lang, enrichment.target_lang)

    owns_client = False
    if providers is None:
        if http_client is None:
            timeout = httpx.Timeout(settings.providers.generative_timeout, connect=5.0)
            http_client = httpx.AsyncClient(timeout=timeout)
            owns_client = True
        providers = build_providers(settings.providers, http_client)

    quota = QuotaTracker(
        limits={
            provider_id: settings.quota.limit_for(provider_id)
            for provider_id in ProviderConstants.PRIORITY
        },
        default_limit=settings.quota.default_limit,
        period=settings.quota.reset_period,
        clock=clock,
    )

    return EngineContext(
        settings=settings,
        db=db,
        store=VocabularyStore(db, clock=clock),
        cache=CacheManager(db, cache_config, clock=clock, default_language_pair=pair),
        quota=quota,
        providers=list(providers),
        scorer=CandidateScorer(),
        fallback=FallbackHeuristics(clock=clock),
        clock=clock,
        sleep=sleep,
        http_client=http_client,
        owns_http_client=owns_client,
    )
