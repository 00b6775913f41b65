"""Vocabulary resolution engine.

Resolves a word through the permanent store, the two-tier cache and the
quota-gated provider chain, scoring whatever candidates come back. In
enrichment mode a heuristic record is produced when nothing else answers.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Any, TypeVar

from ..exceptions import (
    AllProvidersFailedError,
    ParseError,
    ProviderConfigError,
    ProviderError,
    ProviderNetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    StorageError,
    WordValidationError,
)
from ..logging_config import get_logger
from ..models.results import (
    BatchEnrichmentResult,
    EnrichmentOutcome,
    LookupMode,
    ProviderErr,
    ProviderOk,
    ProviderOutcome,
    Resolution,
    ResolutionStatus,
)
from ..models.vocabulary import VocabularyRecord
from ..utils.error_handler import ErrorCollector, handle_errors, handle_errors_async
from .constants import COMMON_GERMAN_WORDS, ScoringConstants, language_pair
from .container import EngineContext
from .interfaces import VocabularyProviderInterface
from .text_processor import TextProcessor

logger = get_logger(__name__)

T = TypeVar("T")


def enrichment_priority(access_count: int, data: dict[str, Any]) -> float:
    """Rank a popular cached word for enrichment"""
    priority = min(access_count / 10, 5)
    if data.get("article") in ScoringConstants.VALID_ARTICLES:
        priority += 2
    if len(data.get("translation") or "") > ScoringConstants.MIN_TRANSLATION_LENGTH:
        priority += 1
    if len(data.get("example_sentence") or "") > ScoringConstants.MIN_EXAMPLE_LENGTH:
        priority += 1
    return priority


class VocabularyEngine:
    """Answers vocabulary queries and coordinates batch enrichment"""

    def __init__(self, context: EngineContext):
        self.ctx = context
        self.settings = context.settings
        # Providers that reported a configuration failure stay off until restart
        self._disabled: set[str] = set()
        self._initialized = False

    @property
    def language_pair(self) -> str:
        enrichment = self.settings.enrichment
        return language_pair(enrichment.source_lang, enrichment.target_lang)

    @property
    def providers(self) -> list[VocabularyProviderInterface]:
        return list(self.ctx.providers)

    def usable_providers(self) -> list[VocabularyProviderInterface]:
        return [
            provider
            for provider in self.ctx.providers
            if provider.is_configured and provider.id not in self._disabled
        ]

    async def initialize(self) -> None:
        """Open storage and warm the volatile cache"""
        if self._initialized:
            return
        self.ctx.db.connect()
        self.ctx.cache.preload()
        self._initialized = True
        configured = [p.id for p in self.usable_providers()]
        logger.info(
            f"Vocabulary engine initialized "
            f"(providers: {', '.join(configured) or 'none'})"
        )

    async def aclose(self) -> None:
        """Release the HTTP client and the database connection"""
        for provider in self.ctx.providers:
            await provider.aclose()
        if self.ctx.http_client is not None and self.ctx.owns_http_client:
            await self.ctx.http_client.aclose()
        self.ctx.db.close()
        self._initialized = False

    async def __aenter__(self) -> "VocabularyEngine":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    # Single-word resolution

    def _clean(self, word: str) -> str:
        cleaned = TextProcessor.clean_word(word)
        if not cleaned:
            raise WordValidationError(word, "not a valid word or phrase")
        return cleaned

    async def lookup(
        self, word: str, mode: LookupMode = LookupMode.SEARCH
    ) -> Resolution:
        """Resolve one word, reporting how it was answered"""
        cleaned = self._clean(word)
        pair = self.language_pair

        stored = self.ctx.store.get_word(cleaned)
        if stored is not None:
            return Resolution(cleaned, ResolutionStatus.STORED, [stored])

        cached = self.ctx.cache.get(cleaned, pair)
        if cached:
            return Resolution(cleaned, ResolutionStatus.CACHED, cached)

        candidates, outcomes = await self._query_providers(cleaned)
        winner = self.ctx.scorer.select(candidates)
        if winner is not None:
            self._persist(cleaned, pair, winner)
            return Resolution(cleaned, ResolutionStatus.RESOLVED, [winner], outcomes)

        status = self._empty_status(outcomes)
        if mode is LookupMode.ENRICH:
            logger.info(f"Using fallback heuristics for '{cleaned}' ({status.value})")
            record = self.ctx.fallback.build_record(cleaned)
            return Resolution(cleaned, ResolutionStatus.FALLBACK, [record], outcomes)

        logger.info(f"No result for '{cleaned}' ({status.value})")
        return Resolution(cleaned, status, [], outcomes)

    async def search_vocabulary(self, word: str) -> list[VocabularyRecord]:
        """Search mode: never falls back, may return an empty list"""
        resolution = await self.lookup(word, LookupMode.SEARCH)
        return resolution.records

    async def enrich_word(self, word: str) -> VocabularyRecord:
        """Enrichment mode: always yields a record, heuristic if necessary"""
        resolution = await self.lookup(word, LookupMode.ENRICH)
        if resolution.best is None:
            raise AllProvidersFailedError(resolution.word, resolution.attempted_sources)
        return resolution.best

    def _persist(self, word: str, pair: str, record: VocabularyRecord) -> None:
        try:
            self.ctx.store.save_word(record)
        except StorageError as e:
            logger.warning(f"Could not store '{word}': {e.message}")
        self.ctx.cache.put(word, pair, [record])

    async def _query_providers(
        self, word: str
    ) -> tuple[list[VocabularyRecord], list[ProviderOutcome]]:
        """Ask every usable provider in priority order"""
        candidates: list[VocabularyRecord] = []
        outcomes: list[ProviderOutcome] = []

        for provider in self.usable_providers():
            if not self.ctx.quota.try_consume(provider.id):
                outcomes.append(
                    ProviderErr(provider.id, QuotaExceededError.kind, "no quota left")
                )
                continue

            outcome = await self._attempt(provider, word)
            outcomes.append(outcome)
            if isinstance(outcome, ProviderOk):
                candidates.extend(outcome.candidates)

        return candidates, outcomes

    async def _attempt(
        self, provider: VocabularyProviderInterface, word: str
    ) -> ProviderOutcome:
        """One quota-reserved provider call, as a tagged outcome"""
        enrichment = self.settings.enrichment
        quota = self.ctx.quota
        try:
            raw = await provider.search(
                word, enrichment.source_lang, enrichment.target_lang
            )
        except ProviderConfigError as e:
            quota.release(provider.id)
            self._disabled.add(provider.id)
            logger.warning(f"Disabling {provider.id}: {e.message}")
            return ProviderErr(provider.id, e.kind, e.message)
        except QuotaExceededError as e:
            quota.mark_exhausted(provider.id)
            return ProviderErr(provider.id, e.kind, e.message)
        except (ProviderTimeoutError, ProviderNetworkError) as e:
            quota.release(provider.id)
            logger.warning(f"{provider.id} failed for '{word}': {e.message}")
            return ProviderErr(provider.id, e.kind, e.message)
        except ParseError as e:
            logger.warning(f"{provider.id} reply for '{word}' unusable: {e.reason}")
            return ProviderErr(provider.id, e.kind, e.message)
        except ProviderError as e:
            quota.release(provider.id)
            logger.warning(f"{provider.id} failed for '{word}': {e.message}")
            return ProviderErr(provider.id, e.kind, e.message)

        records: list[VocabularyRecord] = []
        dropped = 0
        for item in raw:
            try:
                records.append(provider.normalize(item, word))
            except ParseError as e:
                dropped += 1
                logger.debug(f"Dropped malformed {provider.id} candidate: {e.reason}")

        logger.debug(
            f"{provider.id} returned {len(records)} candidates for '{word}'"
            + (f" ({dropped} dropped)" if dropped else "")
        )
        return ProviderOk(provider.id, records, dropped)

    @staticmethod
    def _empty_status(outcomes: list[ProviderOutcome]) -> ResolutionStatus:
        """Tell apart the reasons a lookup produced no candidates"""
        if not outcomes:
            return ResolutionStatus.NO_PROVIDERS
        if any(o.ok for o in outcomes):
            return ResolutionStatus.NOT_FOUND
        if all(o.kind == QuotaExceededError.kind for o in outcomes):
            return ResolutionStatus.QUOTA_EXHAUSTED
        return ResolutionStatus.ALL_FAILED

    # Batch work

    async def _run_batched(
        self,
        words: Sequence[str],
        func: Callable[[str], Awaitable[T]],
    ) -> tuple[list[T | BaseException], int]:
        """Run ``func`` over ``words`` in paced concurrent batches.

        Results come back in input order whatever order the calls finish in.
        """
        size = self.settings.enrichment.batch_size
        delay = self.settings.enrichment.batch_delay_ms / 1000
        batches = [list(words[i : i + size]) for i in range(0, len(words), size)]

        results: list[T | BaseException] = []
        for index, batch in enumerate(batches):
            if index > 0:
                await self.ctx.sleep(delay)
            logger.debug(f"Batch {index + 1}/{len(batches)}: {len(batch)} words")
            batch_results = await asyncio.gather(
                *(func(word) for word in batch), return_exceptions=True
            )
            for result in batch_results:
                if isinstance(result, BaseException) and not isinstance(
                    result, Exception
                ):
                    raise result
            results.extend(batch_results)
        return results, len(batches)

    async def batch_enrich(self, words: Sequence[str]) -> BatchEnrichmentResult:
        """Enrich many words; one word failing never aborts the others"""
        results, batches = await self._run_batched(words, self.enrich_word)
        collector = ErrorCollector()
        outcomes: list[EnrichmentOutcome] = []

        for word, result in zip(words, results):
            if isinstance(result, BaseException):
                collector.add_error(result, word)
                reason = getattr(result, "message", None) or str(result)
                outcomes.append(EnrichmentOutcome(word, False, error=reason))
            else:
                outcomes.append(EnrichmentOutcome(word, True, record=result))

        if collector.has_errors():
            collector.log_all(logger)
        result = BatchEnrichmentResult(outcomes, batches=batches)
        logger.info(
            f"Batch enrichment: {result.successful} succeeded, "
            f"{result.failed} failed in {batches} batches"
        )
        return result

    # Quiz and statistics

    def get_quiz_vocabulary(
        self, count: int = 10, level: str | None = None, category: str | None = None
    ) -> list[VocabularyRecord]:
        """Random stored words, topped up from the cache when too few exist"""
        words = self.ctx.store.random_words(count, level, category)
        if len(words) >= count:
            return words[:count]

        seen = {record.word.lower() for record in words}
        for record in self.ctx.cache.random_cached(
            count - len(words), level, category, self.language_pair
        ):
            if record.word.lower() in seen:
                continue
            seen.add(record.word.lower())
            words.append(record)
            try:
                self.ctx.store.save_word(record)
            except StorageError as e:
                logger.warning(
                    f"Could not store quiz word '{record.word}': {e.message}"
                )
        return words[:count]

    def get_stats(self) -> dict[str, Any]:
        return {
            "cache": self.ctx.cache.stats().model_dump(),
            "quota": self.ctx.quota.status(),
            "database": self.ctx.store.counts(),
        }

    # Maintenance

    def suggest_words_for_enrichment(self, count: int = 10) -> list[dict[str, Any]]:
        """Popular cached words that are not yet in the permanent store"""
        suggestions: list[dict[str, Any]] = []
        for popular in self.ctx.cache.popular(count * 2):
            if self.ctx.store.has_word(popular["word"]):
                continue
            suggestions.append(
                {
                    "word": popular["word"],
                    "access_count": popular["access_count"],
                    "priority": enrichment_priority(
                        popular["access_count"], popular["data"]
                    ),
                }
            )
            if len(suggestions) >= count:
                break
        return sorted(suggestions, key=lambda s: s["priority"], reverse=True)

    async def auto_enrich(self, max_words: int | None = None) -> BatchEnrichmentResult:
        limit = max_words or self.settings.enrichment.auto_enrich_max_words
        suggestions = self.suggest_words_for_enrichment(limit)
        if not suggestions:
            logger.info("No words need enrichment")
            return BatchEnrichmentResult([])
        return await self.batch_enrich([s["word"] for s in suggestions])

    @handle_errors_async(default_factory=list, operation_name="prefetch_common_words")
    async def prefetch_common_words(
        self, words: Sequence[str] = COMMON_GERMAN_WORDS
    ) -> list[VocabularyRecord]:
        """Warm the cache with common words (search mode, no fallback)"""
        logger.info("Prefetching common German words...")
        results, _ = await self._run_batched(words, self.search_vocabulary)
        records: list[VocabularyRecord] = []
        for word, result in zip(words, results):
            if isinstance(result, BaseException):
                logger.debug(f"Prefetch failed for '{word}': {result}")
                continue
            records.extend(result)
        logger.info(f"Prefetched {len(records)} vocabulary entries")
        return records

    def cleanup_cache(self) -> int:
        return self.ctx.cache.sweep()

    @handle_errors(default_return=None, operation_name="clear_cache")
    def clear_cache(self, include_store: bool = False) -> None:
        self.ctx.cache.clear()
        if include_store:
            self.ctx.store.clear()

    async def check_providers(self, probe: bool = False) -> dict[str, dict[str, Any]]:
        """Configuration report per provider; ``probe`` issues a real test query"""
        quota_status = self.ctx.quota.status()
        report: dict[str, dict[str, Any]] = {}
        for provider in self.ctx.providers:
            entry: dict[str, Any] = {
                "kind": provider.kind,
                "configured": provider.is_configured,
                "disabled": provider.id in self._disabled,
                "quota": quota_status.get(provider.id),
            }
            if probe and provider.is_configured and provider.id not in self._disabled:
                if self.ctx.quota.try_consume(provider.id):
                    outcome = await self._attempt(provider, "test")
                    entry["connected"] = outcome.ok
                    entry["error"] = None if outcome.ok else outcome.message
                else:
                    entry["connected"] = False
                    entry["error"] = "no quota left"
            report[provider.id] = entry
        return report
