"""Tests for the resolution engine: statuses, provider handling and batching"""

import asyncio
import string
from unittest.mock import patch

import pytest

from conftest import FakeClock, FakeProvider, FakeSleep, make_engine, make_record
from vocab_engine.config.settings import AppSettings, EnrichmentSettings
from vocab_engine.core.quota import QuotaTracker
from vocab_engine.exceptions import (
    ParseError,
    ProviderConfigError,
    ProviderNetworkError,
    ProviderTimeoutError,
    QuotaExceededError,
    StorageError,
    WordValidationError,
)
from vocab_engine.models.results import (
    LookupMode,
    ProviderErr,
    ProviderOk,
    ResolutionStatus,
)
from vocab_engine.models.vocabulary import Article, WordType


def run(engine, make_coro):
    """Run ``make_coro(engine)`` inside the engine's lifecycle"""

    async def go():
        async with engine:
            return await make_coro(engine)

    return asyncio.run(go())


class TestLookup:
    """Single-word resolution paths"""

    def setup_method(self):
        self.clock = FakeClock()

    def test_resolved_then_stored(self):
        provider = FakeProvider("pons")
        engine = make_engine([provider], self.clock)

        async def scenario(e):
            first = await e.lookup("Saft")
            second = await e.lookup("saft")
            return first, second

        first, second = run(engine, scenario)

        assert first.status is ResolutionStatus.RESOLVED
        assert first.best.source == "pons"
        assert 0.0 <= first.best.confidence <= 1.0
        assert first.best.article in set(Article)
        assert second.status is ResolutionStatus.STORED
        assert provider.calls == ["Saft"]

    def test_cached_result(self):
        provider = FakeProvider("pons")
        engine = make_engine([provider], self.clock)
        engine.ctx.cache.put("Saft", "de-en", [make_record()])

        resolution = run(engine, lambda e: e.lookup("Saft"))

        assert resolution.status is ResolutionStatus.CACHED
        assert resolution.best.translation == "juice"
        assert provider.calls == []

    def test_best_candidate_across_providers(self):
        pons = FakeProvider("pons", [{"article": "none"}])
        linguatools = FakeProvider("linguatools", [{"article": "die"}])
        engine = make_engine([pons, linguatools], self.clock)

        async def scenario(e):
            return await e.lookup("Zeitung"), e.ctx.store.get_word("Zeitung")

        resolution, stored = run(engine, scenario)

        assert resolution.best.source == "linguatools"
        assert resolution.attempted_sources == ["pons", "linguatools"]
        assert stored.source == "linguatools"

    def test_malformed_candidate_dropped_others_kept(self):
        provider = FakeProvider("pons", [{"bad": True}, {"translation": "juice"}])
        engine = make_engine([provider], self.clock)

        resolution = run(engine, lambda e: e.lookup("Saft"))

        assert resolution.best.translation == "juice"
        outcome = resolution.outcomes[0]
        assert isinstance(outcome, ProviderOk)
        assert outcome.dropped == 1

    def test_invalid_word(self):
        engine = make_engine([], self.clock)
        with pytest.raises(WordValidationError):
            run(engine, lambda e: e.lookup("12!"))


class TestEmptyResults:
    """Distinct statuses when no candidate is produced"""

    def setup_method(self):
        self.clock = FakeClock()

    def test_schoenheit_falls_back_without_providers(self):
        engine = make_engine([], self.clock)

        async def scenario(e):
            record = await e.enrich_word("Schönheit")
            return record, e.ctx.store.has_word("Schönheit")

        record, stored = run(engine, scenario)

        assert record.article is Article.DIE
        assert record.word_type is WordType.NOUN
        assert record.source == "fallback"
        # Fallback records are not persisted
        assert stored is False

    def test_search_mode_never_falls_back(self):
        engine = make_engine([], self.clock)

        async def scenario(e):
            return await e.lookup("Schönheit"), await e.search_vocabulary("Schönheit")

        resolution, records = run(engine, scenario)

        assert resolution.status is ResolutionStatus.NO_PROVIDERS
        assert resolution.records == []
        assert records == []

    def test_unconfigured_providers_count_as_none(self):
        engine = make_engine([FakeProvider("pons", configured=False)], self.clock)
        resolution = run(engine, lambda e: e.lookup("Saft"))
        assert resolution.status is ResolutionStatus.NO_PROVIDERS

    def test_not_found(self):
        engine = make_engine([FakeProvider("pons", payloads=[])], self.clock)
        resolution = run(engine, lambda e: e.lookup("Saft"))
        assert resolution.status is ResolutionStatus.NOT_FOUND

    def test_all_failed(self):
        engine = make_engine(
            [
                FakeProvider("pons", error=ProviderNetworkError("pons", "down")),
                FakeProvider("groq", error=ProviderTimeoutError("groq", "slow")),
            ],
            self.clock,
        )

        resolution = run(engine, lambda e: e.lookup("Saft", LookupMode.SEARCH))

        assert resolution.status is ResolutionStatus.ALL_FAILED
        assert [o.kind for o in resolution.outcomes] == ["network", "timeout"]

    def test_quota_exhausted(self):
        provider = FakeProvider("pons")
        engine = make_engine([provider], self.clock)
        engine.ctx.quota = QuotaTracker({"pons": 1}, clock=self.clock)

        async def scenario(e):
            return await e.lookup("Saft"), await e.lookup("Brot")

        _, second = run(engine, scenario)

        assert second.status is ResolutionStatus.QUOTA_EXHAUSTED
        assert provider.calls == ["Saft"]

    def test_enrich_falls_back_after_failures(self):
        engine = make_engine(
            [FakeProvider("pons", error=ProviderNetworkError("pons", "down"))],
            self.clock,
        )
        resolution = run(engine, lambda e: e.lookup("Tisch", LookupMode.ENRICH))
        assert resolution.status is ResolutionStatus.FALLBACK
        assert resolution.best.article is Article.DER


class TestProviderFailures:
    """Skip rules and quota accounting per failure kind"""

    def setup_method(self):
        self.clock = FakeClock()

    def used(self, engine, provider_id):
        return engine.ctx.quota.status()[provider_id]["used"]

    def test_config_error_disables_provider_for_the_run(self):
        broken = FakeProvider("pons", error=ProviderConfigError("pons", "bad key"))
        backup = FakeProvider("linguatools")
        engine = make_engine([broken, backup], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            await e.lookup("Brot")

        run(engine, scenario)

        assert broken.calls == ["Saft"]
        assert backup.calls == ["Saft", "Brot"]
        assert self.used(engine, "pons") == 0
        assert [p.id for p in engine.usable_providers()] == ["linguatools"]

    def test_quota_error_marks_exhausted(self):
        limited = FakeProvider("pons", error=QuotaExceededError("pons", "429"))
        engine = make_engine([limited], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            return await e.lookup("Brot")

        second = run(engine, scenario)

        assert limited.calls == ["Saft"]
        assert engine.ctx.quota.status()["pons"]["remaining"] == 0
        assert second.status is ResolutionStatus.QUOTA_EXHAUSTED

    def test_transient_errors_release_quota_and_retry_next_call(self):
        flaky = FakeProvider("pons", error=ProviderTimeoutError("pons", "slow"))
        engine = make_engine([flaky], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            await e.lookup("Brot")

        run(engine, scenario)

        assert flaky.calls == ["Saft", "Brot"]
        assert self.used(engine, "pons") == 0

    def test_parse_error_keeps_quota_spent(self):
        garbled = FakeProvider("groq", error=ParseError("groq", "no JSON"))
        engine = make_engine([garbled], self.clock)

        resolution = run(engine, lambda e: e.lookup("Saft"))

        assert isinstance(resolution.outcomes[0], ProviderErr)
        assert resolution.outcomes[0].kind == "parse"
        assert self.used(engine, "groq") == 1

    def test_no_automatic_retry(self):
        flaky = FakeProvider("pons", error=ProviderNetworkError("pons", "down"))
        engine = make_engine([flaky], self.clock)
        run(engine, lambda e: e.lookup("Saft"))
        assert flaky.calls == ["Saft"]


class TestBatchEnrichment:
    def setup_method(self):
        self.clock = FakeClock()
        self.sleep = FakeSleep()

    def test_25_words_three_batches_order_preserved(self):
        words = [f"Wort{letter}" for letter in string.ascii_lowercase[:25]]
        # Earlier words in each batch reply later
        delays = {word: 0.001 * (25 - i) for i, word in enumerate(words)}
        provider = FakeProvider("pons", delays=delays)
        engine = make_engine([provider], self.clock, self.sleep)

        result = run(engine, lambda e: e.batch_enrich(words))

        assert result.batches == 3
        assert self.sleep.delays == [1.0, 1.0]
        assert [o.word for o in result.outcomes] == words
        assert [r.word for r in result.results] == words
        assert result.failed == 0
        assert result.success_rate == 100.0
        # Calls were dispatched in input order even though replies were not
        assert provider.calls == words

    def test_failures_do_not_abort_the_batch(self):
        engine = make_engine([FakeProvider("pons")], self.clock, self.sleep)

        result = run(engine, lambda e: e.batch_enrich(["Haus", "42", "Brot"]))

        assert [o.success for o in result.outcomes] == [True, False, True]
        assert result.errors[0]["word"] == "42"
        assert "Invalid word" in result.errors[0]["reason"]
        assert self.sleep.delays == []

    def test_accented_and_long_compound_words_are_enriched(self):
        compound = "Rindfleischetikettierungsüberwachungsaufgabenübertragungsgesetz"
        engine = make_engine([FakeProvider("pons")], self.clock, self.sleep)

        result = run(engine, lambda e: e.batch_enrich(["Café", compound]))

        assert result.failed == 0
        assert [r.word for r in result.results] == ["Café", compound]

    def test_accented_word_falls_back_without_providers(self):
        engine = make_engine([], self.clock, self.sleep)

        record = run(engine, lambda e: e.enrich_word("Crème"))

        assert record.word == "Crème"
        assert record.source == "fallback"

    def test_batch_size_from_settings(self):
        settings = AppSettings(
            enrichment=EnrichmentSettings(batch_size=2, batch_delay_ms=250)
        )
        engine = make_engine([], self.clock, self.sleep, settings)

        result = run(engine, lambda e: e.batch_enrich(["Haus", "Brot", "Tisch"]))

        assert result.batches == 2
        assert self.sleep.delays == [0.25]
        assert all(r.source == "fallback" for r in result.results)

    def test_empty_batch(self):
        engine = make_engine([], self.clock, self.sleep)
        result = run(engine, lambda e: e.batch_enrich([]))
        assert result.batches == 0
        assert result.success_rate == 0.0


class TestQuizAndStats:
    def setup_method(self):
        self.clock = FakeClock()

    def test_quiz_tops_up_from_cache(self):
        engine = make_engine([], self.clock)
        engine.ctx.store.save_word(make_record("Haus", level="A1"))
        engine.ctx.cache.put("Brot", "de-en", [make_record("Brot", level="A1")])
        engine.ctx.cache.put("Zeitung", "de-en", [make_record("Zeitung", level="B1")])

        async def scenario(e):
            return e.get_quiz_vocabulary(5, level="A1"), e.ctx.store.has_word("Brot")

        quiz, saved = run(engine, scenario)

        assert sorted(r.word for r in quiz) == ["Brot", "Haus"]
        assert saved is True

    def test_quiz_without_duplicates(self):
        engine = make_engine([], self.clock)
        engine.ctx.store.save_word(make_record("Haus"))
        engine.ctx.cache.put("Haus", "de-en", [make_record("Haus")])

        async def scenario(e):
            return e.get_quiz_vocabulary(3)

        quiz = run(engine, scenario)

        assert [r.word for r in quiz] == ["Haus"]

    def test_quiz_survives_store_write_failure(self):
        engine = make_engine([], self.clock)
        engine.ctx.cache.put("Brot", "de-en", [make_record("Brot")])
        engine.ctx.cache.put("Saft", "de-en", [make_record("Saft")])

        async def scenario(e):
            with patch.object(
                e.ctx.store, "save_word", side_effect=StorageError("save_word")
            ):
                return e.get_quiz_vocabulary(5)

        quiz = run(engine, scenario)

        assert sorted(r.word for r in quiz) == ["Brot", "Saft"]

    def test_stats_sections(self):
        engine = make_engine([FakeProvider("pons")], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            return e.get_stats()

        stats = run(engine, scenario)

        assert set(stats) == {"cache", "quota", "database"}
        assert stats["cache"]["total_cached"] == 1
        assert stats["quota"]["pons"]["used"] == 1
        assert stats["database"]["total_words"] == 1


class TestMaintenance:
    def setup_method(self):
        self.clock = FakeClock()

    def test_prefetch_warms_cache_without_fallback(self):
        provider = FakeProvider("pons")
        engine = make_engine([provider], self.clock)

        async def scenario(e):
            records = await e.prefetch_common_words(["Haus", "Auto"])
            return records, e.ctx.cache.stats().total_cached

        records, cached = run(engine, scenario)

        assert [r.word for r in records] == ["Haus", "Auto"]
        assert cached == 2

    def test_failed_prefetch_returns_a_fresh_list(self):
        engine = make_engine([FakeProvider("pons")], self.clock)

        async def scenario(e):
            with patch.object(e, "_run_batched", side_effect=RuntimeError("boom")):
                first = await e.prefetch_common_words(["Haus"])
                first.append(make_record("Haus"))
                second = await e.prefetch_common_words(["Haus"])
            return first, second

        first, second = run(engine, scenario)

        assert len(first) == 1
        assert second == []

    def test_suggest_and_auto_enrich(self):
        provider = FakeProvider("pons")
        engine = make_engine([provider], self.clock)
        engine.ctx.cache.put("Brot", "de-en", [make_record("Brot")])
        engine.ctx.cache.put("Haus", "de-en", [make_record("Haus")])
        engine.ctx.store.save_word(make_record("Haus"))

        async def scenario(e):
            suggestions = e.suggest_words_for_enrichment(5)
            result = await e.auto_enrich()
            return suggestions, result

        suggestions, result = run(engine, scenario)

        assert [s["word"] for s in suggestions] == ["Brot"]
        # Article + translation + example bonuses on top of access count
        assert suggestions[0]["priority"] == pytest.approx(0.1 + 4)
        assert result.successful == 1

    def test_clear_cache_keeps_store_unless_asked(self):
        engine = make_engine([FakeProvider("pons")], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            e.clear_cache()
            kept = e.ctx.store.has_word("Saft")
            e.clear_cache(include_store=True)
            return kept, e.ctx.store.has_word("Saft"), e.ctx.cache.stats()

        kept, after, stats = run(engine, scenario)

        assert kept is True
        assert after is False
        assert stats.total_cached == 0
        assert stats.memory_cache_size == 0

    def test_cleanup_cache(self):
        engine = make_engine([FakeProvider("pons")], self.clock)

        async def scenario(e):
            await e.lookup("Saft")
            self.clock.advance(hours=25)
            return e.cleanup_cache()

        assert run(engine, scenario) == 1

    def test_check_providers(self):
        engine = make_engine(
            [
                FakeProvider("pons"),
                FakeProvider("groq", configured=False, kind="generative"),
            ],
            self.clock,
        )

        report = run(engine, lambda e: e.check_providers(probe=True))

        assert report["pons"]["configured"] is True
        assert report["pons"]["connected"] is True
        assert report["groq"]["kind"] == "generative"
        assert report["groq"]["configured"] is False
        assert "connected" not in report["groq"]
        assert report["pons"]["quota"]["limit"] == 1000
