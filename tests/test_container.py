"""Tests for engine wiring and the factory helpers"""

import asyncio

import httpx

from conftest import FakeClock, FakeProvider
from vocab_engine import VocabularyEngine, create_vocabulary_engine
from vocab_engine.config.settings import AppSettings, QuotaSettings
from vocab_engine.core.constants import ProviderConstants
from vocab_engine.core.container import build_context
from vocab_engine.storage.database import Database


class TestBuildContext:
    def test_builds_all_providers_with_owned_client(self):
        context = build_context(AppSettings(_env_file=None), db=Database(":memory:"))
        try:
            assert [p.id for p in context.providers] == list(ProviderConstants.PRIORITY)
            assert context.owns_http_client is True
            assert isinstance(context.http_client, httpx.AsyncClient)
        finally:
            asyncio.run(context.http_client.aclose())

    def test_injected_providers_skip_http_client(self):
        provider = FakeProvider("pons")
        context = build_context(
            AppSettings(_env_file=None), providers=[provider], db=Database(":memory:")
        )
        assert context.providers == [provider]
        assert context.http_client is None

    def test_shared_client_is_not_owned(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(204)))
        context = build_context(
            AppSettings(_env_file=None), http_client=client, db=Database(":memory:")
        )
        assert context.owns_http_client is False
        assert all(p._client is client for p in context.providers)

    def test_quota_limits_from_settings(self):
        clock = FakeClock()
        settings = AppSettings(
            quota=QuotaSettings(limits={"pons": 7}, default_limit=50, _env_file=None),
            _env_file=None,
        )
        context = build_context(settings, clock=clock, providers=[], db=Database())
        status = context.quota.status()
        assert status["pons"]["limit"] == 7
        assert status["groq"]["limit"] == 50

    def test_contexts_are_isolated(self):
        first = build_context(AppSettings(_env_file=None), providers=[], db=Database())
        second = build_context(AppSettings(_env_file=None), providers=[], db=Database())
        first.quota.try_consume("pons")
        assert second.quota.status()["pons"]["used"] == 0
        assert first.cache is not second.cache


class TestFactory:
    def test_create_with_overrides(self):
        provider = FakeProvider("pons")
        engine = create_vocabulary_engine(
            AppSettings(_env_file=None),
            providers=[provider],
            db=Database(":memory:"),
            clock=FakeClock(),
        )
        assert isinstance(engine, VocabularyEngine)
        assert engine.providers == [provider]

        async def scenario():
            async with engine as e:
                return await e.search_vocabulary("Saft")

        records = asyncio.run(scenario())
        assert records[0].source == "pons"
