"""Tests for per-provider quota accounting"""

import asyncio
from datetime import datetime

import pytest

from conftest import FakeClock
from vocab_engine.core.quota import QuotaTracker, next_reset
from vocab_engine.exceptions import ConfigurationError


class TestNextReset:
    def test_monthly_rolls_to_first_of_next_month(self):
        assert next_reset(datetime(2024, 1, 15, 10, 0)) == datetime(2024, 2, 1)

    def test_monthly_rolls_over_year_end(self):
        assert next_reset(datetime(2024, 12, 31, 23, 59)) == datetime(2025, 1, 1)

    def test_daily_rolls_to_next_midnight(self):
        assert next_reset(datetime(2024, 2, 28, 18, 30), "daily") == datetime(
            2024, 2, 29
        )


class TestQuotaTracker:
    """Counting, exhaustion and lazy reset"""

    def setup_method(self):
        self.clock = FakeClock(datetime(2024, 1, 15, 10, 0))
        self.quota = QuotaTracker({"pons": 3}, clock=self.clock)

    def test_exhaustion_until_reset(self):
        for _ in range(3):
            assert self.quota.has_quota("pons")
            self.quota.consume("pons")

        assert self.quota.has_quota("pons") is False

        self.clock.advance(days=10)
        assert self.quota.has_quota("pons") is False

        # Period boundary is 2024-02-01 00:00
        self.clock.now = datetime(2024, 2, 1, 0, 0)
        assert self.quota.has_quota("pons") is True
        assert self.quota.status()["pons"]["used"] == 0

    def test_try_consume_stops_at_limit(self):
        assert [self.quota.try_consume("pons") for _ in range(4)] == [
            True,
            True,
            True,
            False,
        ]
        assert self.quota.status()["pons"]["used"] == 3

    def test_release_rolls_back_one_reservation(self):
        self.quota.try_consume("pons")
        self.quota.release("pons")
        assert self.quota.status()["pons"]["used"] == 0

        # Never goes below zero
        self.quota.release("pons")
        assert self.quota.status()["pons"]["used"] == 0

    def test_mark_exhausted(self):
        self.quota.mark_exhausted("pons")
        status = self.quota.status()["pons"]
        assert status["remaining"] == 0
        assert self.quota.try_consume("pons") is False

    def test_unknown_provider_gets_default_limit(self):
        quota = QuotaTracker(default_limit=2, clock=self.clock)
        assert quota.try_consume("groq")
        assert quota.status()["groq"] == {
            "used": 1,
            "limit": 2,
            "remaining": 1,
            "reset_at": datetime(2024, 2, 1),
        }

    def test_daily_period(self):
        quota = QuotaTracker({"pons": 1}, period="daily", clock=self.clock)
        assert quota.try_consume("pons")
        assert quota.try_consume("pons") is False
        self.clock.advance(hours=14)
        assert quota.try_consume("pons")

    def test_invalid_configuration(self):
        with pytest.raises(ConfigurationError):
            QuotaTracker(default_limit=0)
        with pytest.raises(ConfigurationError):
            QuotaTracker(period="weekly")
        with pytest.raises(ConfigurationError):
            QuotaTracker({"pons": 0})


class TestQuotaConcurrency:
    """The check-then-increment race and its atomic replacement"""

    def test_check_then_consume_overruns_under_concurrency(self):
        quota = QuotaTracker({"pons": 1}, clock=FakeClock())

        async def call() -> bool:
            if not quota.has_quota("pons"):
                return False
            await asyncio.sleep(0)  # the network call
            quota.consume("pons")
            return True

        async def run():
            return await asyncio.gather(call(), call(), call())

        results = asyncio.run(run())

        # Every caller passed the check before anyone incremented
        assert results == [True, True, True]
        assert quota.status()["pons"]["used"] == 3

    def test_try_consume_never_overruns(self):
        quota = QuotaTracker({"pons": 1}, clock=FakeClock())

        async def call() -> bool:
            if not quota.try_consume("pons"):
                return False
            await asyncio.sleep(0)
            return True

        async def run():
            return await asyncio.gather(call(), call(), call())

        results = asyncio.run(run())

        assert results.count(True) == 1
        assert quota.status()["pons"]["used"] == 1
