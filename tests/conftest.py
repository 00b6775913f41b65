"""Shared fixtures: a controllable clock, an in-memory database, fake providers"""

import asyncio
from datetime import datetime, timedelta
from typing import Any

import pytest

from vocab_engine.config.settings import AppSettings
from vocab_engine.core.container import build_context
from vocab_engine.core.interfaces import VocabularyProviderInterface
from vocab_engine.core.orchestrator import VocabularyEngine
from vocab_engine.exceptions import ParseError
from vocab_engine.models.results import RawCandidate
from vocab_engine.models.vocabulary import VocabularyRecord
from vocab_engine.storage.database import Database


class FakeClock:
    """Callable clock that only moves when told to"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 15, 10, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: Any) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


class FakeSleep:
    """Records requested delays instead of sleeping"""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


class FakeProvider(VocabularyProviderInterface):
    """In-process provider whose replies are scripted per test.

    Each payload in ``payloads`` becomes one raw candidate; a payload with
    ``"bad": True`` fails normalization. ``error`` is raised from ``search``
    instead of replying. ``delays`` maps a word to a real sleep in seconds so
    replies can complete out of order.
    """

    def __init__(
        self,
        provider_id: str,
        payloads: list[dict[str, Any]] | None = None,
        error: Exception | None = None,
        configured: bool = True,
        delays: dict[str, float] | None = None,
        kind: str = "dictionary",
    ):
        self.id = provider_id
        self.kind = kind
        self.payloads = [{}] if payloads is None else payloads
        self.error = error
        self.configured = configured
        self.delays = delays or {}
        self.calls: list[str] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def search(
        self, word: str, source_lang: str = "de", target_lang: str = "en"
    ) -> list[RawCandidate]:
        self.calls.append(word)
        if word in self.delays:
            await asyncio.sleep(self.delays[word])
        if self.error is not None:
            raise self.error
        return [RawCandidate(self.id, dict(payload)) for payload in self.payloads]

    def normalize(self, raw: RawCandidate, word: str) -> VocabularyRecord:
        payload = raw.payload
        if payload.get("bad"):
            raise ParseError(self.id, "scripted bad candidate", payload)
        return VocabularyRecord(
            word=payload.get("word", word),
            article=payload.get("article", "der"),
            translation=payload.get("translation", f"{word.lower()} (en)"),
            example_sentence=payload.get(
                "example_sentence", f"Das ist der {word}."
            ),
            confidence=payload.get("confidence", 1.0),
            frequency=payload.get("frequency", 0),
            level=payload.get("level", "A1"),
            category=payload.get("category", "general"),
            source=self.id,
        )


def make_record(word: str = "Saft", **fields: Any) -> VocabularyRecord:
    data: dict[str, Any] = {
        "article": "der",
        "translation": "juice",
        "example_sentence": "Der Saft ist frisch.",
        "source": "pons",
    }
    data.update(fields)
    return VocabularyRecord(word=word, **data)


def make_engine(
    providers: list[VocabularyProviderInterface],
    clock: FakeClock | None = None,
    sleep: FakeSleep | None = None,
    settings: AppSettings | None = None,
) -> VocabularyEngine:
    context = build_context(
        settings or AppSettings(),
        clock=clock or FakeClock(),
        sleep=sleep or FakeSleep(),
        providers=providers,
        db=Database(":memory:"),
    )
    return VocabularyEngine(context)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def db():
    database = Database(":memory:")
    database.connect()
    yield database
    database.close()
