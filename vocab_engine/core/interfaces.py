"""Interface definitions for core components"""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from typing import Any

from ..models.cache_models import CacheStats
from ..models.results import RawCandidate
from ..models.vocabulary import VocabularyRecord

Clock = Callable[[], datetime]


class VocabularyProviderInterface(ABC):
    """Interface for external knowledge sources.

    ``search`` raises one of ProviderConfigError, QuotaExceededError,
    ProviderTimeoutError, ProviderNetworkError or ParseError; ``normalize``
    raises ParseError for a single malformed candidate.
    """

    id: str
    kind: str = "dictionary"
    timeout: float = 10.0

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether the credential or endpoint needed to call the source exists"""
        pass

    @abstractmethod
    async def search(
        self, word: str, source_lang: str = "de", target_lang: str = "en"
    ) -> list[RawCandidate]:
        """Query the source and split its reply into raw candidates"""
        pass

    @abstractmethod
    def normalize(self, raw: RawCandidate, word: str) -> VocabularyRecord:
        """Convert one raw candidate into a canonical record"""
        pass

    async def aclose(self) -> None:
        """Release any resources held by the provider"""
        return None


class CacheManagerInterface(ABC):
    """Interface for the two-tier vocabulary cache"""

    @abstractmethod
    def get(
        self, word: str, language_pair: str
    ) -> list[VocabularyRecord] | None:
        """Read through both tiers"""
        pass

    @abstractmethod
    def put(
        self, word: str, language_pair: str, records: list[VocabularyRecord]
    ) -> None:
        """Write through both tiers"""
        pass

    @abstractmethod
    def sweep(self) -> int:
        """Remove expired durable entries, returning how many were removed"""
        pass

    @abstractmethod
    def preload(self, limit: int | None = None) -> int:
        """Load the most-accessed durable entries into the volatile tier"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Administrative clear of both tiers"""
        pass

    @abstractmethod
    def stats(self) -> CacheStats:
        """Cache statistics"""
        pass

    @abstractmethod
    def random_cached(
        self,
        count: int,
        level: str | None = None,
        category: str | None = None,
        language_pair: str | None = None,
    ) -> list[VocabularyRecord]:
        """Random records from non-expired durable entries"""
        pass

    @abstractmethod
    def popular(self, limit: int = 50) -> list[dict[str, Any]]:
        """Durable entries ordered by access count"""
        pass


class VocabularyStoreInterface(ABC):
    """Interface for the permanent vocabulary store"""

    @abstractmethod
    def get_word(self, word: str) -> VocabularyRecord | None:
        """Best stored record for a word (case-insensitive)"""
        pass

    @abstractmethod
    def save_word(self, record: VocabularyRecord) -> bool:
        """Upsert unless a higher-confidence record is already stored"""
        pass

    @abstractmethod
    def random_words(
        self, count: int, level: str | None = None, category: str | None = None
    ) -> list[VocabularyRecord]:
        """Random stored records, optionally filtered"""
        pass

    @abstractmethod
    def counts(self) -> dict[str, Any]:
        """Aggregate counts for statistics"""
        pass

    @abstractmethod
    def clear(self) -> int:
        """Administrative clear, returning the number of rows removed"""
        pass


class TextProcessorInterface(ABC):
    """Interface for text processing operations"""

    @abstractmethod
    def clean_word(self, word: str) -> str | None:
        """Clean and validate word input"""
        pass

    @abstractmethod
    def clean_text(self, text: str | None) -> str:
        """Strip markup and normalize whitespace"""
        pass

    @abstractmethod
    def extract_article(self, text: str | None) -> str | None:
        """First whole-word article in a header"""
        pass

    @abstractmethod
    def extract_pronunciation(self, text: str | None) -> str | None:
        """Content of the first bracket pair"""
        pass

    @abstractmethod
    def extract_grammar(self, text: str | None) -> str | None:
        """Content of the first brace pair"""
        pass
