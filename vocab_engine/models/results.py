"""Result types passed between providers, the orchestrator and callers"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .vocabulary import VocabularyRecord


@dataclass
class RawCandidate:
    """One unit of a provider reply, not yet normalized"""

    provider_id: str
    payload: dict[str, Any]


@dataclass
class ProviderOk:
    """Successful provider attempt"""

    provider_id: str
    candidates: list[VocabularyRecord]
    dropped: int = 0

    @property
    def ok(self) -> bool:
        return True


@dataclass
class ProviderErr:
    """Failed or skipped provider attempt.

    ``kind`` is one of: config, quota, timeout, network, parse.
    """

    provider_id: str
    kind: str
    message: str = ""

    @property
    def ok(self) -> bool:
        return False


ProviderOutcome = ProviderOk | ProviderErr


class LookupMode(str, Enum):
    SEARCH = "search"
    ENRICH = "enrich"


class ResolutionStatus(str, Enum):
    """How a lookup was answered, or why it was not"""

    STORED = "stored"
    CACHED = "cached"
    RESOLVED = "resolved"
    FALLBACK = "fallback"
    NOT_FOUND = "not_found"
    NO_PROVIDERS = "no_providers"
    QUOTA_EXHAUSTED = "quota_exhausted"
    ALL_FAILED = "all_failed"

    @property
    def found(self) -> bool:
        return self in (
            ResolutionStatus.STORED,
            ResolutionStatus.CACHED,
            ResolutionStatus.RESOLVED,
            ResolutionStatus.FALLBACK,
        )


@dataclass
class Resolution:
    """Outcome of resolving one word"""

    word: str
    status: ResolutionStatus
    records: list[VocabularyRecord] = field(default_factory=list)
    outcomes: list[ProviderOutcome] = field(default_factory=list)

    @property
    def best(self) -> VocabularyRecord | None:
        return self.records[0] if self.records else None

    @property
    def attempted_sources(self) -> list[str]:
        return [o.provider_id for o in self.outcomes]


@dataclass
class EnrichmentOutcome:
    """Result of enriching a single word inside a batch"""

    word: str
    success: bool
    record: VocabularyRecord | None = None
    error: str | None = None


@dataclass
class BatchEnrichmentResult:
    """Result of batch enrichment, ordered like the input"""

    outcomes: list[EnrichmentOutcome]
    batches: int = 0

    @property
    def results(self) -> list[VocabularyRecord]:
        return [o.record for o in self.outcomes if o.success and o.record]

    @property
    def errors(self) -> list[dict[str, str]]:
        return [
            {"word": o.word, "reason": o.error or "unknown error"}
            for o in self.outcomes
            if not o.success
        ]

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return len(self.outcomes) - self.successful

    @property
    def success_rate(self) -> float:
        """Calculate success rate percentage"""
        if not self.outcomes:
            return 0.0
        return (self.successful / len(self.outcomes)) * 100
