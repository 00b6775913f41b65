"""Candidate scoring and selection"""

from ..models.vocabulary import VocabularyRecord
from .constants import ProviderConstants, ScoringConstants


class CandidateScorer:
    """Ranks normalized candidates for the same query"""

    def __init__(self, source_bonus: dict[str, float] | None = None):
        self.source_bonus = (
            dict(ProviderConstants.SOURCE_PREFERENCE_BONUS)
            if source_bonus is None
            else source_bonus
        )

    def score(self, record: VocabularyRecord) -> float:
        """Weighted confidence and frequency plus source bonus, minus penalties.

        The result is clamped at zero.
        """
        score = ScoringConstants.CONFIDENCE_WEIGHT * record.confidence
        score += ScoringConstants.FREQUENCY_WEIGHT * min(
            record.frequency / ScoringConstants.FREQUENCY_SCALE, 1
        )
        score += self.source_bonus.get(record.source, 0.0)

        if record.article.value not in ScoringConstants.VALID_ARTICLES:
            score -= ScoringConstants.MISSING_ARTICLE_PENALTY
        if len(record.translation) < ScoringConstants.MIN_TRANSLATION_LENGTH:
            score -= ScoringConstants.MISSING_TRANSLATION_PENALTY
        example = record.example_sentence or ""
        if len(example) < ScoringConstants.MIN_EXAMPLE_LENGTH:
            score -= ScoringConstants.MISSING_EXAMPLE_PENALTY

        return max(0.0, score)

    def rank(self, candidates: list[VocabularyRecord]) -> list[VocabularyRecord]:
        """Candidates by descending score; equal scores keep input order"""
        return sorted(candidates, key=self.score, reverse=True)

    def select(self, candidates: list[VocabularyRecord]) -> VocabularyRecord | None:
        """Highest-scoring candidate, the first one on ties"""
        best: VocabularyRecord | None = None
        best_score = -1.0
        for candidate in candidates:
            candidate_score = self.score(candidate)
            if candidate_score > best_score:
                best, best_score = candidate, candidate_score
        return best
