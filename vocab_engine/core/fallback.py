"""Rule-based record generation used when no provider can answer"""

from datetime import datetime

from ..models.vocabulary import Article, VocabularyRecord, WordType
from .classifier import guess_category, guess_level
from .constants import FallbackConstants, ProviderConstants
from .interfaces import Clock


def _is_capitalized(word: str) -> bool:
    return bool(word) and word[0].isupper()


class FallbackHeuristics:
    """Deterministic guesses from capitalization and suffixes"""

    def __init__(self, clock: Clock = datetime.now):
        self._clock = clock

    @staticmethod
    def guess_article(word: str) -> Article:
        # German nouns are capitalized
        if not _is_capitalized(word):
            return Article.NONE
        if word.endswith(FallbackConstants.FEMININE_SUFFIXES):
            return Article.DIE
        if word.endswith(FallbackConstants.NEUTER_SUFFIXES):
            return Article.DAS
        return Article.DER

    @staticmethod
    def guess_word_type(word: str) -> WordType:
        if _is_capitalized(word):
            return WordType.NOUN
        if word.endswith(FallbackConstants.VERB_SUFFIXES):
            return WordType.VERB
        if word.endswith(FallbackConstants.ADJECTIVE_SUFFIXES):
            return WordType.ADJECTIVE
        return WordType.UNKNOWN

    @staticmethod
    def generate_example(word: str, article: Article) -> str:
        if article.is_definite:
            return FallbackConstants.NOUN_EXAMPLE_TEMPLATE.format(
                article=article.value, word=word
            )
        return FallbackConstants.OTHER_EXAMPLE_TEMPLATE.format(word=word)

    def build_record(self, word: str, translation: str = "") -> VocabularyRecord:
        """Low-confidence record for a word no provider could resolve"""
        article = self.guess_article(word)
        return VocabularyRecord(
            word=word,
            article=article,
            translation=translation,
            example_sentence=self.generate_example(word, article),
            word_type=self.guess_word_type(word),
            level=guess_level(word),
            category=guess_category(word, translation),
            confidence=ProviderConstants.FALLBACK_CONFIDENCE,
            source=ProviderConstants.FALLBACK,
            frequency=0,
            last_updated=self._clock(),
        )
