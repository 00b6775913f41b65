"""Tests for level/category guessing and the heuristic fallback"""

from conftest import FakeClock
from vocab_engine.core.classifier import complexity_score, guess_category, guess_level
from vocab_engine.core.fallback import FallbackHeuristics
from vocab_engine.models.vocabulary import Article, CEFRLevel, WordType


class TestClassifier:
    def test_keyword_lists_win(self):
        assert guess_level("Haus") == "A1"
        assert guess_level("Entwicklung") == "B1"

    def test_length_baselines(self):
        assert guess_level("Tür") == "A1"
        assert guess_level("Hund") == "A2"

    def test_complexity_thresholds(self):
        assert complexity_score("Zeitung") == 2
        assert guess_level("Zeitung") == "B1"
        assert complexity_score("Schönheit") == 3
        assert guess_level("Schönheit") == "B2"
        assert guess_level("Sehenswürdigkeit") == "C1"

    def test_category_first_match(self):
        assert guess_category("Saft", "juice") == "food"
        assert guess_category("Zug", "train") == "transport"
        assert guess_category("Quatsch", "nonsense") == "general"


class TestFallbackHeuristics:
    def setup_method(self):
        self.clock = FakeClock()
        self.fallback = FallbackHeuristics(clock=self.clock)

    def test_guess_article(self):
        assert FallbackHeuristics.guess_article("Zeitung") is Article.DIE
        assert FallbackHeuristics.guess_article("Freiheit") is Article.DIE
        assert FallbackHeuristics.guess_article("Mädchen") is Article.DAS
        assert FallbackHeuristics.guess_article("Tisch") is Article.DER
        assert FallbackHeuristics.guess_article("schnell") is Article.NONE

    def test_guess_word_type(self):
        assert FallbackHeuristics.guess_word_type("Tisch") is WordType.NOUN
        assert FallbackHeuristics.guess_word_type("spielen") is WordType.VERB
        assert FallbackHeuristics.guess_word_type("ruhig") is WordType.ADJECTIVE
        assert FallbackHeuristics.guess_word_type("schnell") is WordType.UNKNOWN

    def test_generate_example(self):
        assert (
            FallbackHeuristics.generate_example("Tisch", Article.DER)
            == "Das ist der Tisch."
        )
        assert FallbackHeuristics.generate_example("laufe", Article.NONE) == "Ich laufe."

    def test_schoenheit_record(self):
        record = self.fallback.build_record("Schönheit")

        assert record.article is Article.DIE
        assert record.word_type is WordType.NOUN
        assert record.source == "fallback"
        assert record.confidence == 0.3
        assert record.level is CEFRLevel.B2
        assert record.example_sentence == "Das ist die Schönheit."
        assert record.last_updated == self.clock()
