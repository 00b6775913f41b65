"""Pydantic models for canonical vocabulary records"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class Article(str, Enum):
    """German definite article of a noun ("none" for non-nouns)"""

    DER = "der"
    DIE = "die"
    DAS = "das"
    NONE = "none"

    @property
    def is_definite(self) -> bool:
        return self is not Article.NONE


class WordType(str, Enum):
    """Coarse part of speech"""

    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    UNKNOWN = "unknown"


class CEFRLevel(str, Enum):
    """Common European Framework reference level"""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"


class VocabularyRecord(BaseModel):
    """Unified, provider-agnostic representation of a resolved word"""

    word: str = Field(description="The word itself")
    article: Article = Field(default=Article.NONE, description="Definite article")
    translation: str = Field(default="", description="Target-language translation")
    pronunciation: str | None = Field(None, description="Phonetic transcription")
    example_sentence: str | None = Field(None, description="Example sentence")
    grammar_note: str | None = Field(None, description="Grammar tag or tip")
    word_type: WordType = Field(default=WordType.UNKNOWN, description="Word type")
    level: CEFRLevel = Field(default=CEFRLevel.A1, description="CEFR level")
    category: str = Field(default="general", description="Category tag")
    confidence: float = Field(default=1.0, description="Confidence 0.0-1.0")
    source: str = Field(default="manual", description="Provider id or 'fallback'")
    frequency: int = Field(default=0, description="Frequency band 0-10")
    last_updated: datetime = Field(
        default_factory=datetime.now, description="Last update time"
    )

    @field_validator("word")
    @classmethod
    def validate_word(cls, v: str) -> str:
        """Ensure the word is not empty"""
        if not v or not v.strip():
            raise ValueError("Word cannot be empty")
        return v.strip()

    @field_validator("article", mode="before")
    @classmethod
    def validate_article(cls, v: object) -> object:
        """Map missing or unknown articles to 'none'"""
        if v is None or v == "":
            return Article.NONE
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in {a.value for a in Article}:
                return Article.NONE
        return v

    @field_validator("word_type", mode="before")
    @classmethod
    def validate_word_type(cls, v: object) -> object:
        """Map unrecognized word types to 'unknown'"""
        if v is None:
            return WordType.UNKNOWN
        if isinstance(v, str):
            v = v.strip().lower()
            if v not in {t.value for t in WordType}:
                return WordType.UNKNOWN
        return v

    @field_validator("level", mode="before")
    @classmethod
    def validate_level(cls, v: object) -> object:
        """Normalize level casing"""
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("translation")
    @classmethod
    def validate_translation(cls, v: str | None) -> str:
        """Clean translation text"""
        return (v or "").strip()

    @field_validator("pronunciation", "example_sentence", "grammar_note")
    @classmethod
    def validate_text_fields(cls, v: str | None) -> str | None:
        """Clean optional text fields"""
        if not v:
            return None
        return v.strip() or None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str:
        """Default empty categories to 'general'"""
        if not v or not v.strip():
            return "general"
        return v.strip().lower()

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        """Confidence must lie within [0, 1]"""
        if not 0.0 <= v <= 1.0:
            raise ValueError("Confidence must be between 0.0 and 1.0")
        return v

    @field_validator("frequency")
    @classmethod
    def validate_frequency(cls, v: int) -> int:
        """Frequency band must lie within [0, 10]"""
        if not 0 <= v <= 10:
            raise ValueError("Frequency must be between 0 and 10")
        return v

    @property
    def display_word(self) -> str:
        """Word prefixed with its article when it has one"""
        if self.article.is_definite:
            return f"{self.article.value} {self.word}"
        return self.word
