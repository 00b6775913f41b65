"""Text processing and normalization rules for provider replies"""

import json
import re
from typing import Any

from .constants import TextConstants
from .interfaces import TextProcessorInterface


class TextProcessor(TextProcessorInterface):
    """Handles all text cleaning, validation and header extraction"""

    # Compile regex patterns once (sourced from TextConstants)
    WHITESPACE_RE = re.compile(TextConstants.WHITESPACE_PATTERN)
    HTML_TAG_RE = re.compile(TextConstants.HTML_TAG_PATTERN)
    ARTICLE_RE = re.compile(TextConstants.ARTICLE_PATTERN, re.IGNORECASE)
    PRONUNCIATION_RE = re.compile(TextConstants.PRONUNCIATION_PATTERN)
    GRAMMAR_RE = re.compile(TextConstants.GRAMMAR_PATTERN)
    JSON_OBJECT_RE = re.compile(TextConstants.JSON_OBJECT_PATTERN)
    VALID_WORD_RE = re.compile(TextConstants.VALID_WORD_PATTERN)

    @classmethod
    def is_valid_word(cls, word: str) -> bool:
        """Check if the input is a valid word or phrase"""
        if not word or not word.strip():
            return False

        word = word.strip()

        if not (
            TextConstants.MIN_WORD_LENGTH <= len(word) <= TextConstants.MAX_WORD_LENGTH
        ):
            return False

        # Letters of any script, joined by single spaces, hyphens or apostrophes
        return bool(cls.VALID_WORD_RE.match(word))

    @classmethod
    def clean_word(cls, word: str) -> str | None:
        """Clean and validate word input, preserving capitalization"""
        if not word:
            return None

        word = cls.WHITESPACE_RE.sub(" ", word.strip())

        return word if cls.is_valid_word(word) else None

    @classmethod
    def clean_text(cls, text: str | None) -> str:
        """Strip markup tags and collapse whitespace"""
        if not text:
            return ""

        text = cls.HTML_TAG_RE.sub("", text)
        return cls.WHITESPACE_RE.sub(" ", text.strip())

    @classmethod
    def extract_article(cls, text: str | None) -> str | None:
        """First whole-word der/die/das (case-insensitive), lowercased"""
        if not text:
            return None
        match = cls.ARTICLE_RE.search(text)
        return match.group(1).lower() if match else None

    @classmethod
    def extract_pronunciation(cls, text: str | None) -> str | None:
        """Content of the first [...] pair"""
        if not text:
            return None
        match = cls.PRONUNCIATION_RE.search(text)
        return match.group(1) if match else None

    @classmethod
    def extract_grammar(cls, text: str | None) -> str | None:
        """Content of the first {...} pair"""
        if not text:
            return None
        match = cls.GRAMMAR_RE.search(text)
        return match.group(1) if match else None

    @classmethod
    def extract_word(cls, text: str | None, search_word: str) -> str:
        """Headword token matching the searched word, else the searched word"""
        needle = search_word.lower()
        for token in cls.clean_text(text).split():
            token = token.strip(TextConstants.TOKEN_STRIP_CHARS)
            if not token or token.lower() in TextConstants.ARTICLES:
                continue
            if needle in token.lower():
                return token
        return search_word

    @classmethod
    def extract_json_object(cls, text: str | None) -> dict[str, Any]:
        """Parse the first {...} block of a free-text reply.

        Raises:
            ValueError: if no JSON object is present or it does not decode
                to a mapping
        """
        if not text:
            raise ValueError("empty reply")
        match = cls.JSON_OBJECT_RE.search(text)
        if not match:
            raise ValueError("no JSON object found in reply")
        data = json.loads(match.group(0))
        if not isinstance(data, dict):
            raise ValueError("JSON reply is not an object")
        return data
