"""CEFR level and category guessing"""

import re

from .constants import CategoryConstants, LevelConstants

UMLAUT_RE = re.compile(LevelConstants.UMLAUT_PATTERN)
COMPOUND_RE = re.compile(LevelConstants.COMPOUND_PATTERN)
COMPLEX_SUFFIX_RE = re.compile(LevelConstants.COMPLEX_SUFFIX_PATTERN, re.IGNORECASE)


def complexity_score(word: str) -> int:
    """Score German-specific features that make a word harder"""
    score = 0
    if UMLAUT_RE.search(word):
        score += 1
    if LevelConstants.ESZETT in word:
        score += 1
    if COMPOUND_RE.search(word):
        score += 2
    if COMPLEX_SUFFIX_RE.search(word):
        score += 2
    return score


def guess_level(word: str) -> str:
    """Guess a CEFR level from curated keywords, then length and complexity"""
    lower = word.lower()
    for level, keywords in LevelConstants.LEVEL_KEYWORDS.items():
        if lower in keywords:
            return level

    length = len(word)
    if length <= 3:
        return "A1"
    if length <= 5:
        return "A2"

    score = complexity_score(word)
    for max_length, max_score, level in LevelConstants.THRESHOLDS:
        if length <= max_length and score <= max_score:
            return level
    return LevelConstants.DEFAULT_LEVEL


def guess_category(word: str, translation: str | None = None) -> str:
    """First category whose keyword occurs in the word or its translation"""
    combined = f"{word} {translation or ''}".lower()
    for category, keywords in CategoryConstants.CATEGORIES.items():
        if any(keyword in combined for keyword in keywords):
            return category
    return CategoryConstants.DEFAULT_CATEGORY
