"""Persistence for resolved vocabulary"""

from .database import Database
from .vocabulary_store import VocabularyStore

__all__ = ["Database", "VocabularyStore"]
