"""
Vocabulary Engine - resolves German words into enriched vocabulary records
"""

__version__ = "1.0.0"
__description__ = (
    "Multi-source German vocabulary resolution with quotas, scoring and caching"
)

# Export main factory function for easy access
from .core.factory import create_vocabulary_engine
from .core.orchestrator import VocabularyEngine

__all__ = ["create_vocabulary_engine", "VocabularyEngine"]
