"""Factory functions for creating configured instances"""

from typing import Any

from ..config.settings import AppSettings
from .container import build_context
from .orchestrator import VocabularyEngine


class VocabularyEngineFactory:
    """Factory for creating VocabularyEngine instances"""

    @staticmethod
    def create_default() -> VocabularyEngine:
        """Create an engine from environment settings"""
        return VocabularyEngineFactory.create_from_settings(AppSettings())

    @staticmethod
    def create_from_settings(
        settings: AppSettings, **overrides: Any
    ) -> VocabularyEngine:
        """Create an engine; ``overrides`` are passed to ``build_context``"""
        return VocabularyEngine(build_context(settings, **overrides))


def create_vocabulary_engine(
    settings: AppSettings | None = None, **overrides: Any
) -> VocabularyEngine:
    """Convenience function to create a vocabulary engine"""
    if settings is None:
        settings = AppSettings()
    return VocabularyEngineFactory.create_from_settings(settings, **overrides)
