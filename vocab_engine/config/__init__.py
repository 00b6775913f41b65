"""Configuration module for the vocabulary engine"""

from .settings import (
    AppSettings,
    CacheSettings,
    EnrichmentSettings,
    LoggingSettings,
    ProviderSettings,
    QuotaSettings,
    settings,
)

__all__ = [
    "AppSettings",
    "ProviderSettings",
    "QuotaSettings",
    "CacheSettings",
    "EnrichmentSettings",
    "LoggingSettings",
    "settings",
]
