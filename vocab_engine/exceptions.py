"""Custom exceptions for the vocabulary resolution engine"""

from typing import Any


class VocabEngineError(Exception):
    """Base exception class for all engine errors"""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message


class WordValidationError(VocabEngineError):
    """Raised when word validation fails"""

    def __init__(self, word: str, reason: str):
        super().__init__(
            f"Invalid word '{word}': {reason}", {"word": word, "reason": reason}
        )
        self.word = word
        self.reason = reason


class ProviderError(VocabEngineError):
    """Base class for failures raised by a provider adapter.

    ``kind`` is the short tag carried into ``ProviderErr`` results.
    """

    kind = "network"

    def __init__(
        self,
        provider_id: str,
        message: str,
        original_error: Exception | None = None,
    ):
        super().__init__(
            f"{provider_id}: {message}",
            {
                "provider": provider_id,
                "original_error": str(original_error) if original_error else None,
            },
        )
        self.provider_id = provider_id
        self.original_error = original_error


class ProviderConfigError(ProviderError):
    """Raised when a provider is missing its credential or endpoint"""

    kind = "config"


class QuotaExceededError(ProviderError):
    """Raised when a provider has no quota left for the current period"""

    kind = "quota"


class ProviderTimeoutError(ProviderError):
    """Raised when a provider call exceeds its time bound"""

    kind = "timeout"


class ProviderNetworkError(ProviderError):
    """Raised on transport failures and unexpected HTTP statuses"""

    kind = "network"


class ParseError(ProviderError):
    """Raised when a provider reply (or one candidate in it) is malformed"""

    kind = "parse"

    def __init__(
        self,
        provider_id: str,
        reason: str,
        payload: Any = None,
    ):
        super().__init__(provider_id, f"failed to parse reply: {reason}")
        preview = repr(payload)
        self.details["payload"] = preview[:100] + "..." if len(preview) > 100 else preview
        self.reason = reason


class AllProvidersFailedError(VocabEngineError):
    """Raised when no provider produced a usable candidate for a word"""

    def __init__(self, word: str, attempted_sources: list[str] | None = None):
        sources_info = (
            f" (tried: {', '.join(attempted_sources)})" if attempted_sources else ""
        )
        super().__init__(
            f"No provider could resolve '{word}'{sources_info}",
            {"word": word, "attempted_sources": attempted_sources or []},
        )
        self.word = word
        self.attempted_sources = attempted_sources or []


class CacheError(VocabEngineError):
    """Raised when cache operations fail"""

    def __init__(
        self,
        operation: str,
        cache_type: str,
        original_error: Exception | None = None,
    ):
        super().__init__(
            f"Cache operation '{operation}' failed for {cache_type} cache",
            {
                "operation": operation,
                "cache_type": cache_type,
                "original_error": str(original_error) if original_error else None,
            },
        )
        self.operation = operation
        self.cache_type = cache_type
        self.original_error = original_error


class StorageError(VocabEngineError):
    """Raised when the permanent vocabulary store fails"""

    def __init__(self, operation: str, original_error: Exception | None = None):
        super().__init__(
            f"Vocabulary store operation '{operation}' failed",
            {
                "operation": operation,
                "original_error": str(original_error) if original_error else None,
            },
        )
        self.operation = operation
        self.original_error = original_error


class ConfigurationError(VocabEngineError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, setting: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for '{setting}': {reason}",
            {"setting": setting, "value": value, "reason": reason},
        )
        self.setting = setting
        self.value = value
        self.reason = reason
