"""Configuration management with Pydantic v2 settings style"""

from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """Credentials and endpoints for the external knowledge sources"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    pons_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("PONS_API_KEY")
    )
    pons_base_url: str = Field(
        default="https://api.pons.com/v1",
        validation_alias=AliasChoices("PONS_BASE_URL"),
    )
    linguatools_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("LINGUATOOLS_API_KEY")
    )
    linguatools_base_url: str = Field(
        default="https://api.linguatools.org/v1",
        validation_alias=AliasChoices("LINGUATOOLS_BASE_URL"),
    )
    groq_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("GROQ_API_KEY")
    )
    groq_model: str = Field(
        default="llama-3.1-8b-instant", validation_alias=AliasChoices("GROQ_MODEL")
    )
    openai_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("OPENAI_API_KEY")
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1/chat/completions",
        validation_alias=AliasChoices("OPENAI_BASE_URL"),
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo", validation_alias=AliasChoices("OPENAI_MODEL")
    )
    anthropic_api_key: str | None = Field(
        default=None, validation_alias=AliasChoices("ANTHROPIC_API_KEY")
    )
    anthropic_model: str = Field(
        default="claude-3-haiku-20240307",
        validation_alias=AliasChoices("ANTHROPIC_MODEL"),
    )
    ollama_url: str | None = Field(
        default=None, validation_alias=AliasChoices("OLLAMA_URL")
    )
    ollama_model: str = Field(
        default="llama3.1:8b", validation_alias=AliasChoices("OLLAMA_MODEL")
    )
    dictionary_timeout: float = Field(
        default=10.0, validation_alias=AliasChoices("DICTIONARY_TIMEOUT")
    )
    generative_timeout: float = Field(
        default=30.0, validation_alias=AliasChoices("GENERATIVE_TIMEOUT")
    )

    @field_validator("pons_base_url", "linguatools_base_url", "openai_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL"""
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("dictionary_timeout", "generative_timeout")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout"""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class QuotaSettings(BaseSettings):
    """Per-provider call quotas"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    default_limit: int = Field(
        default=1000, validation_alias=AliasChoices("QUOTA_DEFAULT_LIMIT")
    )
    limits: dict[str, int] = Field(
        default_factory=dict, validation_alias=AliasChoices("QUOTA_LIMITS")
    )
    reset_period: str = Field(
        default="monthly", validation_alias=AliasChoices("QUOTA_RESET_PERIOD")
    )

    @field_validator("default_limit")
    @classmethod
    def validate_default_limit(cls, v: int) -> int:
        """Validate default limit"""
        if v <= 0:
            raise ValueError("Quota limit must be positive")
        return v

    @field_validator("limits")
    @classmethod
    def validate_limits(cls, v: dict[str, int]) -> dict[str, int]:
        """Validate per-provider limits"""
        for provider, limit in v.items():
            if limit <= 0:
                raise ValueError(f"Quota limit for {provider} must be positive")
        return {provider.lower(): limit for provider, limit in v.items()}

    @field_validator("reset_period")
    @classmethod
    def validate_reset_period(cls, v: str) -> str:
        """Validate reset period"""
        if v.lower() not in ("monthly", "daily"):
            raise ValueError("Quota reset period must be 'monthly' or 'daily'")
        return v.lower()

    def limit_for(self, provider_id: str) -> int:
        """Limit configured for a provider, or the default"""
        return self.limits.get(provider_id, self.default_limit)


class CacheSettings(BaseSettings):
    """Cache-related configuration settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    database_path: Path = Field(
        default=Path("data/vocabulary.db"),
        validation_alias=AliasChoices("DATABASE_PATH"),
    )
    ttl_hours: int = Field(
        default=24, validation_alias=AliasChoices("CACHE_EXPIRY_HOURS")
    )
    max_memory_entries: int = Field(
        default=500, validation_alias=AliasChoices("CACHE_MAX_MEMORY")
    )
    preload_count: int = Field(
        default=100, validation_alias=AliasChoices("CACHE_PRELOAD_COUNT")
    )

    @field_validator("ttl_hours", "max_memory_entries")
    @classmethod
    def validate_positive_values(cls, v: int) -> int:
        """Validate positive values"""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator("preload_count")
    @classmethod
    def validate_preload(cls, v: int) -> int:
        """Validate preload count"""
        if v < 0:
            raise ValueError("Preload count cannot be negative")
        return v


class EnrichmentSettings(BaseSettings):
    """Batch enrichment and language-pair configuration"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    source_lang: str = Field(default="de", validation_alias=AliasChoices("SOURCE_LANG"))
    target_lang: str = Field(default="en", validation_alias=AliasChoices("TARGET_LANG"))
    batch_size: int = Field(
        default=10, validation_alias=AliasChoices("ENRICH_BATCH_SIZE")
    )
    batch_delay_ms: int = Field(
        default=1000, validation_alias=AliasChoices("ENRICH_BATCH_DELAY_MS")
    )
    auto_enrich_max_words: int = Field(
        default=10, validation_alias=AliasChoices("AUTO_ENRICHMENT_MAX_WORDS")
    )

    @field_validator("source_lang", "target_lang")
    @classmethod
    def validate_lang(cls, v: str) -> str:
        """Validate two-letter language code"""
        v = v.strip().lower()
        if len(v) != 2 or not v.isalpha():
            raise ValueError("Language must be a two-letter code")
        return v

    @field_validator("batch_size", "auto_enrich_max_words")
    @classmethod
    def validate_positive_integers(cls, v: int) -> int:
        """Validate positive integer values"""
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator("batch_delay_ms")
    @classmethod
    def validate_delay(cls, v: int) -> int:
        """Validate batch delay"""
        if v < 0:
            raise ValueError("Batch delay cannot be negative")
        return v


class LoggingSettings(BaseSettings):
    """Logging configuration"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    file: Path | None = Field(default=None, validation_alias=AliasChoices("LOG_FILE"))

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class AppSettings(BaseSettings):
    """Main application settings"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    quota: QuotaSettings = Field(default_factory=QuotaSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    debug: bool = Field(default=False, validation_alias=AliasChoices("DEBUG"))
    verbose: bool = Field(default=False, validation_alias=AliasChoices("VERBOSE"))

    def get_all_paths(self) -> list[Path]:
        """Get all configured paths"""
        paths = []
        if str(self.cache.database_path) != ":memory:":
            paths.append(self.cache.database_path.parent)
        if self.logging.file:
            paths.append(self.logging.file.parent)
        return paths

    def create_directories(self) -> None:
        """Create all necessary directories"""
        for path in self.get_all_paths():
            path.mkdir(parents=True, exist_ok=True)


# Default instance for the command line entry point
settings = AppSettings()
