"""
Centralized configuration management for TechBeetle services.
Uses Pydantic Settings for validation and type safety.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import AliasChoices, Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppBaseSettings(BaseSettings):
    """Base settings with shared configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class DatabaseSettings(AppBaseSettings):
    """Database configuration settings."""

    postgres_user: str = Field(
        default="postgres",
        validation_alias="POSTGRES_USER",
    )
    postgres_password: str = Field(
        default="",
        validation_alias="POSTGRES_PASSWORD",
    )
    postgres_db: str = Field(
        default="techbeetle",
        validation_alias="POSTGRES_DB",
    )
    postgres_host: str = Field(
        default="postgres",
        validation_alias="POSTGRES_HOST",
    )
    postgres_port: int = Field(
        default=5432,
        validation_alias="POSTGRES_PORT",
    )
    postgres_url: Optional[str] = Field(
        default=None,
        validation_alias="POSTGRES_URL",
    )

    @validator("postgres_url", pre=True, always=True)
    def validate_postgres_url(cls, v, values):
        """Build POSTGRES_URL from its parts when it is not given."""
        if not v:
            user = values.get("postgres_user", "postgres")
            password = values.get("postgres_password", "")
            host = values.get("postgres_host", "postgres")
            port = values.get("postgres_port", 5432)
            db = values.get("postgres_db", "techbeetle")
            return f"postgresql://{user}:{password}@{host}:{port}/{db}"
        return v


class RedisSettings(AppBaseSettings):
    """Redis configuration settings."""

    redis_host: str = Field(
        default="redis",
        validation_alias="REDIS_HOST",
    )
    redis_port: int = Field(
        default=6379,
        validation_alias="REDIS_PORT",
    )
    redis_db: int = Field(
        default=0,
        validation_alias="REDIS_DB",
    )
    redis_password: Optional[str] = Field(
        default=None,
        validation_alias="REDIS_PASSWORD",
    )
    redis_url: Optional[str] = Field(
        default=None,
        validation_alias="REDIS_URL",
    )

    @validator("redis_url", pre=True, always=True)
    def validate_redis_url(cls, v, values):
        """Ensure Redis URL is properly formatted."""
        if not v:
            host = values.get("redis_host", "redis")
            port = values.get("redis_port", 6379)
            db = values.get("redis_db", 0)
            password = values.get("redis_password")
            if password:
                return f"redis://:{password}@{host}:{port}/{db}"
            return f"redis://{host}:{port}/{db}"
        return v


class ProviderSettings(AppBaseSettings):
    """Third-party news API credentials. An empty key disables that provider."""

    newsdata_api_key: str = Field(
        default="",
        validation_alias="NEWSDATA_API_KEY",
    )
    gnews_api_key: str = Field(
        default="",
        validation_alias="GNEWS_API_KEY",
    )
    mediastack_api_key: str = Field(
        default="",
        validation_alias="MEDIASTACK_API_KEY",
    )
    guardian_api_key: str = Field(
        default="",
        validation_alias="GUARDIAN_API_KEY",
    )

    def configured(self) -> List[str]:
        """Names of providers that have a credential."""
        keys = {
            "newsdata": self.newsdata_api_key,
            "gnews": self.gnews_api_key,
            "mediastack": self.mediastack_api_key,
            "guardian": self.guardian_api_key,
        }
        return [name for name, key in keys.items() if key]


class NewsRouterSettings(AppBaseSettings):
    """Ingestion pipeline settings."""

    default_author_id: Optional[str] = Field(
        default=None,
        validation_alias="DEFAULT_AUTHOR_ID",
    )
    brand: str = Field(
        default="TechBeetle",
        validation_alias="NEWS_BRAND",
    )
    default_country: str = Field(
        default="us",
        validation_alias="NEWS_DEFAULT_COUNTRY",
    )
    target_count: int = Field(
        default=20,
        validation_alias="NEWS_TARGET_COUNT",
    )
    max_target_count: int = Field(
        default=60,
        validation_alias="NEWS_MAX_TARGET_COUNT",
    )
    provider_page_size: int = Field(
        default=10,
        validation_alias="NEWS_PROVIDER_PAGE_SIZE",
    )
    query_terms: str = Field(
        default="technology OR gadget OR smartphone OR laptop OR AI",
        validation_alias="NEWS_QUERY_TERMS",
    )
    cache_backend: str = Field(
        default="memory",
        validation_alias="NEWS_CACHE_BACKEND",
    )
    cache_ttl_seconds: int = Field(
        default=240,
        validation_alias="NEWS_CACHE_TTL_SECONDS",
    )

    @validator("default_author_id", pre=True)
    def blank_author_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @validator("default_country")
    def validate_default_country(cls, v):
        v = v.strip().lower()
        if len(v) != 2 or not v.isalpha():
            raise ValueError("NEWS_DEFAULT_COUNTRY must be a two-letter country code")
        return v

    @validator("cache_backend")
    def validate_cache_backend(cls, v):
        v = v.strip().lower()
        if v not in ("memory", "redis"):
            raise ValueError("NEWS_CACHE_BACKEND must be 'memory' or 'redis'")
        return v


class OpenAISettings(AppBaseSettings):
    """OpenAI API configuration settings. Without a key articles keep the template rewrite."""

    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("OPENAI_API_KEY", "OPEN_API"),
    )
    model: str = Field(
        default="gpt-4.1-mini",
        validation_alias="OPENAI_MODEL",
    )
    max_tokens: int = Field(
        default=1400,
        validation_alias="OPENAI_MAX_TOKENS",
    )
    temperature: float = Field(
        default=0.35,
        validation_alias="OPENAI_TEMPERATURE",
    )


class ServiceSettings(AppBaseSettings):
    """Service-specific configuration settings."""

    http_timeout: float = Field(
        default=30.0,
        validation_alias="HTTP_TIMEOUT",
    )
    redis_timeout: float = Field(
        default=5.0,
        validation_alias="REDIS_TIMEOUT",
    )


class LoggingSettings(AppBaseSettings):
    """Logging configuration settings."""

    level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
    )
    include_correlation_id: bool = Field(
        default=True,
        validation_alias="LOG_INCLUDE_CORRELATION_ID",
    )
    json_logs: bool = Field(
        default=False,
        validation_alias="JSON_LOGS",
    )


class Settings(AppBaseSettings):
    """Main settings class that combines all configuration sections."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    providers: ProviderSettings = Field(default_factory=ProviderSettings)
    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    news: NewsRouterSettings = Field(default_factory=NewsRouterSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    service_name: str = Field(
        default="techbeetle",
        validation_alias="SERVICE_NAME",
    )
    environment: str = Field(
        default="development",
        validation_alias="ENVIRONMENT",
    )
    version: str = Field(
        default="1.0.0",
        validation_alias="SERVICE_VERSION",
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_database_url() -> str:
    """Get the database URL."""
    return get_settings().database.postgres_url


def get_redis_url() -> str:
    """Get the Redis URL."""
    return get_settings().redis.redis_url
