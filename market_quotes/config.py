"""
Market Quotes - Configuration Settings
"""
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


VALID_LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}
# Values of adapters.base.Provider
VALID_PROVIDERS = {"finnhub", "alpha_vantage", "polygon"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # =========================
    # Application Settings
    # =========================
    APP_NAME: str = "Market Quotes"
    DEBUG: bool = False

    # =========================
    # Data Providers - API Keys
    # =========================
    FINNHUB_API_KEY: str = ""
    ALPHA_VANTAGE_API_KEY: str = ""
    POLYGON_API_KEY: str = ""

    # =========================
    # Quote Aggregation
    # =========================
    DEFAULT_QUOTE_PROVIDER: str = "finnhub"
    QUOTE_CACHE_TTL_SECONDS: float = 300.0  # 5 minutes
    PROVIDER_TIMEOUT_SECONDS: float = 15.0
    HEALTH_FAILURE_THRESHOLD: int = 3

    @field_validator("DEFAULT_QUOTE_PROVIDER", mode="before")
    @classmethod
    def validate_default_provider(cls, v):
        value = str(v).strip().lower()
        if value not in VALID_PROVIDERS:
            raise ValueError(
                f"DEFAULT_QUOTE_PROVIDER must be one of: {', '.join(sorted(VALID_PROVIDERS))}"
            )
        return value

    @field_validator("QUOTE_CACHE_TTL_SECONDS", "PROVIDER_TIMEOUT_SECONDS")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be positive")
        return v

    @field_validator("HEALTH_FAILURE_THRESHOLD")
    @classmethod
    def validate_threshold(cls, v: int) -> int:
        if v < 1:
            raise ValueError("HEALTH_FAILURE_THRESHOLD must be at least 1")
        return v

    # =========================
    # Logging
    # =========================
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v):
        level = str(v).upper()
        if level not in VALID_LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(sorted(VALID_LOG_LEVELS))}")
        return level


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process; credentials are never refreshed."""
    return Settings()
