"""Application configuration via environment variables.

Provides type-safe settings loading using pydantic-settings.
Environment variables can be loaded from a .env file.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings have sensible defaults for development.

    Environment Variables:
        DATABASE_URL: SQLAlchemy connection string for the mapping store
        LOG_LEVEL: Logging level (default INFO)
        LOG_JSON: Emit JSON log lines (default True)
        ENVIRONMENT: development | staging | production
        CORS_ORIGINS: Comma separated list of allowed dashboard origins
        MATCH_MIN_CONFIDENCE: Candidates scoring below this are discarded
        MATCH_VALUE_TOLERANCE: Relative tolerance for order total comparison
        MATCH_DATE_WINDOW_DAYS: Max creation date distance for date signal
        MATCH_NAME_SIMILARITY: Fuzzy ratio accepted as partial name match
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./orderlink.db"

    # Application
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True
    ENVIRONMENT: str = "development"
    CORS_ORIGINS: str = "http://localhost:5173,http://localhost:3000"

    # Order matching
    MATCH_MIN_CONFIDENCE: int = 30
    MATCH_VALUE_TOLERANCE: float = 0.10
    MATCH_DATE_WINDOW_DAYS: int = 3
    MATCH_NAME_SIMILARITY: float = 0.85

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache for singleton behavior.
    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()


# Module-level settings instance
settings = get_settings()
