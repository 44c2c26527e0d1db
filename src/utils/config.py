"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import List, Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


TREND_SOURCES = ("none", "period", "daily")


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Google properties (empty = provider runs in mock mode)
    GSC_SITE_URL: str = ""
    GA4_PROPERTY_ID: str = ""

    # Bearer token for the Google APIs. Minting and refreshing it belongs
    # to whatever credential helper runs alongside the service.
    GOOGLE_ACCESS_TOKEN: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8080"

    # Cache
    CACHE_TTL_SECONDS: int = 900

    # Date windows
    DEFAULT_RANGE_DAYS: int = 28
    PREVIOUS_PERIOD_START_DAYS: int = 56
    PREVIOUS_PERIOD_END_DAYS: int = 28

    # Limits
    SCOREBOARD_LIMIT: int = 100
    SCOREBOARD_FETCH_LIMIT: int = 1000
    DEFAULT_ROW_LIMIT: int = 200
    DEFAULT_QUERY_LIMIT: int = 50
    MAX_ROW_LIMIT: int = 5000

    # Trend rules: none | period | daily
    TREND_SOURCE: str = "none"
    TREND_WINDOW_DAYS: int = 28
    TREND_METRIC: str = "sessions"

    # Timeouts
    API_TIMEOUT: float = 30.0
    MAX_RETRIES: int = 2

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase

    @property
    def gsc_configured(self) -> bool:
        return bool(self.GOOGLE_ACCESS_TOKEN and self.GSC_SITE_URL)

    @property
    def ga4_configured(self) -> bool:
        return bool(self.GOOGLE_ACCESS_TOKEN and self.GA4_PROPERTY_ID)

    @property
    def mode(self) -> str:
        """'live' when at least one provider can reach Google, else 'mock'."""
        return "live" if (self.gsc_configured or self.ga4_configured) else "mock"

    @property
    def allowed_origins(self) -> List[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def trend_source(self) -> str:
        source = self.TREND_SOURCE.lower().strip()
        return source if source in TREND_SOURCES else "none"


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
