"""Application configuration via Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Global application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # App
    ENVIRONMENT: str = "development"
    DEBUG: bool = True

    # Frontend
    FRONTEND_URL: str = "http://localhost:3000"

    # Scraper
    SCRAPER_MAX_RETRIES: int = 3
    SCRAPER_BACKOFF_BASE: float = 1.5  # seconds, multiplied by attempt number
    SCRAPER_POLITENESS_DELAY: float = 0.6  # seconds between source URLs
    SCRAPER_TIMEOUT: float = 30.0
    SCRAPER_DEFAULT_MAX_ITEMS: int = 300
    SCRAPER_TIME_BUDGET_SECONDS: float = 0.0  # 0 disables the wall-clock budget
    SCRAPER_ACCEPT_LANGUAGE: str = "pt-BR,pt;q=0.9,en-US;q=0.8,en;q=0.7"


settings = Settings()
