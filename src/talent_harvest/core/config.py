"""Application configuration using Pydantic Settings."""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # Application
    APP_NAME: str = "Talent Harvest Crawler"
    APP_VERSION: str = "1.0.0"
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "./logs"

    # API
    API_V1_PREFIX: str = "/api/v1"
    API_KEY_NAME: str = "X-API-Key"
    API_KEY_SECRET: str = "changeme"
    CORS_ORIGINS: List[str] = ["*"]

    # Browser session
    CRAWLER_HEADLESS: bool = True
    CRAWLER_TIMEOUT_MS: int = 30000
    CRAWLER_VIEWPORT_WIDTH: int = 1920
    CRAWLER_VIEWPORT_HEIGHT: int = 1080
    CRAWLER_USER_AGENTS: List[str] = [
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/119.0.0.0 Safari/537.36",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    ]

    # Navigation failure handling
    CRAWLER_NAVIGATION_ATTEMPTS: int = 3
    CRAWLER_RETRY_MIN_WAIT: float = 1.0
    CRAWLER_RETRY_MAX_WAIT: float = 10.0
    CRAWLER_MAX_CONSECUTIVE_FAILURES: int = 3

    # Crawl pacing
    CRAWLER_INTER_SITE_DELAY_MS: int = 1000
    CRAWLER_MAX_KEYWORDS_PER_SITE: int = 2
    CRAWLER_BATCH_DELAY_MS: int = 2000
    CRAWLER_MAX_BATCH_URLS: int = 5

    # Cache
    CACHE_DIR: str = "./cache/crawler"
    INTERVIEW_CACHE_TTL: int = 86400
    JOB_CACHE_TTL: int = 3600

    # Request defaults
    DEFAULT_MAX_RESULTS: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True
    )


settings = Settings()
