from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.version import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="allow",
    )

    PORT: int = 5000
    APP_ENV: Literal["development", "production"] = "production"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: list[str] = ["*"]

    KITSU_BASE_URL: str = "https://kitsu.io/api/edge"
    KITSU_TIMEOUT: float = 10.0
    # Catalog calls are not retried; a failed page aborts the recommendation request
    KITSU_MAX_RETRIES: int = 1

    REDIS_URL: str = "redis://redis:6379/0"
    REDIS_MAX_CONNECTIONS: int = 20
    REDIS_CONNECT_RETRIES: int = 5
    REDIS_LIBRARY_KEY: str = "mangashelf:library:"
    DEFAULT_USER_SCOPE: str = "default"

    RECOMMENDATION_QUOTA: int = 15
    RECOMMENDATION_PAGE_SIZE: int = 20  # Kitsu caps page[limit] at 20
    RECOMMENDATION_MAX_ATTEMPTS: int = 6
    RECOMMENDATION_RESULT_CAP: int = 20
    TRENDING_LIMIT: int = 20
    SEARCH_PAGE_SIZE: int = 10


settings = Settings()

APP_VERSION = __version__
