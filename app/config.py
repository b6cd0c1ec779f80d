"""Runtime settings, read from the environment and an optional ``.env`` file."""

from __future__ import annotations

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "test", "staging", "production"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Service identity
    app_name: str = "Homestay Booking API"
    app_version: str = "1.0.0"
    environment: Environment = "development"
    debug: bool = False
    api_prefix: str = "/api/v1"
    log_level: str = "INFO"

    # Uvicorn
    host: str = "0.0.0.0"
    port: int = 8000
    workers: int = 4

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "homestay"
    postgres_password: str = "homestay_secret"
    postgres_db: str = "homestay"
    db_pool_size: int = 20
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    # Any SQLAlchemy async URL; the test-suite points this at aiosqlite
    database_url_override: Optional[str] = None

    # Redis: rate limiting and the Celery broker
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: Optional[str] = None
    redis_db: int = 0

    # Tokens
    jwt_secret_key: str = Field(default="change-me-in-production", min_length=16)
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 15
    refresh_token_expire_days: int = 7

    # Requests per client per minute
    rate_limit_per_minute: int = 100
    booking_rate_limit_per_minute: int = 20
    slow_request_threshold_ms: int = 1000

    cors_origins: List[str] = ["http://localhost:3000", "http://localhost:5173"]

    # Booking and listing rules
    cancellation_window_hours: int = 24
    default_page_size: int = 10
    max_page_size: int = 100
    public_profile_listing_limit: int = 6

    def _postgres_dsn(self, driver: str) -> str:
        return (
            f"{driver}://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @computed_field
    @property
    def database_url(self) -> str:
        """Async URL used by the application engine."""
        return self.database_url_override or self._postgres_dsn("postgresql+asyncpg")

    @computed_field
    @property
    def sync_database_url(self) -> str:
        """psycopg2 URL for Alembic migrations."""
        return self._postgres_dsn("postgresql")

    @computed_field
    @property
    def redis_url(self) -> str:
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
