"""
Configuration helpers for the chat backend.

Settings is immutable and built once per process; components receive it (or the
values they need) through their constructors.
"""

from dataclasses import dataclass
from functools import lru_cache
import os


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    redis_url: str
    jwt_secret: str
    jwt_algorithm: str
    token_ttl_seconds: int
    password_time_cost: int
    password_memory_cost: int
    store_timeout_seconds: float
    store_retry_attempts: int
    store_retry_backoff_seconds: float
    max_page_size: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./chat.db"),
        redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        jwt_secret=os.getenv("JWT_SECRET", ""),
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        token_ttl_seconds=_int(os.getenv("TOKEN_TTL_SECONDS", "3600"), 3600),
        password_time_cost=_int(os.getenv("PASSWORD_TIME_COST", "3"), 3),
        password_memory_cost=_int(os.getenv("PASSWORD_MEMORY_COST", "65536"), 65536),
        store_timeout_seconds=_float(os.getenv("STORE_TIMEOUT_SECONDS", "5"), 5.0),
        store_retry_attempts=max(1, _int(os.getenv("STORE_RETRY_ATTEMPTS", "3"), 3)),
        store_retry_backoff_seconds=_float(os.getenv("STORE_RETRY_BACKOFF_SECONDS", "0.1"), 0.1),
        max_page_size=_int(os.getenv("MAX_PAGE_SIZE", "100"), 100),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
