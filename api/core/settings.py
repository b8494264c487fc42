"""
Process settings read from the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CORS_ORIGINS = (
    "http://localhost:5173",
    "http://127.0.0.1:5173",
)


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    database_url: str
    database_ssl: str = "require"
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout: int = 30
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        # DATABASE_URL is checked when the pool connects, not here, so the
        # app can be built (and tested) without one.
        min_size = max(_env_int("DB_POOL_MIN_SIZE", 1), 0)
        max_size = max(_env_int("DB_POOL_MAX_SIZE", 10), 1)
        return cls(
            database_url=os.environ.get("DATABASE_URL", "").strip(),
            database_ssl=_env_str("DATABASE_SSL", "require").lower(),
            pool_min_size=min(min_size, max_size),
            pool_max_size=max_size,
            command_timeout=_env_int("DB_COMMAND_TIMEOUT", 30),
            host=_env_str("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3000),
            cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            log_level=_env_str("LOG_LEVEL", "INFO").upper(),
        )
