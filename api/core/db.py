"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. The FastAPI lifespan creates one per
process, connects it on startup and closes it on shutdown (see
`api/main.py`). Handlers receive it through `get_database`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import ssl
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from .errors import StoreFailure
from .settings import Settings

logger = logging.getLogger(__name__)

SSL_MODES = {"require", "verify", "disable"}


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def ssl_context(mode: str) -> ssl.SSLContext | bool:
    """
    Translate DATABASE_SSL into asyncpg's `ssl=` argument.

    `require` encrypts the transport but skips certificate verification,
    which is what managed Postgres providers with self-signed chains need.
    """
    mode = (mode or "").strip().lower()
    if mode not in SSL_MODES:
        raise ValueError(f"Invalid DATABASE_SSL '{mode}'. Allowed: {sorted(SSL_MODES)}")

    if mode == "disable":
        return False

    ctx = ssl.create_default_context()
    if mode == "require":
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
    return ctx


def _statement_summary(sql: str) -> str:
    # First non-empty line is enough to identify the statement in logs.
    for line in sql.splitlines():
        line = line.strip()
        if line:
            return line[:120]
    return ""


class Database:
    """
    Connection pool plus the query executor built on it.

    Pass `pool` to wrap an already-created pool (or a test double exposing
    `fetch` and `close`); otherwise `connect()` creates one from `dsn`.
    """

    def __init__(
        self,
        dsn: str = "",
        *,
        ssl_mode: str = "require",
        min_size: int = 1,
        max_size: int = 10,
        command_timeout: float = 30,
        pool: Any = None,
    ) -> None:
        self._dsn = _sanitize_database_url(dsn) if dsn else ""
        self._ssl_mode = ssl_mode
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool = pool

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            ssl_mode=settings.database_ssl,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            command_timeout=settings.command_timeout,
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        if not self._dsn:
            raise RuntimeError("DATABASE_URL is not set.")
        # Callers beyond max_size wait in asyncpg's acquire queue.
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            ssl=ssl_context(self._ssl_mode),
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )
        logger.info(
            "db_pool_ready min_size=%s max_size=%s ssl=%s",
            self._min_size,
            self._max_size,
            self._ssl_mode,
        )

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> Any:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.

        Any driver or connectivity error is logged and re-raised as
        `StoreFailure`. Parameter values are never logged.
        """
        pool = self.pool()
        try:
            # Pool.fetch acquires a connection and releases it on exit, error or not.
            rows = await pool.fetch(sql, *args)
        except Exception as exc:
            logger.exception(
                "query_failed statement=%r params=%s",
                _statement_summary(sql),
                len(args),
            )
            raise StoreFailure("Database query failed.") from exc
        return [dict(r) for r in rows]

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        rows = await self.fetch_all(sql, *args)
        return rows[0] if rows else None

    async def execute(self, sql: str, *args: Any) -> None:
        await self.fetch_all(sql, *args)


def get_database(request: Request) -> Database:
    return request.app.state.database
