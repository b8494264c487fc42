from __future__ import annotations

import logging
import ssl

import asyncpg
import pytest

from core.db import Database, _sanitize_database_url, ssl_context
from core.errors import StoreFailure
from core.settings import Settings


@pytest.mark.anyio
async def test_fetch_all_returns_dict_rows(db, fake_pool):
    await db.fetch_all("INSERT INTO posts (titulo, contenido, usuario_id) VALUES ($1, $2, $3)", "T", "C", 1)
    rows = await db.fetch_all("SELECT id FROM posts ORDER BY created_at DESC")
    assert rows[0]["titulo"] == "T"
    assert isinstance(rows[0], dict)


@pytest.mark.anyio
async def test_fetch_one_returns_none_without_rows(db):
    assert await db.fetch_one("SELECT id FROM posts WHERE id = $1", 1) is None


@pytest.mark.anyio
@pytest.mark.parametrize(
    "error",
    [OSError("connection refused"), asyncpg.PostgresError('relation "posts" does not exist')],
)
async def test_failures_are_logged_and_wrapped(db, fake_pool, caplog, error):
    fake_pool.fail_with = error

    with caplog.at_level(logging.ERROR, logger="core.db"):
        with pytest.raises(StoreFailure) as excinfo:
            await db.fetch_all("SELECT id FROM posts WHERE id = $1", "secret-value")

    assert excinfo.value.__cause__ is error
    assert "query_failed" in caplog.text
    assert "SELECT id FROM posts WHERE id = $1" in caplog.text
    assert "secret-value" not in caplog.text


@pytest.mark.anyio
async def test_pool_required_before_queries():
    database = Database("postgresql://u:p@localhost/db")
    assert not database.is_connected
    with pytest.raises(RuntimeError):
        await database.fetch_all("SELECT 1")


@pytest.mark.anyio
async def test_connect_without_url_fails():
    with pytest.raises(RuntimeError, match="DATABASE_URL"):
        await Database("").connect()


@pytest.mark.anyio
async def test_close_releases_injected_pool(db, fake_pool):
    await db.close()
    assert fake_pool.closed
    assert not db.is_connected
    await db.close()


def test_sslmode_is_stripped_from_url():
    url = "postgresql://u:p@host:5432/db?sslmode=require&application_name=posts"
    assert _sanitize_database_url(url) == "postgresql://u:p@host:5432/db?application_name=posts"


def test_require_encrypts_without_verification():
    ctx = ssl_context("require")
    assert isinstance(ctx, ssl.SSLContext)
    assert ctx.check_hostname is False
    assert ctx.verify_mode == ssl.CERT_NONE


def test_verify_keeps_certificate_checks():
    ctx = ssl_context("verify")
    assert ctx.check_hostname is True
    assert ctx.verify_mode == ssl.CERT_REQUIRED


def test_disable_turns_tls_off():
    assert ssl_context("disable") is False


def test_unknown_ssl_mode_is_rejected():
    with pytest.raises(ValueError):
        ssl_context("prefer-ish")


def test_from_settings_sanitizes_url():
    settings = Settings(database_url="postgresql://u:p@h/db?sslmode=disable")
    database = Database.from_settings(settings)
    assert database._dsn == "postgresql://u:p@h/db"
