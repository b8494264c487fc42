from __future__ import annotations

from core.settings import DEFAULT_CORS_ORIGINS, Settings


def test_defaults(monkeypatch):
    for name in (
        "DATABASE_URL",
        "DATABASE_SSL",
        "DB_POOL_MIN_SIZE",
        "DB_POOL_MAX_SIZE",
        "DB_COMMAND_TIMEOUT",
        "PORT",
        "HOST",
        "CORS_ORIGINS",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env()

    assert settings.database_url == ""
    assert settings.database_ssl == "require"
    assert (settings.pool_min_size, settings.pool_max_size) == (1, 10)
    assert settings.port == 3000
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "INFO"


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", " postgresql://u:p@db/posts ")
    monkeypatch.setenv("DATABASE_SSL", "Disable")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "4")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env()

    assert settings.database_url == "postgresql://u:p@db/posts"
    assert settings.database_ssl == "disable"
    assert settings.pool_max_size == 4
    assert settings.port == 8080
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "DEBUG"


def test_malformed_integers_fall_back(monkeypatch):
    monkeypatch.setenv("PORT", "eighty")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "")
    settings = Settings.from_env()
    assert settings.port == 3000
    assert settings.pool_max_size == 10


def test_min_size_never_exceeds_max(monkeypatch):
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "20")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "5")
    settings = Settings.from_env()
    assert (settings.pool_min_size, settings.pool_max_size) == (5, 5)
