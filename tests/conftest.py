from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from core.db import Database
from core.settings import Settings
from main import create_app

from fakes import FakePool


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def fake_pool() -> FakePool:
    return FakePool()


@pytest.fixture
def db(fake_pool: FakePool) -> Database:
    return Database(pool=fake_pool)


@pytest.fixture
def settings() -> Settings:
    return Settings(database_url="", database_ssl="disable", log_level="WARNING")


@pytest.fixture
def client(settings: Settings, db: Database):
    app = create_app(settings=settings, database=db)
    with TestClient(app) as test_client:
        yield test_client
