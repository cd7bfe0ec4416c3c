"""Shared test fixtures."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Tests run on SQLite without Redis or network access
os.environ.setdefault("SATSLAB_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ["SATSLAB_REDIS_ENABLED"] = "false"
os.environ["SATSLAB_EXPLORER_ENABLED"] = "false"
os.environ["SATSLAB_JWT_SECRET"] = "test-secret-with-enough-length-for-hs256"
os.environ["SATSLAB_LOG_FORMAT"] = "console"

from satslab.config import get_settings  # noqa: E402
from satslab.db.base import Base  # noqa: E402
import satslab.db.models  # noqa: E402, F401
from satslab.validation.service import ValidationService  # noqa: E402
from tests.fakes import FakeClock, auth_headers  # noqa: E402

get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def validator() -> ValidationService:
    """Validation service without an explorer (local checks only)."""
    return ValidationService()


@pytest_asyncio.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Fresh SQLite database with all tables, one session."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def app(tmp_path, monkeypatch) -> AsyncGenerator[FastAPI, None]:
    """Application with its lifespan running on a fresh SQLite database."""
    monkeypatch.setenv("SATSLAB_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'api.db'}")
    get_settings.cache_clear()

    from satslab.database import get_engine
    from satslab.main import create_app

    application = create_app()
    async with application.router.lifespan_context(application):
        async with get_engine().begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        yield application

    get_settings.cache_clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP test client with full app lifecycle."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def learner_headers() -> dict[str, str]:
    return auth_headers("learner-1")
