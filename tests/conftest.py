import os
from contextlib import contextmanager
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from greenlight.app import app
from greenlight.domain.ports.repositories.movie_repository import MovieRepository
from greenlight.domain.ports.services.logger import LoggerPort
from greenlight.infrastructure.persistence.database import get_session
from greenlight.infrastructure.persistence.models import table_registry

USE_POSTGRES = os.getenv("GREENLIGHT_TEST_POSTGRES") == "1"


async def _create_sqlite_engine(url: str = "sqlite+aiosqlite://"):
    if url == "sqlite+aiosqlite://":
        engine = create_async_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_async_engine(url)

    async with engine.begin() as conn:
        await conn.run_sync(table_registry.metadata.create_all)
    return engine


class BaseIntegrationTest:
    """Base class for integration tests with common setup

    Runs against in-memory SQLite; set GREENLIGHT_TEST_POSTGRES=1 to run against a
    throwaway PostgreSQL container instead.
    """

    @pytest_asyncio.fixture
    async def database_engine(self):
        """Create test database engine"""
        if USE_POSTGRES:
            from testcontainers.postgres import PostgresContainer

            with PostgresContainer("postgres:16", driver="psycopg") as postgres:
                engine = create_async_engine(postgres.get_connection_url())

                async with engine.begin() as conn:
                    await conn.run_sync(table_registry.metadata.create_all)

                yield engine

                async with engine.begin() as conn:
                    await conn.run_sync(table_registry.metadata.drop_all)
                await engine.dispose()
            return

        engine = await _create_sqlite_engine()
        yield engine
        await engine.dispose()

    @pytest_asyncio.fixture
    async def test_session(self, database_engine):
        """Create test database session"""
        async with AsyncSession(database_engine, expire_on_commit=False) as session:
            yield session

    @pytest_asyncio.fixture
    async def client(self, database_engine):
        """Create test HTTP client with database override"""

        async def override_get_session():
            async with AsyncSession(database_engine, expire_on_commit=False) as session:
                yield session

        app.dependency_overrides[get_session] = override_get_session

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac

        app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def file_engine(tmp_path):
    """SQLite database on disk, so that separate connections really run side by side."""
    engine = await _create_sqlite_engine(f"sqlite+aiosqlite:///{tmp_path / 'greenlight.db'}")
    yield engine
    await engine.dispose()


@contextmanager
def _mock_db_time(*, model, time=datetime(2024, 1, 1, tzinfo=timezone.utc)):
    def fake_time_hook(mapper, connection, target):
        if hasattr(target, "created_at"):
            target.created_at = time

    event.listen(model, "before_insert", fake_time_hook)

    yield time

    event.remove(model, "before_insert", fake_time_hook)


@pytest.fixture
def mock_db_time():
    return _mock_db_time


@pytest.fixture
def mock_movie_repository():
    """Mock movie repository for use case testing"""
    return AsyncMock(spec=MovieRepository)


@pytest.fixture
def mock_logger():
    return MagicMock(spec=LoggerPort)
