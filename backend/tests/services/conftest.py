"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_task_maps overridden to bind the SQL maps to the test DB
    - get_clock overridden with a FakeClock that ticks one second per call

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares one connection,
      so the route and the assertions see the same tables
"""

from datetime import timedelta

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from tasktracker.api.dependencies import get_clock, get_task_maps
from tasktracker.db.base import Base
from tasktracker.infrastructure.kv_store import sql_task_maps
from tasktracker.main import app
from tests.fakes import FakeClock


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def route_clock():
    return FakeClock(step=timedelta(seconds=1))


@pytest.fixture
async def client(test_session_factory, route_clock):
    """FastAPI test client with storage and clock dependencies overridden."""
    async def override_get_task_maps():
        async with test_session_factory() as session:
            yield sql_task_maps(session)

    app.dependency_overrides[get_task_maps] = override_get_task_maps
    app.dependency_overrides[get_clock] = lambda: route_clock

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
