"""Service test fixtures — async DB, fake clock, store, catalog and API client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Store, services and routes all read the same FakeClock, so expiry and
      cooldown are driven by advance() instead of sleeping
    - Route collaborators swapped through app.dependency_overrides

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the partial unique index
      is declared with sqlite_where so the one-draft rule holds here too
    - StaticPool: every session shares the single in-memory connection
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.api.dependencies import (
    get_app_settings, get_clock, get_position_catalog, get_session_store,
)
from app.config import Settings
from app.db.base import Base
from app.infrastructure.database import get_db
from app.infrastructure.position_catalog import StaticPositionCatalog
from app.infrastructure.session_store import InMemorySessionStore
from app.main import app
from app.services.review_workflow import ReviewWorkflow
from app.services.session_manager import SessionManager

TTL = timedelta(hours=168)


class FakeClock:
    """Controllable UTC clock."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
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
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(clock=clock)


@pytest.fixture
def catalog(position, optional_only_position, make_position) -> StaticPositionCatalog:
    return StaticPositionCatalog((
        position,
        optional_only_position,
        make_position("closed", active=False),
    ))


@pytest.fixture
def manager(test_db, store, catalog, clock) -> SessionManager:
    return SessionManager(
        test_db, store, catalog, ttl=TTL, rejection_cooldown_days=7, clock=clock,
    )


@pytest.fixture
def workflow(test_db, catalog, clock) -> ReviewWorkflow:
    return ReviewWorkflow(test_db, catalog, clock)


@pytest.fixture
async def client(test_session_factory, store, catalog, clock):
    """FastAPI test client with every collaborator overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: store
    app.dependency_overrides[get_position_catalog] = lambda: catalog
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_app_settings] = lambda: Settings(
        session_ttl_hours=168, rejection_cooldown_days=7,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
