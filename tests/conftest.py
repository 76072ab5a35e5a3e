"""Test configuration and fixtures."""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator

import fakeredis
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.cache import ResultCache, get_cache
from app.core.database import Base, get_db
from app.core.security import create_access_token
from app.models.tenant import Tenant
from app.models.office import Office
from app.models.room import Room
from app.models.occupancy_event import OccupancyEvent


# Test database URL (use SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def redis_server() -> fakeredis.FakeServer:
    """Isolated in-memory Redis server; set ``connected = False`` to simulate an outage."""
    return fakeredis.FakeServer()


@pytest.fixture
def fake_redis(redis_server: fakeredis.FakeServer) -> fakeredis.FakeAsyncRedis:
    return fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def cache(fake_redis: fakeredis.FakeAsyncRedis) -> ResultCache:
    return ResultCache(fake_redis)


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_maker = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_maker() as session:
        yield session

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession, cache: ResultCache) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database and cache overrides."""
    async def override_get_db():
        yield db_session

    async def override_get_cache():
        return cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


async def _add(session: AsyncSession, obj):
    session.add(obj)
    await session.commit()
    await session.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def test_tenant(db_session: AsyncSession) -> Tenant:
    """Create test tenant."""
    return await _add(db_session, Tenant(
        id=str(uuid.uuid4()),
        name="Test Tenant",
        slug="test-tenant",
        settings={},
        active=True,
    ))


@pytest_asyncio.fixture
async def other_tenant(db_session: AsyncSession) -> Tenant:
    """Create a second tenant for isolation checks."""
    return await _add(db_session, Tenant(
        id=str(uuid.uuid4()),
        name="Other Tenant",
        slug="other-tenant",
        settings={},
        active=True,
    ))


@pytest_asyncio.fixture
async def test_office(db_session: AsyncSession, test_tenant: Tenant) -> Office:
    """Create test office."""
    return await _add(db_session, Office(
        id=str(uuid.uuid4()),
        tenant_id=test_tenant.id,
        name="Test HQ",
        location="New York, NY",
        timezone="America/New_York",
        total_capacity=100,
    ))


@pytest_asyncio.fixture
async def make_room(db_session: AsyncSession, test_tenant: Tenant, test_office: Office):
    """Factory for rooms in the test office."""
    async def _make_room(room_id: str, capacity: int = 10, type: str = "general", active: bool = True,
                         tenant_id: str = None, office_id: str = None) -> Room:
        return await _add(db_session, Room(
            tenant_id=tenant_id or test_tenant.id,
            office_id=office_id or test_office.id,
            room_id=room_id,
            name=f"Room {room_id}",
            type=type,
            capacity=capacity,
            floor="1",
            active=active,
        ))
    return _make_room


@pytest_asyncio.fixture
async def add_events(db_session: AsyncSession, test_tenant: Tenant):
    """Insert occupancy events directly, bypassing the API and its cache eviction."""
    async def _add_events(room_id: str, counts, timestamp: datetime = None, tenant_id: str = None):
        timestamp = timestamp or datetime.now(timezone.utc)
        for count in counts:
            db_session.add(OccupancyEvent(
                tenant_id=tenant_id or test_tenant.id,
                room_id=room_id,
                timestamp=timestamp,
                people_count=count,
                event_metadata={},
            ))
        await db_session.commit()
    return _add_events


@pytest.fixture
def auth_headers(test_tenant: Tenant) -> dict:
    """Create authorization headers with a valid token for the test tenant."""
    token = create_access_token(tenant_id=test_tenant.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_tenant: Tenant) -> dict:
    token = create_access_token(tenant_id=other_tenant.id)
    return {"Authorization": f"Bearer {token}"}
