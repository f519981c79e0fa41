"""
Shared fixtures: in-memory SQLite (shared through StaticPool), a dict-backed
Redis stand-in for the session revocation list, and an HTTP client bound to
the app with the database dependency overridden.
"""

from __future__ import annotations

import os

os.environ.setdefault("DP_DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("DP_SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")

from datetime import datetime
from typing import Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.auth import create_session_token, hash_password
from app.core.database import engine_options, get_session
from app.main import app as fastapi_app
from app.models.desk_schedule import DeskSchedule
from app.models.organization import Organization
from app.models.user import User
from desk_planner_shared.schemas.common import UserRole


class FakeRedis:
    """Just enough of redis.asyncio.Redis for the revocation list."""

    def __init__(self):
        self.store: dict[str, str] = {}

    async def setex(self, key: str, ttl: int, value: str) -> None:
        self.store[key] = value

    async def exists(self, key: str) -> int:
        return int(key in self.store)

    async def aclose(self) -> None:
        self.store.clear()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    fake = FakeRedis()

    async def _get_redis():
        return fake

    monkeypatch.setattr("app.core.session_store.get_redis", _get_redis)
    return fake


@pytest.fixture
async def engine():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        **engine_options("sqlite+aiosqlite://"),
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def session(engine):
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as s:
        yield s


@pytest.fixture
async def client(session):
    """HTTP client whose requests share the test's database session."""

    async def override_get_session():
        yield session
        await session.commit()

    fastapi_app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(
        transport=ASGITransport(app=fastapi_app), base_url="http://test"
    ) as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Data factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_org(session):
    async def _make(org_id: Optional[str] = None, name: str = "Acme") -> Organization:
        org = Organization(name=name) if org_id is None else Organization(id=org_id, name=name)
        session.add(org)
        await session.flush()
        return org

    return _make


@pytest.fixture
def make_user(session):
    async def _make(
        user_id: Optional[str] = None,
        *,
        role: UserRole = UserRole.MEMBER,
        org_id: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        extra = {"id": user_id} if user_id is not None else {}
        user = User(
            **extra,
            user_role=role,
            organization_id=org_id,
            email=email,
            password_hash=hash_password(password) if password else None,
        )
        session.add(user)
        await session.flush()
        return user

    return _make


@pytest.fixture
def make_schedule(session):
    async def _make(user_id: Optional[str], start_time: datetime) -> DeskSchedule:
        schedule = DeskSchedule(user_id=user_id, start_time=start_time)
        session.add(schedule)
        await session.flush()
        return schedule

    return _make


@pytest.fixture
def auth_headers():
    """Bearer headers carrying a fresh session token for the given user."""

    def _headers(user: User) -> dict[str, str]:
        token, _ = create_session_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _headers
