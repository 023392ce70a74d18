"""Shared test fixtures.

Tests run against an in-memory SQLite database (one per test) with Redis
disabled; the schema comes from the ORM metadata.
"""

from __future__ import annotations

import os

os.environ["LP_DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["LP_REDIS_URL"] = ""
os.environ["LP_LOG_FORMAT"] = "console"

from collections.abc import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession  # noqa: E402

from learnpath.config import get_settings  # noqa: E402
from learnpath.database import close_db, get_engine, init_db  # noqa: E402
from learnpath.db.base import Base  # noqa: E402
from learnpath.db.models import User  # noqa: E402
from learnpath.dependencies import get_redis_dep  # noqa: E402
from learnpath.gamification.seed import seed_achievements  # noqa: E402
from learnpath.main import create_app  # noqa: E402
from learnpath.users.service import create_user  # noqa: E402

get_settings.cache_clear()


async def _create_schema() -> None:
    settings = get_settings()
    await init_db(settings.database_url)
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        await seed_achievements(session)


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Direct database session on a fresh, seeded schema."""
    await _create_schema()
    async with AsyncSession(get_engine(), expire_on_commit=False) as session:
        yield session
    await close_db()


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP test client on a fresh, seeded schema with Redis disabled."""
    await _create_schema()

    app = create_app()
    app.dependency_overrides[get_redis_dep] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    await close_db()


@pytest.fixture
def fake_redis() -> MagicMock:
    """Stand-in Redis client that records publish calls."""
    redis = MagicMock()
    redis.publish = AsyncMock(return_value=1)
    return redis


@pytest_asyncio.fixture
async def student(db_session: AsyncSession) -> User:
    user = await create_user(db_session, email="student@example.com", name="Sam")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def coach(db_session: AsyncSession) -> User:
    user = await create_user(db_session, email="coach@example.com", name="Casey", user_type="coach")
    await db_session.commit()
    return user


@pytest_asyncio.fixture
async def student_id(client: AsyncClient) -> int:
    """Id of a student registered through the API."""
    response = await client.post("/api/v1/users", json={"email": "student@example.com", "name": "Sam"})
    assert response.status_code == 201
    return response.json()["id"]
