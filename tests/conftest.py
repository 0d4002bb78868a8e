"""Shared test fixtures.

Tests run against a throwaway SQLite file (aiosqlite) created from the ORM
metadata, and a recording publisher stands in for Redis pub/sub.
"""

from __future__ import annotations

import os
from contextlib import aclosing
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

os.environ.setdefault("PACT_JWT_SECRET", "test-secret")
os.environ.setdefault("PACT_LOG_FORMAT", "console")
os.environ.setdefault("PACT_CREATE_TABLES_ON_STARTUP", "true")

from pact.config import get_settings  # noqa: E402
from pact.database import close_db, get_session, init_db  # noqa: E402
from pact.db.models import User  # noqa: E402
from pact.events import get_publisher  # noqa: E402
from pact.gamification.seed import seed_badges  # noqa: E402


class RecordingPublisher:
    """Collects published events instead of sending them."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        self.events.append((topic, payload))

    def topics(self) -> list[str]:
        return [topic for topic, _ in self.events]


def make_token(user_id: int, *, secret: str | None = None, expires_in: int = 3600, **claims: Any) -> str:
    """Issue an access token the way the identity service does."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload: dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "iss": settings.jwt_issuer,
        "type": "access",
    }
    payload.update(claims)
    return jwt.encode(payload, secret or settings.jwt_secret, algorithm=settings.jwt_algorithm)


async def create_user(
    db: AsyncSession,
    username: str = "alice",
    role: str = "user",
    streak_count: int = 0,
    points: int = 0,
) -> User:
    """Insert a user row directly (registration lives in the identity service)."""
    user = User(
        username=username,
        email=f"{username}@example.com",
        role=role,
        streak_count=streak_count,
        points=points,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest_asyncio.fixture
async def db_session(tmp_path) -> AsyncGenerator[AsyncSession, None]:
    """Fresh database with the badge catalog seeded."""
    get_settings.cache_clear()
    await init_db(f"sqlite+aiosqlite:///{tmp_path / 'pact_test.db'}", create_tables=True)
    async with aclosing(get_session()) as sessions:
        async for session in sessions:
            await seed_badges(session)
            yield session
            break
    await close_db()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, publisher: RecordingPublisher) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against the app, sharing the test database."""
    from pact.main import create_app

    app = create_app()
    app.dependency_overrides[get_publisher] = lambda: publisher

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def user(db_session: AsyncSession) -> User:
    return await create_user(db_session, "alice")


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> User:
    return await create_user(db_session, "root", role="admin")


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, user: User) -> AsyncClient:
    """Client authenticated as the regular test user."""
    client.headers["Authorization"] = f"Bearer {make_token(user.id)}"
    return client


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id)}"}
