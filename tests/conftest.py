"""Shared pytest fixtures for all test suites."""

import os
import uuid
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import NullPool, StaticPool

from backend.app.authz.roles import Role
from backend.app.db.engine import create_session_factory, get_session
from backend.app.db.models import Base, Club, Gender, Medal, Membership, Season, User
from backend.app.main import app
from backend.app.security.passwords import hash_password
from tests.helpers import EMAILS, PASSWORD, World

_PASSWORD_HASH = hash_password(PASSWORD)


@pytest_asyncio.fixture
async def postgres_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create async engine for PostgreSQL integration tests.

    Requires DATABASE_URL to be set to a real PostgreSQL connection string.
    Tests using this fixture should be marked with @pytest.mark.postgres.
    """
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("DATABASE_URL not set - skipping postgres test")

    if not database_url.startswith(("postgresql://", "postgresql+asyncpg://")):
        pytest.skip(f"DATABASE_URL is not PostgreSQL: {database_url}")

    if database_url.startswith("postgresql://"):
        database_url = database_url.replace("postgresql://", "postgresql+asyncpg://", 1)

    engine = create_async_engine(database_url, poolclass=NullPool, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine shared by every connection of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(test_engine)


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def world(session_factory: async_sessionmaker[AsyncSession]) -> World:
    """Seed two clubs with one user per role."""
    ids = {key: uuid.uuid4() for key in EMAILS}
    club_a = uuid.uuid4()
    club_b = uuid.uuid4()
    male, female, gold, season = uuid.uuid4(), uuid.uuid4(), uuid.uuid4(), uuid.uuid4()

    memberships = [
        ("owner_a", club_a, Role.OWNER),
        ("admin_a", club_a, Role.ADMIN),
        ("member_a", club_a, Role.MEMBER),
        ("multi", club_a, Role.MEMBER),
        ("owner_b", club_b, Role.OWNER),
        ("multi", club_b, Role.MEMBER),
    ]

    async with session_factory() as session:
        session.add_all(
            [
                Club(club_id=club_a, name="Elite Athletics Club"),
                Club(club_id=club_b, name="Metro Runners"),
                Gender(gender_id=male, name="Male", initial="M"),
                Gender(gender_id=female, name="Female", initial="F"),
                Medal(medal_id=gold, name="Gold", ordinal=1),
                Season(season_id=season, name="Outdoor 2026"),
            ]
        )
        for key, email in EMAILS.items():
            session.add(
                User(
                    user_id=ids[key],
                    email=email,
                    name=key.replace("_", " ").title(),
                    password_hash=_PASSWORD_HASH,
                )
            )
        await session.flush()
        for key, club_id, role in memberships:
            session.add(Membership(user_id=ids[key], club_id=club_id, role=role.value))
        await session.commit()

    return World(
        club_a=club_a, club_b=club_b, male=male, female=female, gold=gold, season=season, **ids
    )


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, bound to the test database."""

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
