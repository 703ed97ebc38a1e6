"""Test fixtures — a fresh in-memory database per test.

Learn: Testing pattern for async SQLAlchemy + FastAPI:

1. Each test gets its own in-memory SQLite engine (StaticPool keeps the
   single connection alive, so every session sees the same database).
2. Tables are created from the ORM metadata and seeded with one user
   and one photo, so ids are predictable (user 1, photo 1).
3. The app's get_db is overridden to open sessions on that engine;
   authentication is NOT overridden, so every request goes through the
   real bearer-token gate.
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from photo_api.auth.jwt import sign
from photo_api.auth.password import hash_password
from photo_api.db.engine import get_db
from photo_api.db.models import Base, Photo, User
from photo_api.main import app

TEST_DB_URL = "sqlite+aiosqlite://"

SEED_USER = {
    "username": "luki",
    "email": "luki@mail.com",
    "password": "password",
}

DEFAULT_PHOTO = {
    "title": "Default Photo",
    "caption": "Default Photo caption",
    "image_url": "http://image.com/defaultphoto.png",
}

NEW_PHOTO = {
    "title": "Buat photo baru",
    "image_url": "http://image.com/createphoto.png",
}


@pytest_asyncio.fixture()
async def db_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture()
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture()
async def seeded(session_factory):
    """Insert the seed user (id 1) and its default photo (id 1)."""
    now = datetime.now(timezone.utc)
    async with session_factory() as db:
        user = User(
            username=SEED_USER["username"],
            email=SEED_USER["email"],
            password=hash_password(SEED_USER["password"]),
        )
        db.add(user)
        await db.flush()
        db.add(Photo(**DEFAULT_PHOTO, user_id=user.id, created_at=now, updated_at=now))
        await db.commit()
        return {"user_id": user.id}


@pytest_asyncio.fixture()
async def client(session_factory, seeded):
    """HTTP client against the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture()
def user_token():
    return sign({"id": 1, "email": SEED_USER["email"]})


@pytest.fixture()
def unknown_user_token():
    return sign({"id": 99, "email": "notexists@gmail.com"})


@pytest.fixture()
def auth_headers(user_token):
    return {"Authorization": f"Bearer {user_token}"}
