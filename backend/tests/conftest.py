"""Root conftest - async DB, mock chain and FastAPI test client shared by every suite.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db, get_chain, get_dispatcher and get_storage are overridden; lifespan never runs
    - db_manager patched for code that bypasses get_db (readiness check)
    - Published notifications are collected by a RecordingDispatcher, never delivered

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the metric upsert picks the sqlite
      ON CONFLICT variant through the session's dialect
"""

import os
from unittest.mock import MagicMock

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("HOST_DOMAIN", "localhost")
os.environ.setdefault("COOKIE_HASH_KEY", "ab" * 32)
os.environ.setdefault("COOKIE_ENCRYPT_KEY", "cd" * 32)

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from octopus.api.dependencies import get_chain, get_dispatcher, get_storage
from octopus.db.base import Base
from octopus.infrastructure.database import get_db, DatabaseSessionManager
from octopus.infrastructure.storage import ObjectStorage
import octopus.infrastructure.database as db_module
from octopus.main import app
from octopus.models.user import User
from tests.helpers import RecordingDispatcher
from tests.mock_chain import MockChain, make_address


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
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
def mock_chain():
    return MockChain()


@pytest.fixture
async def chain(mock_chain):
    client = mock_chain.client()
    yield client
    await client.aclose()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def s3_client():
    s3 = MagicMock()
    s3.generate_presigned_url.return_value = "https://uploads.s3.amazonaws.com/put?sig=abc"
    return s3


@pytest.fixture
async def client(test_engine, test_session_factory, chain, dispatcher, s3_client):
    """FastAPI test client with DB, chain, dispatcher and storage overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    storage = ObjectStorage("uploads", "us-west-1", client=s3_client)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chain] = lambda: chain
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_storage] = lambda: storage

    # Readiness check reads db_manager directly
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
def make_user(test_db):
    """Insert a registered user; the address comes from one bech32 seed character."""
    async def _make(seed: str, username: str, email: str | None = None, **fields) -> User:
        user = User(
            address=make_address(seed),
            username=username,
            full_name=username.title(),
            email=email or f"{username}@example.com",
            **fields,
        )
        test_db.add(user)
        await test_db.commit()
        await test_db.refresh(user)
        return user
    return _make
