"""Shared test fixtures."""

import os
from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Tests never touch Postgres or real S3
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("S3_BUCKET", "portal-test")
os.environ.setdefault("S3_ENDPOINT_URL", "http://minio.test:9000")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "minioadmin")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "minioadmin")

from portal.core.dependencies import get_store  # noqa: E402
from portal.db.base import Base  # noqa: E402
from portal.main import app  # noqa: E402
from portal.models import *  # noqa: E402,F401,F403
from portal.services.content_store import (  # noqa: E402
    ContentStore,
    MemoryContentStore,
    SqlContentStore,
)

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def sql_session() -> AsyncGenerator[AsyncSession, None]:
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()
    await engine.dispose()


@pytest.fixture
def memory_store() -> Generator[MemoryContentStore, None, None]:
    store = MemoryContentStore()
    yield store
    store.clear()


@pytest.fixture(params=["memory", "sql"])
async def store(request, sql_session: AsyncSession) -> AsyncGenerator[ContentStore, None]:
    """Run the test once per backend; both must honour the same contract."""
    if request.param == "memory":
        yield MemoryContentStore()
    else:
        yield SqlContentStore(sql_session)


@pytest.fixture
async def client(memory_store: MemoryContentStore) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app, backed by a per-test memory store."""
    app.state.memory_store = memory_store
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.state.memory_store = None


@pytest.fixture
async def sql_client(sql_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests share one SQLite session, committing like production."""

    async def _sql_store() -> AsyncGenerator[ContentStore, None]:
        try:
            yield SqlContentStore(sql_session)
            await sql_session.commit()
        except Exception:
            await sql_session.rollback()
            raise

    app.dependency_overrides[get_store] = _sql_store
    try:
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
    finally:
        app.dependency_overrides.pop(get_store, None)
