import uuid

import pytest
from fastapi_cache import FastAPICache
from fastapi_cache.backends.inmemory import InMemoryBackend
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.database import DbBase, get_async_session
from src.main import app
from src.tags.models import Tag
from src.workspaces.models import Workspace

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def cache_backend():
    backend = InMemoryBackend()
    FastAPICache.init(backend=backend, prefix="test-cache")
    return backend


@pytest.fixture(scope="function")
async def test_db():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(DbBase.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(DbBase.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
async def async_session(test_db):
    async_session = async_sessionmaker(
        test_db, expire_on_commit=False, class_=AsyncSession
    )
    yield async_session


@pytest.fixture(scope="function")
async def session(async_session):
    async with async_session() as session:
        yield session


@pytest.fixture(scope="function")
async def client(async_session):
    async def override_get_async_session():
        async with async_session() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_get_async_session
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        follow_redirects=False
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def workspace(async_session):
    async with async_session() as session:
        workspace = Workspace(name="Acme", slug=f"acme-{uuid.uuid4().hex[:8]}")
        session.add(workspace)
        await session.commit()
    return workspace


@pytest.fixture(scope="function")
async def tags(async_session, workspace):
    async with async_session() as session:
        tags = [
            Tag(name="Marketing", color="red", workspace_id=workspace.id),
            Tag(name="Sales", color="blue", workspace_id=workspace.id),
        ]
        session.add_all(tags)
        await session.commit()
    return tags
