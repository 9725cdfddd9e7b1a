"""
Pytest fixtures - test DB, client, auth.
Each test gets a fresh in-memory SQLite database and a fresh rate limiter.
"""

from typing import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from product_api.core.rate_limit import InMemoryRateLimiter, get_rate_limiter
from product_api.core.security import get_auth_provider, get_password_hasher
from product_api.db.base import Base
from product_api.db.models import User
from product_api.db.repositories import SQLProductRepository
from product_api.db.session import get_db
from product_api.main import app

# One shared connection so the in-memory database lives for the whole test
TEST_DATABASE_URL = "sqlite+aiosqlite://"
TEST_PASSWORD = "password123"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine) -> AsyncGenerator[AsyncSession, None]:
    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )
    async with async_session() as s:
        yield s


@pytest.fixture
def rate_limiter() -> InMemoryRateLimiter:
    return InMemoryRateLimiter(limit=60, window_seconds=60)


@pytest_asyncio.fixture
async def client(session: AsyncSession, rate_limiter: InMemoryRateLimiter):
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: rate_limiter
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(session: AsyncSession) -> User:
    user = User(
        name="Test User",
        email="test@example.com",
        hashed_password=get_password_hasher().hash(TEST_PASSWORD),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    token = get_auth_provider().issue(test_user.id)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def product_repo(session: AsyncSession) -> SQLProductRepository:
    return SQLProductRepository(session)


@pytest.fixture
def make_products(product_repo: SQLProductRepository):
    """Insert products directly, bypassing the API (and its rate limit)."""

    async def _make(count: int = 1, **overrides):
        created = []
        for i in range(count):
            data = {
                "name": f"Product {i + 1}",
                "description": "Seeded product",
                "price": Decimal("10.00"),
            }
            data.update(overrides)
            created.append(await product_repo.create(data))
        return created

    return _make
