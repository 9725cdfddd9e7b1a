"""
BDD step definitions for the product lifecycle feature (pytest-bdd).
Steps are synchronous, so the app is driven through Starlette's TestClient.
"""

import pytest
from pytest_bdd import given, parsers, scenarios, then, when
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from starlette.testclient import TestClient

from product_api.core.rate_limit import InMemoryRateLimiter, get_rate_limiter
from product_api.db.base import Base
from product_api.db.session import get_db
from product_api.main import app

scenarios("../features/product_lifecycle.feature")


@pytest.fixture
def client():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    limiter = InMemoryRateLimiter(limit=1000, window_seconds=60)
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    with TestClient(app) as test_client:
        test_client.portal.call(create_tables)
        yield test_client
        test_client.portal.call(engine.dispose)
    app.dependency_overrides.clear()


@pytest.fixture
def context():
    """Store last response and created ids for then steps."""
    return {}


@given(parsers.parse('a registered user with email "{email}"'), target_fixture="auth_headers")
def registered_user(client, email):
    r = client.post(
        "/api/v1/auth/register",
        json={
            "name": "Feature User",
            "email": email,
            "password": "password123",
            "password_confirmation": "password123",
        },
    )
    assert r.status_code == 201
    return {"Authorization": f"Bearer {r.json()['data']['token']}"}


@given(parsers.parse('the user has created products "{names}"'))
def created_products(client, auth_headers, names):
    for name in names.split(","):
        r = client.post("/api/v1/products", json={"name": name.strip(), "price": 5}, headers=auth_headers)
        assert r.status_code == 201


@when(parsers.parse('the user creates a product named "{name}" priced "{price}"'))
def create_product(client, auth_headers, context, name, price):
    r = client.post("/api/v1/products", json={"name": name, "price": price}, headers=auth_headers)
    context["response"] = r
    context["product_id"] = r.json()["data"]["id"]


@when(parsers.parse('the user changes the product price to "{price}"'))
def change_price(client, auth_headers, context, price):
    context["response"] = client.patch(
        f"/api/v1/products/{context['product_id']}", json={"price": price}, headers=auth_headers
    )


@when("the user deletes the product")
def delete_product(client, auth_headers, context):
    context["response"] = client.delete(f"/api/v1/products/{context['product_id']}", headers=auth_headers)


@when("the user fetches the product")
def fetch_product(client, auth_headers, context):
    context["response"] = client.get(f"/api/v1/products/{context['product_id']}", headers=auth_headers)


@when(parsers.parse('the user searches products for "{term}"'))
def search_products(client, auth_headers, context, term):
    context["response"] = client.get("/api/v1/products", params={"search": term}, headers=auth_headers)


@when("an anonymous client lists products")
def anonymous_list(client, context):
    context["response"] = client.get("/api/v1/products")


@then(parsers.parse("the response status should be {status:d}"))
def response_status(context, status):
    assert context["response"].status_code == status


@then(parsers.parse('the response message should be "{message}"'))
def response_message(context, message):
    assert context["response"].json()["message"] == message


@then(parsers.parse('the product price should be "{price}"'))
def product_price(context, price):
    assert context["response"].json()["data"]["price"] == price


@then(parsers.parse("the listing should contain {count:d} products"))
def listing_count(context, count):
    data = context["response"].json()["data"]
    assert len(data["data"]) == count
    assert data["total"] == count
