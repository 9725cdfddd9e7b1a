"""
Repository tests - the SQLAlchemy and in-memory implementations honour the same contract.
"""

from decimal import Decimal

import pytest
import pytest_asyncio

from product_api.core.exceptions import EmailAlreadyRegistered
from product_api.db.repositories import (
    InMemoryProductRepository,
    InMemoryUserRepository,
    SQLProductRepository,
    SQLUserRepository,
)
from product_api.db.repositories.product_repository import escape_like


@pytest_asyncio.fixture(params=["sql", "memory"])
async def products(request, session):
    if request.param == "sql":
        return SQLProductRepository(session)
    return InMemoryProductRepository()


@pytest_asyncio.fixture(params=["sql", "memory"])
async def users(request, session):
    if request.param == "sql":
        return SQLUserRepository(session)
    return InMemoryUserRepository()


async def _seed(repo, *names):
    return [await repo.create({"name": n, "description": None, "price": Decimal("5")}) for n in names]


@pytest.mark.asyncio
async def test_create_and_find(products):
    created = await products.create({"name": "Kettle", "description": "1.7l", "price": Decimal("34.5")})

    found = await products.find_by_id(created.id)
    assert found.name == "Kettle"
    assert found.price == Decimal("34.50")
    assert found.deleted_at is None


@pytest.mark.asyncio
async def test_get_all_paginates_in_id_order(products):
    await _seed(products, "a", "b", "c", "d", "e")

    rows, total = await products.get_all(per_page=2, page=2)
    assert total == 5
    assert [r.name for r in rows] == ["c", "d"]


@pytest.mark.asyncio
async def test_get_all_past_the_end_is_empty(products):
    await _seed(products, "a", "b")

    assert await products.get_all(per_page=10, page=2) == ([], 2)
    assert await products.get_all(per_page=100, page=10**20) == ([], 2)


@pytest.mark.asyncio
async def test_get_all_search_keeps_surrounding_spaces(products):
    await _seed(products, "MyTest", "My Test")

    rows, total = await products.get_all(search=" Test")
    assert total == 1
    assert [r.name for r in rows] == ["My Test"]


@pytest.mark.asyncio
async def test_get_all_search(products):
    await _seed(products, "Red Apple", "apple pie", "Banana")

    rows, total = await products.get_all(search="APPLE")
    assert total == 2
    assert {r.name for r in rows} == {"Red Apple", "apple pie"}


@pytest.mark.asyncio
async def test_soft_delete_excluded_from_reads(products):
    keep, gone = await _seed(products, "keep", "gone")

    assert await products.delete(gone.id) is True
    assert await products.find_by_id(gone.id) is None
    assert await products.update(gone.id, {"name": "zombie"}) is None
    assert await products.delete(gone.id) is False

    rows, total = await products.get_all()
    assert total == 1
    assert [r.id for r in rows] == [keep.id]

    trashed = await products.find_with_trashed(gone.id)
    assert trashed.deleted_at is not None
    assert trashed.name == "gone"


@pytest.mark.asyncio
async def test_update_changes_only_given_fields(products):
    [row] = await _seed(products, "Old")

    updated = await products.update(row.id, {"price": Decimal("7.25")})
    assert updated.name == "Old"
    assert updated.price == Decimal("7.25")


@pytest.mark.asyncio
async def test_missing_ids(products):
    assert await products.find_by_id(12345) is None
    assert await products.update(12345, {"name": "x"}) is None
    assert await products.delete(12345) is False


@pytest.mark.asyncio
async def test_user_email_is_unique(users):
    user = await users.add(name="A", email="a@example.com", hashed_password="hash")
    assert (await users.get_by_email("a@example.com")).id == user.id
    assert (await users.get_by_id(user.id)).email == "a@example.com"

    with pytest.raises(EmailAlreadyRegistered):
        await users.add(name="B", email="a@example.com", hashed_password="hash")


@pytest.mark.asyncio
async def test_user_email_lookup_is_exact(users):
    await users.add(name="A", email="Mixed@example.com", hashed_password="hash")
    assert await users.get_by_email("mixed@example.com") is None


def test_escape_like():
    assert escape_like("50%_off\\") == "50\\%\\_off\\\\"
