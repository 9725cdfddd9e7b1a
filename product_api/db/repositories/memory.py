"""
In-memory repositories. Same contracts as the SQLAlchemy ones; used by
service tests and local experiments that should not need a database.
"""

import itertools
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from product_api.core.exceptions import EmailAlreadyRegistered
from product_api.db.repositories.interfaces import (
    ProductRecord,
    ProductRepository,
    UserRecord,
    UserRepository,
)

CENTS = Decimal("0.01")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryProductRepository(ProductRepository):
    def __init__(self):
        self._rows: dict[int, ProductRecord] = {}
        self._ids = itertools.count(1)

    def _active(self) -> list[ProductRecord]:
        return [p for p in self._rows.values() if p.deleted_at is None]

    async def get_all(
        self, search: str | None = None, per_page: int = 10, page: int = 1
    ) -> tuple[list[ProductRecord], int]:
        rows = sorted(self._active(), key=lambda p: p.id)
        if search:
            needle = search.lower()
            rows = [p for p in rows if needle in p.name.lower()]
        start = (page - 1) * per_page
        return [replace(p) for p in rows[start:start + per_page]], len(rows)

    async def find_by_id(self, id: int) -> ProductRecord | None:
        product = self._rows.get(id)
        if product is None or product.deleted_at is not None:
            return None
        return replace(product)

    async def create(self, data: dict[str, Any]) -> ProductRecord:
        now = _now()
        product = ProductRecord(
            id=next(self._ids),
            name=data["name"],
            description=data.get("description"),
            price=Decimal(data["price"]).quantize(CENTS),
            created_at=now,
            updated_at=now,
        )
        self._rows[product.id] = product
        return replace(product)

    async def update(self, id: int, data: dict[str, Any]) -> ProductRecord | None:
        if await self.find_by_id(id) is None:
            return None
        changes = dict(data)
        if "price" in changes:
            changes["price"] = Decimal(changes["price"]).quantize(CENTS)
        self._rows[id] = replace(self._rows[id], **changes, updated_at=_now())
        return replace(self._rows[id])

    async def delete(self, id: int) -> bool:
        if await self.find_by_id(id) is None:
            return False
        self._rows[id].deleted_at = _now()
        return True

    async def find_with_trashed(self, id: int) -> ProductRecord | None:
        product = self._rows.get(id)
        return replace(product) if product else None


class InMemoryUserRepository(UserRepository):
    def __init__(self):
        self._rows: dict[int, UserRecord] = {}
        self._ids = itertools.count(1)

    async def get_by_id(self, id: int) -> UserRecord | None:
        return self._rows.get(id)

    async def get_by_email(self, email: str) -> UserRecord | None:
        return next((u for u in self._rows.values() if u.email == email), None)

    async def add(self, name: str, email: str, hashed_password: str) -> UserRecord:
        if await self.get_by_email(email) is not None:
            raise EmailAlreadyRegistered(email)
        user = UserRecord(
            id=next(self._ids),
            name=name,
            email=email,
            hashed_password=hashed_password,
            created_at=_now(),
        )
        self._rows[user.id] = user
        return user
