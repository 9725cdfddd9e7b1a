"""
Product repository - product data access over SQLAlchemy.
Soft-deleted rows are filtered explicitly in every read; there is no implicit scope.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, select

from product_api.db.models.product import Product
from product_api.db.repositories.base_repository import BaseRepository
from product_api.db.repositories.interfaces import ProductRecord, ProductRepository

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make %, _ and the escape character match literally in a LIKE pattern."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _to_record(product: Product) -> ProductRecord:
    return ProductRecord(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        created_at=product.created_at,
        updated_at=product.updated_at,
        deleted_at=product.deleted_at,
    )


class SQLProductRepository(BaseRepository[Product], ProductRepository):
    """Product queries. Search is a case-insensitive substring match on name."""

    def __init__(self, session):
        super().__init__(session, Product)

    async def _get_active(self, id: int) -> Product | None:
        result = await self.session.execute(
            select(Product).where(Product.id == id, Product.deleted_at.is_(None))
        )
        return result.scalar_one_or_none()

    async def get_all(
        self, search: str | None = None, per_page: int = 10, page: int = 1
    ) -> tuple[list[ProductRecord], int]:
        conditions = [Product.deleted_at.is_(None)]
        if search:
            conditions.append(Product.name.ilike(f"%{escape_like(search)}%", escape=LIKE_ESCAPE))

        total = await self.session.scalar(
            select(func.count()).select_from(Product).where(*conditions)
        ) or 0
        offset = (page - 1) * per_page
        # Pages past the end can carry offsets larger than the database accepts.
        if offset >= total:
            return [], total
        result = await self.session.execute(
            select(Product)
            .where(*conditions)
            .order_by(Product.id)
            .offset(offset)
            .limit(per_page)
        )
        return [_to_record(p) for p in result.scalars().all()], total

    async def find_by_id(self, id: int) -> ProductRecord | None:
        product = await self._get_active(id)
        return _to_record(product) if product else None

    async def create(self, data: dict[str, Any]) -> ProductRecord:
        product = await self._add(Product(**data))
        return _to_record(product)

    async def update(self, id: int, data: dict[str, Any]) -> ProductRecord | None:
        product = await self._get_active(id)
        if not product:
            return None
        for field, value in data.items():
            setattr(product, field, value)
        product = await self._save(product)
        return _to_record(product)

    async def delete(self, id: int) -> bool:
        product = await self._get_active(id)
        if not product:
            return False
        product.deleted_at = datetime.now(timezone.utc)
        await self.session.flush()
        return True

    async def find_with_trashed(self, id: int) -> ProductRecord | None:
        """Internal lookup that also returns soft-deleted rows. Not exposed over HTTP."""
        product = await self._get_row(id)
        return _to_record(product) if product else None
