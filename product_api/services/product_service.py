"""
Product service - business logic for products.
Design: depends on the ProductRepository contract; easy to test with the in-memory one.
The caller's user id is passed in explicitly and only used for logging.
"""

import structlog

from product_api.core.exceptions import NotFoundError
from product_api.db.repositories.interfaces import ProductRepository
from product_api.schemas import rules
from product_api.schemas.envelope import ApiResponse, Page
from product_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate

logger = structlog.get_logger(__name__)

PRODUCT_NOT_FOUND = "Product not found"
# products.id is a 32-bit INTEGER column
MAX_PRODUCT_ID = 2**31 - 1


def _parse_id(product_id: int | str) -> int:
    """Ids that cannot name a row are treated like missing rows."""
    try:
        value = int(product_id)
    except (TypeError, ValueError):
        raise NotFoundError(PRODUCT_NOT_FOUND) from None
    if not 1 <= value <= MAX_PRODUCT_ID:
        raise NotFoundError(PRODUCT_NOT_FOUND)
    return value


class ProductService:
    """Handles product use cases: paginated search, CRUD, soft delete."""

    def __init__(self, products: ProductRepository):
        self.products = products

    async def list(
        self,
        search: str | None = None,
        per_page: int = 10,
        page: int = 1,
        *,
        user_id: int | None = None,
    ) -> ApiResponse[Page[ProductResponse]]:
        """Paginated list, optionally filtered by a name substring. Always succeeds."""
        term = None if rules.is_blank(search) else search
        rows, total = await self.products.get_all(search=term, per_page=per_page, page=page)
        page_data = Page[ProductResponse].build(
            [ProductResponse.model_validate(r) for r in rows],
            total=total,
            page=page,
            per_page=per_page,
        )
        logger.debug("product.listed", user_id=user_id, search=term, page=page, total=total)
        return ApiResponse[Page[ProductResponse]](
            message="Products retrieved successfully", data=page_data
        )

    async def get(self, product_id: int | str, *, user_id: int | None = None) -> ApiResponse[ProductResponse]:
        product = await self.products.find_by_id(_parse_id(product_id))
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND)
        return ApiResponse[ProductResponse](
            message="Product retrieved successfully",
            data=ProductResponse.model_validate(product),
        )

    async def create(self, data: ProductCreate, *, user_id: int | None = None) -> ApiResponse[ProductResponse]:
        product = await self.products.create(data.model_dump())
        logger.info("product.created", product_id=product.id, user_id=user_id)
        return ApiResponse[ProductResponse](
            message="Product created successfully",
            data=ProductResponse.model_validate(product),
        )

    async def update(
        self, product_id: int | str, data: ProductUpdate, *, user_id: int | None = None
    ) -> ApiResponse[ProductResponse]:
        """Apply only the supplied fields; absent fields keep their values."""
        id = _parse_id(product_id)
        changes = data.changes()
        product = await self.products.update(id, changes)
        if product is None:
            raise NotFoundError(PRODUCT_NOT_FOUND)
        logger.info("product.updated", product_id=id, fields=sorted(changes), user_id=user_id)
        return ApiResponse[ProductResponse](
            message="Product updated successfully",
            data=ProductResponse.model_validate(product),
        )

    async def delete(self, product_id: int | str, *, user_id: int | None = None) -> ApiResponse[None]:
        """Soft delete. The row stays in storage but disappears from every read."""
        id = _parse_id(product_id)
        if not await self.products.delete(id):
            raise NotFoundError(PRODUCT_NOT_FOUND)
        logger.info("product.soft_deleted", product_id=id, user_id=user_id)
        return ApiResponse[None](message="Product deleted successfully", data=None)
