"""
Product CRUD endpoints - RESTful resource (GET/POST/PUT/PATCH/DELETE).
Design: Thin controller; the service holds the business logic. Every route
here sits behind the authenticator (see router.py).
"""

from fastapi import APIRouter, Query, status

from product_api.config import get_settings
from product_api.core.dependencies import CurrentUserId, ProductServiceDep
from product_api.schemas.envelope import ApiResponse, Page
from product_api.schemas.product import ProductCreate, ProductResponse, ProductUpdate

router = APIRouter()
settings = get_settings()


@router.get("", response_model=ApiResponse[Page[ProductResponse]])
async def list_products(
    svc: ProductServiceDep,
    user_id: CurrentUserId,
    search: str | None = Query(None),
    per_page: int = Query(settings.default_per_page, ge=1, le=settings.max_per_page),
    page: int = Query(1, ge=1),
):
    """List products. REST: GET /products?search=&per_page=10&page=1."""
    return await svc.list(search=search, per_page=per_page, page=page, user_id=user_id)


@router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: str, svc: ProductServiceDep, user_id: CurrentUserId):
    return await svc.get(product_id, user_id=user_id)


@router.post("", response_model=ApiResponse[ProductResponse], status_code=status.HTTP_201_CREATED)
async def create_product(data: ProductCreate, svc: ProductServiceDep, user_id: CurrentUserId):
    return await svc.create(data, user_id=user_id)


@router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
@router.patch("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: str, data: ProductUpdate, svc: ProductServiceDep, user_id: CurrentUserId
):
    """Partial update for both verbs: fields left out of the body keep their values."""
    return await svc.update(product_id, data, user_id=user_id)


@router.delete("/{product_id}", response_model=ApiResponse[None])
async def delete_product(product_id: str, svc: ProductServiceDep, user_id: CurrentUserId):
    """Soft delete. Returns 200 with data null."""
    return await svc.delete(product_id, user_id=user_id)
