"""
API v1 router - aggregates all endpoint modules.
The rate limiter runs on every route; protected routers add the authenticator.
"""

from fastapi import APIRouter, Depends

from product_api.api.v1.endpoints import auth, health, products
from product_api.core.dependencies import enforce_rate_limit, get_current_user_id

api_router = APIRouter(prefix="/v1", dependencies=[Depends(enforce_rate_limit)])

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["products"],
    dependencies=[Depends(get_current_user_id)],
)
