"""
FastAPI dependencies - injection for repositories, services, auth and rate limiting.

Routers compose these as an ordered pipeline: the rate limiter runs first,
then (on protected routes) the authenticator. Either one short-circuits by
raising an AppError that the error handlers render as an envelope.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from product_api.core.exceptions import AuthenticationError, RateLimitError
from product_api.core.rate_limit import RateLimiter, client_identifier, get_rate_limiter
from product_api.core.security import (
    JWTAuthProvider,
    PasswordHasher,
    get_auth_provider,
    get_password_hasher,
)
from product_api.db.repositories.interfaces import ProductRepository, UserRepository
from product_api.db.repositories.product_repository import SQLProductRepository
from product_api.db.repositories.user_repository import SQLUserRepository
from product_api.db.session import DbSession
from product_api.services.auth_service import AuthService
from product_api.services.product_service import ProductService

logger = structlog.get_logger(__name__)

security = HTTPBearer(auto_error=False)


def get_user_repository(session: DbSession) -> UserRepository:
    return SQLUserRepository(session)


def get_product_repository(session: DbSession) -> ProductRepository:
    return SQLProductRepository(session)


def get_auth_service(
    users: Annotated[UserRepository, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[JWTAuthProvider, Depends(get_auth_provider)],
) -> AuthService:
    return AuthService(users, hasher, tokens)


def get_product_service(
    products: Annotated[ProductRepository, Depends(get_product_repository)],
) -> ProductService:
    return ProductService(products)


async def enforce_rate_limit(
    request: Request,
    response: Response,
    limiter: Annotated[RateLimiter, Depends(get_rate_limiter)],
) -> None:
    """Count the request against the client's window; 429 once it is spent."""
    client_id = client_identifier(request)
    result = await limiter.hit(client_id)
    if not result.allowed:
        logger.warning(
            "rate_limit.exceeded",
            client_id=client_id,
            path=request.url.path,
            retry_after=result.retry_after,
        )
        raise RateLimitError(retry_after=result.retry_after, limit=result.limit)
    response.headers["X-RateLimit-Limit"] = str(result.limit)
    response.headers["X-RateLimit-Remaining"] = str(result.remaining)


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    tokens: Annotated[JWTAuthProvider, Depends(get_auth_provider)],
    users: Annotated[UserRepository, Depends(get_user_repository)],
) -> int:
    """Resolve the bearer token to a user id. Raises 401 if missing, invalid or orphaned."""
    if not credentials:
        raise AuthenticationError()
    user_id = tokens.identity(credentials.credentials)
    if user_id is None:
        raise AuthenticationError()
    if await users.get_by_id(user_id) is None:
        raise AuthenticationError()
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id


CurrentUserId = Annotated[int, Depends(get_current_user_id)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
