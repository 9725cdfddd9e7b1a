"""
Auth endpoints - registration, login and the current user.
"""

from fastapi import APIRouter, status

from product_api.core.dependencies import AuthServiceDep, CurrentUserId
from product_api.schemas.envelope import ApiResponse
from product_api.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserResponse

router = APIRouter()


@router.post("/register", response_model=ApiResponse[TokenResponse], status_code=status.HTTP_201_CREATED)
async def register(data: RegisterRequest, svc: AuthServiceDep):
    """Create a user and return a bearer token for it."""
    return await svc.register(data)


@router.post("/login", response_model=ApiResponse[TokenResponse])
async def login(data: LoginRequest, svc: AuthServiceDep):
    """Authenticate and return a bearer token."""
    return await svc.login(data)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(user_id: CurrentUserId, svc: AuthServiceDep):
    return await svc.me(user_id)
