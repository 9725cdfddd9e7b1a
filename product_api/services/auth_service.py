"""
Auth service - registration, login and identity lookup.
Keeps endpoints thin; hashing and token issuance are injected capabilities.
"""

import structlog

from product_api.core.exceptions import (
    AuthenticationError,
    EmailAlreadyRegistered,
    NotFoundError,
    ValidationError,
)
from product_api.core.security import JWTAuthProvider, PasswordHasher
from product_api.db.repositories.interfaces import UserRecord, UserRepository
from product_api.schemas.envelope import ApiResponse
from product_api.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserResponse

logger = structlog.get_logger(__name__)

EMAIL_TAKEN = "The email has already been taken."
INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:
    """Handles account use cases. Tokens are stateless and never persisted."""

    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: JWTAuthProvider):
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    def _token_for(self, user: UserRecord) -> TokenResponse:
        return TokenResponse(
            token=self.tokens.issue(user.id),
            token_type="bearer",
            expires_in=self.tokens.ttl_seconds,
            user=UserResponse.model_validate(user),
        )

    async def register(self, data: RegisterRequest) -> ApiResponse[TokenResponse]:
        """Create the user, then issue a token for it.

        Raises:
            ValidationError: if the email is already registered.
        """
        if await self.users.get_by_email(data.email):
            raise ValidationError({"email": [EMAIL_TAKEN]})
        try:
            user = await self.users.add(
                name=data.name,
                email=data.email,
                hashed_password=self.hasher.hash(data.password),
            )
        except EmailAlreadyRegistered:
            # Lost a race with a concurrent registration; the unique index caught it.
            raise ValidationError({"email": [EMAIL_TAKEN]}) from None
        logger.info("user.registered", user_id=user.id)
        return ApiResponse[TokenResponse](message="Registration successful", data=self._token_for(user))

    async def login(self, data: LoginRequest) -> ApiResponse[TokenResponse]:
        """Exchange credentials for a token.

        Unknown email and wrong password produce the same error.
        """
        user = await self.users.get_by_email(data.email)
        if user is None:
            self.hasher.dummy_verify()
            logger.info("auth.login_failed")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not self.hasher.verify(data.password, user.hashed_password):
            logger.info("auth.login_failed", user_id=user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)
        logger.info("auth.login_succeeded", user_id=user.id)
        return ApiResponse[TokenResponse](message="Login successful", data=self._token_for(user))

    async def me(self, user_id: int) -> ApiResponse[UserResponse]:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return ApiResponse[UserResponse](
            message="User retrieved successfully",
            data=UserResponse.model_validate(user),
        )
