"""
Security: password hashing and JWT bearer tokens.
Services receive these as injected capabilities; nothing here touches the database.
"""

from datetime import datetime, timezone, timedelta
from functools import lru_cache
from typing import Any

from jose import JWTError, jwt
from passlib.context import CryptContext

from product_api.config import get_settings


class PasswordHasher:
    """One-way hash + verify for credentials (bcrypt via passlib)."""

    def __init__(self, schemes: list[str] | None = None):
        self._context = CryptContext(schemes=schemes or ["bcrypt"], deprecated="auto")

    def hash(self, password: str) -> str:
        """One-way hash for storage. Never store plain passwords."""
        return self._context.hash(password)

    def verify(self, plain: str, hashed: str) -> bool:
        """Constant-time comparison for login."""
        return self._context.verify(plain, hashed)

    def dummy_verify(self) -> None:
        """Spend a verify's worth of time when there is no stored hash to check."""
        self._context.dummy_verify()


class JWTAuthProvider:
    """Issues and verifies stateless bearer tokens whose subject is a user id."""

    def __init__(self, secret_key: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    @property
    def ttl_seconds(self) -> int:
        return self.expire_minutes * 60

    def issue(self, subject: str | int, extra: dict[str, Any] | None = None) -> str:
        """Create JWT for authenticated user. Subject is the user id."""
        now = datetime.now(timezone.utc)
        to_encode = {
            "sub": str(subject),
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        if extra:
            to_encode.update(extra)
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> dict[str, Any] | None:
        """Decode and validate JWT. Returns payload or None if invalid or expired."""
        try:
            return jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None

    def identity(self, token: str) -> int | None:
        """User id carried by a valid token, else None."""
        payload = self.verify(token)
        if not payload or "sub" not in payload:
            return None
        try:
            return int(payload["sub"])
        except (TypeError, ValueError):
            return None


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


@lru_cache
def get_auth_provider() -> JWTAuthProvider:
    settings = get_settings()
    return JWTAuthProvider(
        secret_key=settings.secret_key,
        algorithm=settings.jwt_algorithm,
        expire_minutes=settings.jwt_expire_minutes,
    )
