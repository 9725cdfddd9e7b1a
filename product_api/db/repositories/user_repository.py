"""
User repository - encapsulates all user data access over SQLAlchemy.
"""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from product_api.core.exceptions import EmailAlreadyRegistered
from product_api.db.models.user import User
from product_api.db.repositories.base_repository import BaseRepository
from product_api.db.repositories.interfaces import UserRecord, UserRepository


def _to_record(user: User) -> UserRecord:
    return UserRecord(
        id=user.id,
        name=user.name,
        email=user.email,
        hashed_password=user.hashed_password,
        created_at=user.created_at,
    )


class SQLUserRepository(BaseRepository[User], UserRepository):
    """User queries. The unique index on email is the authority on duplicates."""

    def __init__(self, session):
        super().__init__(session, User)

    async def get_by_id(self, id: int) -> UserRecord | None:
        user = await self._get_row(id)
        return _to_record(user) if user else None

    async def get_by_email(self, email: str) -> UserRecord | None:
        """Find user by email - used for authentication."""
        result = await self.session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        return _to_record(user) if user else None

    async def add(self, name: str, email: str, hashed_password: str) -> UserRecord:
        try:
            user = await self._add(User(name=name, email=email, hashed_password=hashed_password))
        except IntegrityError as exc:
            await self.session.rollback()
            raise EmailAlreadyRegistered(email) from exc
        return _to_record(user)
