"""
Repository contracts and the plain records they return.

Services depend on these abstractions only; the SQLAlchemy-backed and
in-memory implementations are interchangeable. Every product read excludes
soft-deleted rows explicitly.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any


@dataclass
class ProductRecord:
    id: int
    name: str
    description: str | None
    price: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class UserRecord:
    id: int
    name: str
    email: str
    hashed_password: str
    created_at: datetime | None = None


class ProductRepository(ABC):
    """Repository contract for products."""

    @abstractmethod
    async def get_all(
        self, search: str | None = None, per_page: int = 10, page: int = 1
    ) -> tuple[list[ProductRecord], int]:
        """One page of active products plus the total count of matches."""

    @abstractmethod
    async def find_by_id(self, id: int) -> ProductRecord | None:
        """Active product by id, or None when missing or soft-deleted."""

    @abstractmethod
    async def create(self, data: dict[str, Any]) -> ProductRecord:
        """Persist a new product."""

    @abstractmethod
    async def update(self, id: int, data: dict[str, Any]) -> ProductRecord | None:
        """Apply the given fields to an active product. None if not found."""

    @abstractmethod
    async def delete(self, id: int) -> bool:
        """Soft-delete an active product. False if not found."""


class UserRepository(ABC):
    """Repository contract for users."""

    @abstractmethod
    async def get_by_id(self, id: int) -> UserRecord | None: ...

    @abstractmethod
    async def get_by_email(self, email: str) -> UserRecord | None: ...

    @abstractmethod
    async def add(self, name: str, email: str, hashed_password: str) -> UserRecord:
        """Persist a new user.

        Raises:
            EmailAlreadyRegistered: if the email is already taken.
        """
