# Repository pattern: services depend on the contracts, not on SQLAlchemy

from product_api.db.repositories.interfaces import (
    ProductRecord,
    ProductRepository,
    UserRecord,
    UserRepository,
)
from product_api.db.repositories.memory import InMemoryProductRepository, InMemoryUserRepository
from product_api.db.repositories.product_repository import SQLProductRepository
from product_api.db.repositories.user_repository import SQLUserRepository

__all__ = [
    "ProductRecord",
    "ProductRepository",
    "UserRecord",
    "UserRepository",
    "SQLProductRepository",
    "SQLUserRepository",
    "InMemoryProductRepository",
    "InMemoryUserRepository",
]
