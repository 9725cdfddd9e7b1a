"""
Product model - the single managed resource. Soft-deleted via deleted_at.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, String, Text, Numeric, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from product_api.db.base import Base


class Product(Base):
    """Product entity. Rows are never physically removed by the API."""

    __tablename__ = "products"
    __table_args__ = (CheckConstraint("price >= 0", name="ck_products_price_non_negative"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True, index=True)

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.name})>"
