"""Product request/response schemas - REST API contract."""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field, field_validator

from product_api.schemas import rules

NAME_MAX_LENGTH = 255


def _name(value: Any, required_message: str) -> str:
    rules.required(value, required_message)
    return rules.string(
        value,
        "Product name must be a string",
        max_length=NAME_MAX_LENGTH,
        too_long="Product name cannot exceed 255 characters",
    )


def _description(value: Any) -> str | None:
    if value is None:
        return None
    return rules.string(value, "Product description must be a string")


def _price(value: Any, required_message: str) -> Decimal:
    rules.required(value, required_message)
    return rules.price(value)


class ProductCreate(BaseModel):
    name: str | None = Field(default=None, validate_default=True)
    description: str | None = None
    price: Decimal | None = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        return _name(value, "Product name is required")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str | None:
        return _description(value)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value: Any) -> Decimal:
        return _price(value, "Product price is required")


class ProductUpdate(BaseModel):
    """Partial update: only supplied fields are validated and applied."""

    name: str | None = None
    description: str | None = None
    price: Decimal | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        return _name(value, "Product name cannot be empty when provided")

    @field_validator("description", mode="before")
    @classmethod
    def check_description(cls, value: Any) -> str | None:
        return _description(value)

    @field_validator("price", mode="before")
    @classmethod
    def check_price(cls, value: Any) -> Decimal:
        return _price(value, "Product price cannot be empty when provided")

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str | None = None
    price: Decimal
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
