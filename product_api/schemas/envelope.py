"""Uniform response envelope shared by every endpoint."""

import math
from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: T | None = None


class ErrorResponse(BaseModel):
    """Error envelope. `errors` is only present for validation failures."""

    success: bool = False
    message: str
    errors: dict[str, list[str]] | None = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)


class Page(BaseModel, Generic[T]):
    data: list[T]
    current_page: int
    last_page: int
    per_page: int
    total: int

    @classmethod
    def build(cls, items: list[T], total: int, page: int, per_page: int) -> "Page[T]":
        """Assemble a page; last_page never drops below 1."""
        return cls(
            data=items,
            current_page=page,
            last_page=max(math.ceil(total / per_page), 1),
            per_page=per_page,
            total=total,
        )
