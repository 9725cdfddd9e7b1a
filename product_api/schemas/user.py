"""User/auth request and response schemas - API contract and validation."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from product_api.schemas import rules


class RegisterRequest(BaseModel):
    name: str | None = Field(default=None, validate_default=True)
    email: str | None = Field(default=None, validate_default=True)
    # Validated before password so the confirmation check can read it from info.data.
    password_confirmation: str | None = Field(default=None, validate_default=True)
    password: str | None = Field(default=None, validate_default=True)

    @field_validator("name", mode="before")
    @classmethod
    def check_name(cls, value: Any) -> str:
        rules.required(value, "The name field is required.")
        return rules.string(
            value,
            "The name field must be a string.",
            max_length=255,
            too_long="The name field must not be greater than 255 characters.",
        )

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        rules.required(value, "The email field is required.")
        value = rules.email(value, "The email field must be a valid email address.")
        return rules.string(
            value,
            "The email field must be a string.",
            max_length=255,
            too_long="The email field must not be greater than 255 characters.",
        )

    @field_validator("password_confirmation", mode="before")
    @classmethod
    def check_confirmation(cls, value: Any) -> str | None:
        return value if isinstance(value, str) else None

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any, info: ValidationInfo) -> str:
        rules.required(value, "The password field is required.")
        rules.string(value, "The password field must be a string.")
        rules.min_length(value, 8, "The password field must be at least 8 characters.")
        if info.data.get("password_confirmation") != value:
            raise PydanticCustomError("confirmed", "The password field confirmation does not match.")
        return value


class LoginRequest(BaseModel):
    email: str | None = Field(default=None, validate_default=True)
    password: str | None = Field(default=None, validate_default=True)

    @field_validator("email", mode="before")
    @classmethod
    def check_email(cls, value: Any) -> str:
        rules.required(value, "The email field is required.")
        return rules.email(value, "The email field must be a valid email address.")

    @field_validator("password", mode="before")
    @classmethod
    def check_password(cls, value: Any) -> str:
        rules.required(value, "The password field is required.")
        rules.string(value, "The password field must be a string.")
        return rules.min_length(value, 6, "The password field must be at least 6 characters.")


class UserResponse(BaseModel):
    """Public projection of a user. The password hash is never part of it."""

    id: int
    name: str
    email: str
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    user: UserResponse
