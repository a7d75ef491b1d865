from __future__ import annotations

from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from usermgmt.domain.users.entities import User

DEFAULT_PASSWORD_MIN_LENGTH = 6


def _check_email(value: str) -> str:
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as exc:
        raise PydanticCustomError(
            "email_invalid",
            "Email address is not valid: {reason}",
            {"reason": str(exc)},
        ) from exc
    # Stored exactly as given; lookups are case-sensitive.
    return value


class RegisterRequestDTO(BaseModel):
    name: str = Field(min_length=1, max_length=128)
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("missing", "Name cannot be empty", {})
        return value

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, value: str, info: ValidationInfo) -> str:
        context = info.context or {}
        min_length = context.get("password_min_length", DEFAULT_PASSWORD_MIN_LENGTH)
        if len(value) < min_length:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters long",
                {"min_length": min_length},
            )
        return value


class LoginRequestDTO(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    password: str = Field(min_length=1, max_length=128)  # No length policy on login

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        return _check_email(value)


class UserResponseDTO(BaseModel):
    id: int
    name: str
    email: str
    created_at: datetime

    @classmethod
    def from_entity(cls, user: User) -> UserResponseDTO:
        return cls(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


class LoginResponseDTO(BaseModel):
    token: str


class LogoutResponseDTO(BaseModel):
    message: str
