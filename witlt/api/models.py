"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
JSON field names are camelCase on the wire.
"""

import re
from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from witlt.domain.models import User

T = TypeVar("T")

EMAIL_MAX_LENGTH = 255

_LETTER = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"\d")


class ApiModel(BaseModel):
    """Base model serializing field names as camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_email_length(value: str) -> str:
    if len(value) > EMAIL_MAX_LENGTH:
        raise ValueError(f"email must be at most {EMAIL_MAX_LENGTH} characters")
    return value


class SendCodeRequest(ApiModel):
    """Request model for starting a registration."""

    email: EmailStr
    password: str = Field(
        ...,
        min_length=8,
        max_length=32,
        description="User password (8-32 characters, at least one letter and one digit)",
    )
    nickname: str = Field(..., min_length=1, max_length=10, description="Display name")

    @field_validator("email")
    @classmethod
    def email_length(cls, value: str) -> str:
        return _check_email_length(value)

    @field_validator("password")
    @classmethod
    def password_letters_and_digits(cls, value: str) -> str:
        if not _LETTER.search(value) or not _DIGIT.search(value):
            raise ValueError("password must contain a letter and a digit")
        return value


class ResendCodeRequest(ApiModel):
    """Request model for resending a verification code."""

    email: EmailStr

    @field_validator("email")
    @classmethod
    def email_length(cls, value: str) -> str:
        return _check_email_length(value)


class VerifyCodeRequest(ApiModel):
    """Request model for completing a registration."""

    email: EmailStr
    code: str = Field(
        ...,
        min_length=6,
        max_length=6,
        pattern=r"^\d{6}$",
        description="6-digit verification code",
    )


class LoginRequest(ApiModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class Meta(ApiModel):
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


class SuccessResponse(ApiModel, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    data: T
    meta: Meta = Field(default_factory=Meta)


class CodeSentData(ApiModel):
    message: str
    email: str
    expires_in: int


class UserData(ApiModel):
    id: int
    email: str
    nickname: str
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserData":
        return cls(
            id=user.id,
            email=user.email,
            nickname=user.nickname,
            created_at=user.created_at.isoformat(),
        )


class ProfileData(UserData):
    updated_at: str

    @classmethod
    def from_user(cls, user: User) -> "ProfileData":
        return cls(
            id=user.id,
            email=user.email,
            nickname=user.nickname,
            created_at=user.created_at.isoformat(),
            updated_at=user.updated_at.isoformat(),
        )


class SessionData(ApiModel):
    user: UserData
    access_token: str


class ProfileEnvelope(ApiModel):
    user: ProfileData


class RefreshData(ApiModel):
    access_token: str
    refresh_token: str
    expires_in: int


class MessageData(ApiModel):
    message: str


class ErrorBody(ApiModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(ApiModel):
    """Standard error envelope."""

    success: bool = False
    error: ErrorBody
