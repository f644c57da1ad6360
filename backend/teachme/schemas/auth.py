"""Auth request/response schemas"""
from typing import List, Optional

from pydantic import Field, field_validator

from teachme.config import settings
from teachme.schemas.account import AccountResponse
from teachme.schemas.base import CamelModel


def _validate_password(value: str) -> str:
    if len(value) < settings.PASSWORD_MIN_LENGTH:
        raise ValueError(f"must be at least {settings.PASSWORD_MIN_LENGTH} characters")
    if len(value.encode()) > 72:
        raise ValueError("must be at most 72 bytes")
    return value


class RegisterRequest(CamelModel):
    name: str = Field(..., max_length=255, description="Username (unique, used for login)")
    password: str = Field(..., description="Password")
    preferred_topics: Optional[List[str]] = Field(None, description="Preferred topic ids")

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _validate_password(value)


class RegisterResponse(CamelModel):
    message: str
    user: AccountResponse


class LoginRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int   # access token lifetime, seconds
    user: AccountResponse


class RefreshRequest(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class AccessTokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, value: str) -> str:
        return _validate_password(value)


class MessageResponse(CamelModel):
    message: str


class RevokeSessionsResponse(CamelModel):
    message: str
    revoked_sessions: int
