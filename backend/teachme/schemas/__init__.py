"""Pydantic schemas for request/response validation"""
from teachme.schemas.account import AccountResponse, AccountUpdate
from teachme.schemas.auth import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    RevokeSessionsResponse,
)
from teachme.schemas.security_event import SecurityEventResponse

__all__ = [
    "AccountResponse",
    "AccountUpdate",
    "RegisterRequest",
    "RegisterResponse",
    "LoginRequest",
    "LoginResponse",
    "RefreshRequest",
    "AccessTokenResponse",
    "ChangePasswordRequest",
    "MessageResponse",
    "RevokeSessionsResponse",
    "SecurityEventResponse",
]
