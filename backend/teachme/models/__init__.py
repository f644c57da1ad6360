"""Database models"""
from teachme.models.account import Account
from teachme.models.refresh_token import RefreshTokenRecord
from teachme.models.security_event import SecurityEvent

__all__ = ["Account", "RefreshTokenRecord", "SecurityEvent"]
