"""Account schemas"""
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import model_validator

from teachme.schemas.base import CamelModel


class AccountResponse(CamelModel):
    """Sanitized account projection; the password hash is never included"""

    id: str
    name: str
    role: str
    preferred_topics: List[str] = []
    is_active: bool
    created_at: datetime

    @model_validator(mode='before')
    @classmethod
    def map_account(cls, data):
        """Expose ``account_id`` as ``id`` (the integer PK stays internal)"""
        if hasattr(data, '__dict__') and hasattr(data, 'account_id'):
            return {
                'id': data.account_id,
                'name': data.name,
                'role': data.role,
                'preferred_topics': data.preferred_topics or [],
                'is_active': data.is_active,
                'created_at': data.created_at,
            }
        return data


class AccountUpdate(CamelModel):
    is_active: Optional[bool] = None
    role: Optional[Literal["user", "admin"]] = None
