"""Security event schemas"""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import model_validator

from teachme.schemas.base import CamelModel


class SecurityEventResponse(CamelModel):
    event_id: str
    account_id: str
    action: str
    description: str
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime

    @model_validator(mode='before')
    @classmethod
    def map_event_metadata(cls, data):
        """Map event_metadata attribute to metadata field"""
        if hasattr(data, '__dict__') and hasattr(data, 'event_metadata'):
            return {
                'event_id': data.event_id,
                'account_id': data.account_id,
                'action': data.action,
                'description': data.description,
                'metadata': data.event_metadata,
                'created_at': data.created_at,
            }
        return data
