"""SecurityEvent model: append-only record of flagged incidents"""
from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from teachme.database import Base
from teachme.models.base import generate_uuid_string, utcnow


class SecurityEvent(Base):
    """SecurityEvent model - rows are inserted, never updated or deleted"""

    __tablename__ = "security_events"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(String(36), default=generate_uuid_string, unique=True, nullable=False, index=True)
    account_id = Column(
        String(50), ForeignKey("accounts.account_id", ondelete="CASCADE"), nullable=False, index=True
    )
    action = Column(String(50), nullable=False, index=True)  # suspicious_activity, all_tokens_revoked, password_changed
    description = Column(Text, nullable=False)
    event_metadata = Column("metadata", JSON, nullable=True)  # Column name is 'metadata', attribute is 'event_metadata'
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    account = relationship("Account", back_populates="security_events")
