"""Account model: login identity owned by the credential store"""
from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from teachme.database import Base
from teachme.models.base import utcnow


class Account(Base):
    """A user account.

    ``password_hash`` is a bcrypt hash and never leaves the service.
    Accounts are deactivated through ``is_active``; this service never
    deletes them.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String(50), unique=True, nullable=False, index=True)   # "acc_xxx"
    name = Column(String(255), unique=True, nullable=False, index=True)        # login name
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False, index=True)      # user | admin
    preferred_topics = Column(JSON, default=list, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Relationships
    refresh_tokens = relationship(
        "RefreshTokenRecord", back_populates="account", cascade="all, delete-orphan"
    )
    security_events = relationship(
        "SecurityEvent", back_populates="account", cascade="all, delete-orphan"
    )
