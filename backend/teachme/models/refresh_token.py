"""RefreshTokenRecord model: the refresh-token ledger"""
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from teachme.database import Base
from teachme.models.base import generate_uuid_string, utcnow


class RefreshTokenRecord(Base):
    """One row per issued refresh token.

    Only a bcrypt hash of the token is stored, so rows cannot be looked up
    by token value; refresh scans every row of the owning account.
    ``user_agent`` / ``ip_address`` are the device fingerprint captured at
    issuance and may be absent.
    """

    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, index=True)
    record_id = Column(String(36), default=generate_uuid_string, unique=True, nullable=False, index=True)
    account_id = Column(
        String(50), ForeignKey("accounts.account_id", ondelete="CASCADE"), nullable=False, index=True
    )
    token_hash = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    user_agent = Column(Text, nullable=True)
    ip_address = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    account = relationship("Account", back_populates="refresh_tokens")
