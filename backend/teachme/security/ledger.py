"""Refresh-token ledger.

One row per issued refresh token. The raw token is never stored: rows hold
``bcrypt(sha256_hex(token))``. bcrypt only reads the first 72 bytes of its
input and refresh JWTs for one account share a longer common prefix, so
the token is digested first.

Because the stored value is salted, a token cannot be used as a lookup
key; ``find_match`` scans the owning account's rows. That is linear in the
number of devices the account is signed in on.
"""
import hashlib
from datetime import datetime
from typing import List, Optional

import bcrypt
from sqlalchemy.orm import Session

from teachme.config import settings
from teachme.models.base import utcnow
from teachme.models.refresh_token import RefreshTokenRecord
from teachme.security.fingerprint import DeviceFingerprint
from teachme.utils.logger import logger


def _digest(raw_token: str) -> bytes:
    return hashlib.sha256(raw_token.encode()).hexdigest().encode()


def hash_token(raw_token: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.TOKEN_HASH_ROUNDS)
    return bcrypt.hashpw(_digest(raw_token), salt).decode()


def token_matches(raw_token: str, token_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_digest(raw_token), token_hash.encode())
    except ValueError:
        return False


def record_fingerprint(record: RefreshTokenRecord) -> DeviceFingerprint:
    return DeviceFingerprint(user_agent=record.user_agent, ip_address=record.ip_address)


def is_expired(record: RefreshTokenRecord, now: Optional[datetime] = None) -> bool:
    return record.expires_at <= (now or utcnow())


def store(
    db: Session,
    account_id: str,
    raw_token: str,
    fingerprint: DeviceFingerprint,
    expires_at: datetime,
) -> RefreshTokenRecord:
    """Insert the hashed row for a freshly issued refresh token"""
    record = RefreshTokenRecord(
        account_id=account_id,
        token_hash=hash_token(raw_token),
        expires_at=expires_at,
        user_agent=fingerprint.user_agent,
        ip_address=fingerprint.ip_address,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def records_for(db: Session, account_id: str) -> List[RefreshTokenRecord]:
    """All rows of an account, newest first (most recent device is the likeliest match)"""
    return (
        db.query(RefreshTokenRecord)
        .filter(RefreshTokenRecord.account_id == account_id)
        .order_by(RefreshTokenRecord.created_at.desc(), RefreshTokenRecord.id.desc())
        .all()
    )


def find_match(db: Session, account_id: str, raw_token: str) -> Optional[RefreshTokenRecord]:
    """Return the row whose hash verifies against ``raw_token``, or None"""
    for record in records_for(db, account_id):
        if token_matches(raw_token, record.token_hash):
            return record
    return None


def delete_record(db: Session, record: RefreshTokenRecord) -> None:
    db.delete(record)
    db.commit()


def revoke_all(db: Session, account_id: str) -> int:
    """Delete every row of the account in one statement.

    Idempotent: deleting zero rows is a success and returns 0.
    """
    deleted = (
        db.query(RefreshTokenRecord)
        .filter(RefreshTokenRecord.account_id == account_id)
        .delete(synchronize_session=False)
    )
    db.commit()

    logger.info(
        f"Revoked {deleted} refresh token(s) for {account_id}",
        extra={"account_id": account_id, "action": "revoke_all"},
    )
    return deleted


def purge_expired(db: Session, account_id: Optional[str] = None) -> int:
    """Delete rows past their expiry, for one account or for all"""
    query = db.query(RefreshTokenRecord).filter(RefreshTokenRecord.expires_at <= utcnow())
    if account_id:
        query = query.filter(RefreshTokenRecord.account_id == account_id)
    deleted = query.delete(synchronize_session=False)
    db.commit()
    return deleted


def count_active(db: Session, account_id: Optional[str] = None) -> int:
    """Number of unexpired rows, i.e. signed-in devices"""
    query = db.query(RefreshTokenRecord).filter(RefreshTokenRecord.expires_at > utcnow())
    if account_id:
        query = query.filter(RefreshTokenRecord.account_id == account_id)
    return query.count()
