"""Token issuer: mints access/refresh pairs and records the refresh token"""
from datetime import timedelta
from typing import NamedTuple

from sqlalchemy.orm import Session

from teachme.config import settings
from teachme.middleware.monitoring import record_tokens_issued
from teachme.models.account import Account
from teachme.models.base import utcnow
from teachme.security import ledger
from teachme.security.fingerprint import DeviceFingerprint
from teachme.utils.jwt_utils import create_access_token, create_refresh_token
from teachme.utils.logger import logger


class IssuedTokens(NamedTuple):
    access_token: str
    refresh_token: str
    expires_in: int   # access token lifetime, seconds


def mint_access_token(account: Account) -> str:
    """Access token whose claims come from the account as it is right now"""
    return create_access_token(subject=account.account_id, name=account.name, role=account.role)


def issue(db: Session, account: Account, fingerprint: DeviceFingerprint) -> IssuedTokens:
    """Mint a token pair and write one ledger row bound to ``fingerprint``.

    Each call creates an independent row, so an account signed in on
    several devices holds several valid refresh tokens at once.
    """
    # Drop this account's stale rows before adding a new one
    ledger.purge_expired(db, account.account_id)

    access_token = mint_access_token(account)
    refresh_token = create_refresh_token(subject=account.account_id)

    expires_at = utcnow() + timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS)
    record = ledger.store(db, account.account_id, refresh_token, fingerprint, expires_at)

    record_tokens_issued()
    logger.info(
        f"Issued token pair for {account.account_id}",
        extra={"account_id": account.account_id, "record_id": record.record_id, "action": "issue_token"},
    )

    return IssuedTokens(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS,
    )
