"""Refresh flow: exchange a refresh token for a new access token.

States of one attempt::

    received
      -> signature valid?        no  -> rejected_invalid
      -> subject active?         no  -> rejected_invalid
      -> ledger row matches?     no  -> rejected_invalid
      -> row unexpired?          no  -> row deleted, rejected_expired
      -> fingerprint consistent? no  -> all rows deleted + event, rejected_anomaly
      -> accepted (new access token)

The refresh token is not replaced on success; it stays valid until its own
expiry or until a revocation deletes its row.

Every rejection raises ``UnauthorizedError`` with the same public message.
"""
from typing import Optional

from sqlalchemy.orm import Session

from teachme.errors import INVALID_REFRESH_TOKEN, UnauthorizedError
from teachme.middleware.monitoring import record_refresh_outcome, record_sessions_revoked
from teachme.security import credentials, events, ledger
from teachme.security.events import SecurityAction
from teachme.security.fingerprint import DeviceFingerprint, fingerprints_conflict
from teachme.security.issuer import mint_access_token
from teachme.utils.jwt_utils import REFRESH, decode_token
from teachme.utils.logger import logger


class RefreshOutcome:
    ACCEPTED = "accepted"
    REJECTED_INVALID = "rejected_invalid"
    REJECTED_EXPIRED = "rejected_expired"
    REJECTED_ANOMALY = "rejected_anomaly"


def _reject(outcome: str, reason: str, account_id: Optional[str] = None) -> UnauthorizedError:
    record_refresh_outcome(outcome)
    logger.info(
        f"Refresh rejected: {reason}",
        extra={"account_id": account_id, "action": "refresh", "reason": outcome},
    )
    return UnauthorizedError(reason, INVALID_REFRESH_TOKEN)


def refresh(db: Session, raw_token: str, fingerprint: DeviceFingerprint) -> str:
    """Validate ``raw_token`` against the ledger and return a new access token.

    Raises:
        UnauthorizedError: for every rejection (bad signature, unknown or
        disabled subject, no ledger row, expired row, device mismatch).
    """
    # 1. signature and exp claim
    try:
        payload = decode_token(raw_token, REFRESH, INVALID_REFRESH_TOKEN)
    except UnauthorizedError as exc:
        raise _reject(RefreshOutcome.REJECTED_INVALID, exc.reason)
    account_id = payload["sub"]

    # 2. live account
    try:
        account = credentials.get_active_account(db, account_id, INVALID_REFRESH_TOKEN)
    except UnauthorizedError as exc:
        raise _reject(RefreshOutcome.REJECTED_INVALID, exc.reason, account_id)

    # 3. ledger scan
    record = ledger.find_match(db, account_id, raw_token)
    if record is None:
        raise _reject(RefreshOutcome.REJECTED_INVALID, "no ledger row matches token", account_id)

    # 4. ledger expiry
    if ledger.is_expired(record):
        ledger.delete_record(db, record)
        raise _reject(RefreshOutcome.REJECTED_EXPIRED, "refresh token expired", account_id)

    # 5-6. device fingerprint
    stored = ledger.record_fingerprint(record)
    if fingerprints_conflict(stored, fingerprint):
        revoked = ledger.revoke_all(db, account_id)
        record_sessions_revoked("anomaly", revoked)
        events.record(
            db,
            account_id,
            SecurityAction.SUSPICIOUS_ACTIVITY,
            "Refresh token used from a different device; all sessions revoked",
            {**stored.as_metadata("original"), **fingerprint.as_metadata("suspicious"), "revoked_count": revoked},
        )
        raise _reject(
            RefreshOutcome.REJECTED_ANOMALY,
            "suspicious activity detected, all sessions revoked",
            account_id,
        )

    # 7. accept
    access_token = mint_access_token(account)
    record_refresh_outcome(RefreshOutcome.ACCEPTED)
    logger.info(
        f"Access token refreshed for {account_id}",
        extra={"account_id": account_id, "record_id": record.record_id, "action": "refresh"},
    )
    return access_token
