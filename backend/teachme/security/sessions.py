"""Bulk session revocation for logout and sign-out-everywhere"""
from sqlalchemy.orm import Session

from teachme.middleware.monitoring import record_sessions_revoked
from teachme.models.account import Account
from teachme.security import events, ledger
from teachme.security.events import SecurityAction


def logout(db: Session, account: Account) -> int:
    """Revoke every refresh token of the account. Idempotent."""
    revoked = ledger.revoke_all(db, account.account_id)
    record_sessions_revoked("logout", revoked)
    return revoked


def revoke_all_sessions(db: Session, account: Account) -> int:
    """Revoke every refresh token and append an ``all_tokens_revoked`` event"""
    revoked = ledger.revoke_all(db, account.account_id)
    record_sessions_revoked("revoke_all", revoked)
    events.record(
        db,
        account.account_id,
        SecurityAction.ALL_TOKENS_REVOKED,
        f"User revoked all sessions ({revoked} active)",
        {"revoked_count": revoked},
    )
    return revoked
