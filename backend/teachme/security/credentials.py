"""Credential store: accounts, password verification and password changes"""
import secrets
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from teachme.config import settings
from teachme.errors import (
    INVALID_ACCESS_TOKEN,
    INVALID_CREDENTIALS,
    ConflictError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from teachme.middleware.monitoring import record_sessions_revoked
from teachme.models.account import Account
from teachme.security import events, ledger
from teachme.security.events import SecurityAction
from teachme.utils.logger import logger
from teachme.utils.passwords import burn_verification, hash_password, verify_password

ROLES = ("user", "admin")
NAME_MAX_LENGTH = 255


def generate_account_id() -> str:
    """Generate a unique account ID"""
    return f"{settings.ACCOUNT_ID_PREFIX}{secrets.token_urlsafe(12)}"


def check_password(password: str) -> None:
    """Raise ValidationError unless the password fits the length policy"""
    if len(password) < settings.PASSWORD_MIN_LENGTH:
        raise ValidationError(
            f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters",
            details=[{"field": "password", "msg": "too short"}],
        )
    if len(password.encode()) > 72:
        raise ValidationError(
            "Password must be at most 72 bytes",
            details=[{"field": "password", "msg": "too long"}],
        )


def get_by_name(db: Session, name: str) -> Optional[Account]:
    return db.query(Account).filter(Account.name == name.strip()).first()


def register(
    db: Session,
    name: str,
    password: str,
    preferred_topics: Optional[Iterable[str]] = None,
    role: str = "user",
) -> Account:
    """Create an account. No tokens are issued here; that is a separate login.

    Raises:
        ValidationError: empty or overlong name, bad password length or unknown role.
        ConflictError:   the name is taken.
    """
    name = name.strip()
    if not name:
        raise ValidationError("Name must not be empty", details=[{"field": "name", "msg": "empty"}])
    if len(name) > NAME_MAX_LENGTH:
        raise ValidationError(
            f"Name must be at most {NAME_MAX_LENGTH} characters",
            details=[{"field": "name", "msg": "too long"}],
        )
    check_password(password)
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    if get_by_name(db, name):
        raise ConflictError("User with this name already exists")

    account = Account(
        account_id=generate_account_id(),
        name=name,
        password_hash=hash_password(password),
        role=role,
        preferred_topics=list(preferred_topics or []),
        is_active=True,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration of the same name
        db.rollback()
        raise ConflictError("User with this name already exists")
    db.refresh(account)

    logger.info(f"Account registered: {account.name}", extra={"account_id": account.account_id, "action": "register"})
    return account


def verify_credentials(db: Session, name: str, password: str) -> Account:
    """Return the account if ``name``/``password`` identify an active account.

    Unknown name, inactive account and wrong password all raise the same
    UnauthorizedError; only the logged reason differs.
    """
    account = get_by_name(db, name)
    if account is None:
        burn_verification(password)
        raise UnauthorizedError(f"no account named {name!r}", INVALID_CREDENTIALS)

    if not verify_password(password, account.password_hash):
        raise UnauthorizedError(f"wrong password for {account.account_id}", INVALID_CREDENTIALS)

    if not account.is_active:
        raise UnauthorizedError(f"account {account.account_id} is disabled", INVALID_CREDENTIALS)

    return account


def get_account(db: Session, account_id: str) -> Account:
    """Look up an account by id regardless of state.

    Raises:
        NotFoundError: no such account.
    """
    account = db.query(Account).filter(Account.account_id == account_id).first()
    if account is None:
        raise NotFoundError(f"Account {account_id} not found")
    return account


def get_active_account(db: Session, account_id: str, message: str = INVALID_ACCESS_TOKEN) -> Account:
    """Resolve a token subject to a live, active account or fail with 401"""
    account = db.query(Account).filter(Account.account_id == account_id).first()
    if account is None:
        raise UnauthorizedError(f"subject {account_id} no longer exists", message)
    if not account.is_active:
        raise UnauthorizedError(f"subject {account_id} is disabled", message)
    return account


def set_password(db: Session, account: Account, new_password: str) -> int:
    """Replace the password hash, then revoke every session.

    The hash is committed before revocation runs; a failed revocation
    leaves old sessions valid under the new password.

    Returns:
        Number of refresh tokens revoked.
    """
    check_password(new_password)
    account.password_hash = hash_password(new_password)
    db.commit()

    revoked = ledger.revoke_all(db, account.account_id)
    record_sessions_revoked("password_change", revoked)
    return revoked


def change_password(db: Session, account: Account, current_password: str, new_password: str) -> int:
    """Change the password of an authenticated account.

    Raises:
        UnauthorizedError: ``current_password`` does not verify.

    Returns:
        Number of refresh tokens revoked.
    """
    if not verify_password(current_password, account.password_hash):
        raise UnauthorizedError(f"current password mismatch for {account.account_id}", INVALID_CREDENTIALS)

    revoked = set_password(db, account, new_password)
    events.record(
        db,
        account.account_id,
        SecurityAction.PASSWORD_CHANGED,
        "Password changed; all sessions revoked",
        {"revoked_count": revoked},
    )
    return revoked


def set_account_state(
    db: Session,
    account_id: str,
    is_active: Optional[bool] = None,
    role: Optional[str] = None,
) -> Account:
    """Update role and/or active flag (admin operation).

    Deactivating an account also revokes all of its sessions.
    """
    account = get_account(db, account_id)

    if role is not None:
        if role not in ROLES:
            raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")
        account.role = role

    deactivated = is_active is False and account.is_active
    if is_active is not None:
        account.is_active = is_active

    db.commit()

    if deactivated:
        revoked = ledger.revoke_all(db, account_id)
        record_sessions_revoked("deactivation", revoked)

    db.refresh(account)
    logger.info(
        f"Account updated: {account_id} (role={account.role}, active={account.is_active})",
        extra={"account_id": account_id, "action": "update_account"},
    )
    return account
