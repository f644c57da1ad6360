"""bcrypt helpers for account passwords"""
from functools import lru_cache

import bcrypt

from teachme.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt at the configured cost factor"""
    salt = bcrypt.gensalt(rounds=settings.PASSWORD_HASH_ROUNDS)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Return True if ``password`` matches the stored bcrypt hash"""
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed hash or password longer than bcrypt accepts
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("teachme-timing-equaliser")


def burn_verification(password: str) -> None:
    """Spend one bcrypt verification so unknown names cost the same as bad passwords"""
    verify_password(password, _dummy_hash())
