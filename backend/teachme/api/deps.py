"""API dependencies for authentication and authorization.

Bearer access tokens only: ``Authorization: Bearer <JWT>`` where the token
carries ``type == "access"``. The subject is re-read from the database on
every request, so a deactivated account loses access immediately.

Role hierarchy (higher level → more permissions):
    admin (2) > user (1)
"""
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from teachme.database import get_db
from teachme.errors import INVALID_ACCESS_TOKEN, ForbiddenError, UnauthorizedError
from teachme.middleware.rate_limit import client_ip
from teachme.models.account import Account
from teachme.security import credentials as credential_store
from teachme.security.fingerprint import DeviceFingerprint
from teachme.utils.jwt_utils import ACCESS, decode_token

_bearer_scheme = HTTPBearer(auto_error=False)

_ROLE_HIERARCHY: dict[str, int] = {
    "admin": 2,
    "user": 1,
}


def get_current_account(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_db),
) -> Account:
    """Require a valid access token and return the live account behind it"""
    if not credentials:
        raise UnauthorizedError(
            "missing bearer token",
            "Authentication required. Provide Authorization: Bearer <token>.",
        )

    payload = decode_token(credentials.credentials, ACCESS, INVALID_ACCESS_TOKEN)
    return credential_store.get_active_account(db, payload["sub"], INVALID_ACCESS_TOKEN)


def require_role(min_role: str) -> Callable:
    """Return a FastAPI dependency that enforces a minimum role.

    Usage::

        @router.get("/admin/thing")
        def endpoint(admin: Account = Depends(require_role("admin"))):
            ...
    """
    min_level = _ROLE_HIERARCHY.get(min_role, 0)

    def _role_dep(account: Account = Depends(get_current_account)) -> Account:
        if _ROLE_HIERARCHY.get(account.role, 0) < min_level:
            raise ForbiddenError(f"Role '{min_role}' or higher required")
        return account

    # Give FastAPI a unique name so it doesn't collapse distinct dependencies
    _role_dep.__name__ = f"require_role_{min_role}"
    return _role_dep


def get_fingerprint(request: Request) -> DeviceFingerprint:
    """Device fingerprint of the current request (User-Agent header + client IP)"""
    return DeviceFingerprint(
        user_agent=request.headers.get("user-agent") or None,
        ip_address=client_ip(request),
    )
