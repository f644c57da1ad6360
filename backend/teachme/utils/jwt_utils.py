"""JWT utilities: HMAC token signing and verification"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from teachme.config import settings
from teachme.errors import INVALID_ACCESS_TOKEN, UnauthorizedError
from teachme.utils.logger import logger

ACCESS = "access"
REFRESH = "refresh"


# ---------------------------------------------------------------------------
# Token creation
# ---------------------------------------------------------------------------

def create_token(subject: str, token_type: str, extra_claims: Dict[str, Any]) -> str:
    """Sign and return a JWT.

    Args:
        subject:      Value for the 'sub' claim (account_id).
        token_type:   'access' or 'refresh', stored as the 'type' claim so
                      one kind can never be presented as the other.
        extra_claims: Additional claims to embed (name, role).

    Returns:
        Signed JWT string. Every token carries a fresh ``jti`` so two tokens
        minted in the same second for the same subject still differ.
    """
    expire_seconds = (
        settings.ACCESS_TOKEN_EXPIRE_SECONDS
        if token_type == ACCESS
        else settings.REFRESH_TOKEN_EXPIRE_SECONDS
    )

    now = int(datetime.now(timezone.utc).timestamp())

    payload: Dict[str, Any] = {
        "sub": subject,
        "jti": str(uuid.uuid4()),
        "iat": now,
        "exp": now + expire_seconds,
        "type": token_type,
        **extra_claims,
    }

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_access_token(subject: str, name: str, role: str) -> str:
    return create_token(subject, ACCESS, {"name": name, "role": role})


def create_refresh_token(subject: str) -> str:
    return create_token(subject, REFRESH, {})


# ---------------------------------------------------------------------------
# Token verification
# ---------------------------------------------------------------------------

def decode_token(token: str, expected_type: str, message: str = INVALID_ACCESS_TOKEN) -> Dict[str, Any]:
    """Verify signature, expiry and token type; return the payload.

    Raises:
        UnauthorizedError: on any verification failure. ``message`` is the
        public text; the jose error is kept as the internal reason.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as exc:
        logger.debug(f"JWT decode failed: {exc}")
        raise UnauthorizedError(f"{expected_type} token signature/expiry invalid: {exc}", message)

    if payload.get("type") != expected_type:
        raise UnauthorizedError(f"expected {expected_type} token, got {payload.get('type')!r}", message)

    if not payload.get("sub"):
        raise UnauthorizedError("token has no subject", message)

    return payload
