"""Authentication endpoints: register, login, refresh, logout, password and sessions"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from teachme.api.deps import get_current_account, get_fingerprint
from teachme.config import settings
from teachme.database import get_db
from teachme.middleware.rate_limit import auth_rate_limit, limiter
from teachme.models.account import Account
from teachme.schemas.account import AccountResponse
from teachme.schemas.auth import (
    AccessTokenResponse,
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    RevokeSessionsResponse,
)
from teachme.security import credentials, issuer, rotation, sessions
from teachme.utils.logger import logger

router = APIRouter(prefix="/auth", tags=["auth"])


# ---------------------------------------------------------------------------
# POST /auth/register
# ---------------------------------------------------------------------------

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_rate_limit)
def register(
    request: Request,
    data: RegisterRequest,
    db: Session = Depends(get_db),
) -> RegisterResponse:
    """Create a user account.

    No tokens are returned; call `POST /auth/login` afterwards.
    Returns 409 when the name is taken.
    """
    account = credentials.register(db, data.name, data.password, data.preferred_topics)
    return RegisterResponse(
        message="User registered successfully",
        user=AccountResponse.model_validate(account),
    )


# ---------------------------------------------------------------------------
# POST /auth/login
# ---------------------------------------------------------------------------

@router.post("/login", response_model=LoginResponse)
@limiter.limit(auth_rate_limit)
def login(
    request: Request,
    data: LoginRequest,
    db: Session = Depends(get_db),
) -> LoginResponse:
    """Exchange name + password for an access/refresh token pair.

    The refresh token is bound to the caller's `User-Agent` and IP address;
    presenting it later from a different device revokes every session of
    the account.
    """
    account = credentials.verify_credentials(db, data.name, data.password)
    tokens = issuer.issue(db, account, get_fingerprint(request))

    logger.info(f"User logged in: {account.name}", extra={"account_id": account.account_id, "action": "login"})

    return LoginResponse(
        access_token=tokens.access_token,
        refresh_token=tokens.refresh_token,
        expires_in=tokens.expires_in,
        user=AccountResponse.model_validate(account),
    )


# ---------------------------------------------------------------------------
# POST /auth/refresh
# ---------------------------------------------------------------------------

@router.post("/refresh", response_model=AccessTokenResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(auth_rate_limit)
def refresh(
    request: Request,
    data: RefreshRequest,
    db: Session = Depends(get_db),
) -> AccessTokenResponse:
    """Get a new access token using a valid refresh token.

    The refresh token itself is unchanged and stays valid until it expires
    or is revoked. Every failure returns the same 401 body.
    """
    access_token = rotation.refresh(db, data.refresh_token, get_fingerprint(request))
    return AccessTokenResponse(access_token=access_token, expires_in=settings.ACCESS_TOKEN_EXPIRE_SECONDS)


# ---------------------------------------------------------------------------
# Authenticated endpoints
# ---------------------------------------------------------------------------

@router.get("/me", response_model=AccountResponse)
def me(account: Account = Depends(get_current_account)) -> AccountResponse:
    """Current user profile"""
    return AccountResponse.model_validate(account)


@router.post("/logout", response_model=MessageResponse)
def logout(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Invalidate all of the user's refresh tokens. Idempotent."""
    sessions.logout(db, account)
    logger.info(f"User logged out: {account.account_id}", extra={"account_id": account.account_id, "action": "logout"})
    return MessageResponse(message="Logged out successfully")


@router.patch("/change-password", response_model=RevokeSessionsResponse)
def change_password(
    data: ChangePasswordRequest,
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> RevokeSessionsResponse:
    """Change password. All active sessions are invalidated."""
    revoked = credentials.change_password(db, account, data.current_password, data.new_password)
    return RevokeSessionsResponse(message="Password changed successfully", revoked_sessions=revoked)


@router.delete("/sessions/all", response_model=RevokeSessionsResponse)
def revoke_all_sessions(
    account: Account = Depends(get_current_account),
    db: Session = Depends(get_db),
) -> RevokeSessionsResponse:
    """Log out from all devices by invalidating all refresh tokens"""
    revoked = sessions.revoke_all_sessions(db, account)
    return RevokeSessionsResponse(message="All sessions revoked successfully", revoked_sessions=revoked)
