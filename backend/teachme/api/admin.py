"""Admin endpoints: security-event review and account state"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from teachme.api.deps import require_role
from teachme.database import get_db
from teachme.models.account import Account
from teachme.schemas.account import AccountResponse, AccountUpdate
from teachme.schemas.security_event import SecurityEventResponse
from teachme.security import credentials, events

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/security-events", response_model=List[SecurityEventResponse])
def list_security_events(
    account_id: Optional[str] = Query(None, alias="accountId", description="Filter by account"),
    action: Optional[str] = Query(None, description="Filter by action"),
    limit: int = Query(100, ge=1, le=500, description="Max results"),
    db: Session = Depends(get_db),
    _: Account = Depends(require_role("admin")),
):
    """List security events, newest first (admin only)."""
    return events.list_events(db, account_id=account_id, action=action, limit=limit)


@router.get("/accounts/{account_id}/security-events", response_model=List[SecurityEventResponse])
def account_security_events(
    account_id: str,
    limit: int = Query(50, ge=1, le=500),
    db: Session = Depends(get_db),
    _: Account = Depends(require_role("admin")),
):
    """Security events of one account (admin only). 404 for an unknown account."""
    credentials.get_account(db, account_id)
    return events.list_events(db, account_id=account_id, limit=limit)


@router.patch("/accounts/{account_id}", response_model=AccountResponse)
def update_account(
    account_id: str,
    data: AccountUpdate,
    db: Session = Depends(get_db),
    _: Account = Depends(require_role("admin")),
):
    """
    Change an account's role or active flag (admin only).

    Deactivating an account revokes all of its sessions; its access tokens
    stop working on the next request.
    """
    account = credentials.set_account_state(db, account_id, is_active=data.is_active, role=data.role)
    return AccountResponse.model_validate(account)
