"""Security-event sink.

Events are appended and never changed. Each append is also logged at
WARNING so operators see incidents without querying the table.
"""
from typing import List, Optional

from sqlalchemy.orm import Session

from teachme.models.security_event import SecurityEvent
from teachme.utils.logger import logger


class SecurityAction:
    SUSPICIOUS_ACTIVITY = "suspicious_activity"
    ALL_TOKENS_REVOKED = "all_tokens_revoked"
    PASSWORD_CHANGED = "password_changed"

    ALL = (SUSPICIOUS_ACTIVITY, ALL_TOKENS_REVOKED, PASSWORD_CHANGED)


def record(
    db: Session,
    account_id: str,
    action: str,
    description: str,
    metadata: Optional[dict] = None,
) -> SecurityEvent:
    """Append one event and commit it"""
    if action not in SecurityAction.ALL:
        raise ValueError(f"Unknown security action: {action}")

    event = SecurityEvent(
        account_id=account_id,
        action=action,
        description=description,
        event_metadata=metadata or {},
    )
    db.add(event)
    db.commit()
    db.refresh(event)

    logger.warning(
        f"Security event: {action} - {description}",
        extra={"account_id": account_id, "action": action},
    )
    return event


def list_events(
    db: Session,
    account_id: Optional[str] = None,
    action: Optional[str] = None,
    limit: int = 100,
) -> List[SecurityEvent]:
    """Return events newest first, optionally filtered by account and action"""
    query = db.query(SecurityEvent)
    if account_id:
        query = query.filter(SecurityEvent.account_id == account_id)
    if action:
        query = query.filter(SecurityEvent.action == action)
    return query.order_by(SecurityEvent.created_at.desc(), SecurityEvent.id.desc()).limit(limit).all()
