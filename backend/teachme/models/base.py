"""Shared column helpers"""
import uuid
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def generate_uuid_string() -> str:
    """Generate UUID as string for SQLite compatibility"""
    return str(uuid.uuid4())
