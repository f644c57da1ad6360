"""Rate limiting for the unauthenticated auth endpoints"""
import ipaddress
from typing import Optional

from fastapi import Request
from slowapi import Limiter

from teachme.config import settings


# Longest textual IPv6 form
_MAX_IP_LENGTH = 45


def _parse_ip(value: str) -> Optional[str]:
    if len(value) > _MAX_IP_LENGTH:
        return None
    try:
        return str(ipaddress.ip_address(value))
    except ValueError:
        return None


def client_ip(request: Request) -> Optional[str]:
    """Caller address, taken from X-Forwarded-For only when proxy headers are trusted.

    A forwarded entry that is not a valid IP address is ignored and the
    socket peer is used instead.
    """
    if settings.TRUST_PROXY_HEADERS:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            address = _parse_ip(forwarded.split(",")[0].strip())
            if address:
                return address
    return request.client.host if request.client else None


def get_identifier(request: Request) -> str:
    """Rate-limit key: the caller's address"""
    return client_ip(request) or "unknown"


# Create limiter instance
limiter = Limiter(
    key_func=get_identifier,
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
    strategy="fixed-window",
    enabled=settings.RATE_LIMIT_ENABLED,
)


def auth_rate_limit() -> str:
    """Limit string applied to register / login / refresh"""
    return settings.RATE_LIMIT_AUTH
