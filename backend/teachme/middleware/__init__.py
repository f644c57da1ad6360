"""Middleware modules for production-ready features"""
from teachme.middleware.monitoring import (
    MonitoringMiddleware,
    record_auth_failure,
    record_refresh_outcome,
    record_sessions_revoked,
    record_tokens_issued,
)
from teachme.middleware.rate_limit import limiter

__all__ = [
    "MonitoringMiddleware",
    "record_auth_failure",
    "record_refresh_outcome",
    "record_sessions_revoked",
    "record_tokens_issued",
    "limiter",
]
