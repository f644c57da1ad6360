"""Monitoring and observability middleware"""
import time
from typing import Callable

from fastapi import Request, Response
from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from teachme.utils.logger import logger


# ===== Prometheus Metrics =====

# Request metrics
http_requests_total = Counter(
    "teachme_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "teachme_http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint"]
)

# Auth metrics
tokens_issued_total = Counter(
    "teachme_tokens_issued_total",
    "Access/refresh token pairs issued at login"
)

refresh_total = Counter(
    "teachme_refresh_total",
    "Refresh attempts by outcome",
    ["outcome"]  # accepted, rejected_invalid, rejected_expired, rejected_anomaly
)

sessions_revoked_total = Counter(
    "teachme_sessions_revoked_total",
    "Refresh-token ledger rows deleted by bulk revocation",
    ["trigger"]  # logout, password_change, revoke_all, anomaly, deactivation
)

authentication_failures_total = Counter(
    "teachme_auth_failures_total",
    "Total authentication failures",
    ["kind"]  # unauthorized, forbidden
)


class MonitoringMiddleware(BaseHTTPMiddleware):
    """Middleware for monitoring and metrics collection"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and collect metrics"""
        start_time = time.time()

        method = request.method
        endpoint = request.url.path

        # Add request ID for tracing
        request_id = request.headers.get("x-request-id", f"req_{int(time.time() * 1000)}")
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                f"Request failed: {method} {endpoint}",
                extra={"request_id": request_id, "method": method, "path": endpoint},
                exc_info=True
            )
            raise

        duration = time.time() - start_time
        http_requests_total.labels(method=method, endpoint=endpoint, status=response.status_code).inc()
        http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)

        # bcrypt work makes auth endpoints slower than most; flag real outliers only
        if duration > 2.0:
            logger.warning(
                f"Slow request detected: {method} {endpoint}",
                extra={"request_id": request_id, "method": method, "path": endpoint}
            )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration:.3f}s"
        return response


def record_tokens_issued():
    tokens_issued_total.inc()


def record_refresh_outcome(outcome: str):
    """Record the terminal state of one refresh attempt"""
    refresh_total.labels(outcome=outcome).inc()


def record_sessions_revoked(trigger: str, count: int):
    if count:
        sessions_revoked_total.labels(trigger=trigger).inc(count)


def record_auth_failure(kind: str):
    """Record authentication failure"""
    authentication_failures_total.labels(kind=kind).inc()
