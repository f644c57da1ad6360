"""Tests for rate limiting on the unauthenticated auth endpoints"""
import pytest
from fastapi.testclient import TestClient

from teachme.config import settings
from teachme.middleware.rate_limit import client_ip, limiter


@pytest.fixture
def rate_limited(monkeypatch):
    """Turn the limiter on with a tiny budget for the duration of a test"""
    monkeypatch.setattr(settings, "RATE_LIMIT_AUTH", "2/minute")
    limiter.reset()
    limiter.enabled = True
    try:
        yield limiter
    finally:
        limiter.enabled = False
        limiter.reset()


def test_login_is_rate_limited(client: TestClient, rate_limited):
    payload = {"name": "nobody", "password": "whatever"}

    assert client.post("/auth/login", json=payload).status_code == 401
    assert client.post("/auth/login", json=payload).status_code == 401

    response = client.post("/auth/login", json=payload)
    assert response.status_code == 429
    assert response.json()["error"] == "rate_limit_exceeded"


def test_limits_are_per_client_address(client: TestClient, rate_limited, trust_proxy, device_headers):
    payload = {"refreshToken": "garbage"}
    first = device_headers(ip="198.51.100.1")
    second = device_headers(ip="198.51.100.2")

    for _ in range(2):
        assert client.post("/auth/refresh", json=payload, headers=first).status_code == 401
    assert client.post("/auth/refresh", json=payload, headers=first).status_code == 429

    assert client.post("/auth/refresh", json=payload, headers=second).status_code == 401


def test_authenticated_endpoints_are_not_limited(client: TestClient, rate_limited):
    for _ in range(4):
        assert client.get("/auth/me").status_code == 401


def test_client_ip_ignores_forwarded_header_by_default():
    class _Request:
        headers = {"x-forwarded-for": "192.0.2.1, 10.0.0.1"}
        client = type("Address", (), {"host": "10.0.0.1"})()

    assert client_ip(_Request()) == "10.0.0.1"


def test_client_ip_uses_first_forwarded_address(trust_proxy):
    class _Request:
        headers = {"x-forwarded-for": "192.0.2.1, 10.0.0.1"}
        client = type("Address", (), {"host": "10.0.0.1"})()

    assert client_ip(_Request()) == "192.0.2.1"


@pytest.mark.parametrize("forwarded", ["not-an-ip", "1" * 100, "203.0.113.10x"])
def test_client_ip_falls_back_on_invalid_forwarded_address(trust_proxy, forwarded):
    class _Request:
        headers = {"x-forwarded-for": forwarded}
        client = type("Address", (), {"host": "10.0.0.1"})()

    assert client_ip(_Request()) == "10.0.0.1"


def test_login_with_oversized_forwarded_address(client: TestClient, register, trust_proxy, db):
    from teachme.models.refresh_token import RefreshTokenRecord

    register()
    response = client.post(
        "/auth/login",
        json={"name": "alice", "password": "secret1"},
        headers={"X-Forwarded-For": "x" * 200},
    )
    assert response.status_code == 200

    record = db.query(RefreshTokenRecord).one()
    assert record.ip_address == "testclient"
