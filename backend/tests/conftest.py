"""Pytest configuration and fixtures"""
import os

# Must be set before any teachme import reads settings
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ["PASSWORD_HASH_ROUNDS"] = "4"
os.environ["TOKEN_HASH_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret"

from typing import Callable, Generator, Optional

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from teachme.config import settings
from teachme.database import Base, get_db
from teachme.main import app

TEST_DATABASE_URL = os.environ["DATABASE_URL"]

engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override"""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def trust_proxy(monkeypatch):
    """Take the client IP from X-Forwarded-For so tests can vary it"""
    monkeypatch.setattr(settings, "TRUST_PROXY_HEADERS", True)


@pytest.fixture
def device_headers() -> Callable[..., dict]:
    """Build request headers describing a device"""

    def _headers(user_agent: str = "Mozilla/5.0 (laptop)", ip: str = "203.0.113.10") -> dict:
        return {"User-Agent": user_agent, "X-Forwarded-For": ip}

    return _headers


@pytest.fixture
def sample_user() -> dict:
    return {"name": "alice", "password": "secret1", "preferredTopics": ["travel", "business"]}


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    def _register(name: str = "alice", password: str = "secret1", **extra) -> dict:
        response = client.post("/auth/register", json={"name": name, "password": password, **extra})
        assert response.status_code == 201, response.text
        return response.json()["user"]

    return _register


@pytest.fixture
def login(client: TestClient) -> Callable[..., dict]:
    def _login(name: str = "alice", password: str = "secret1", headers: Optional[dict] = None) -> dict:
        response = client.post("/auth/login", json={"name": name, "password": password}, headers=headers or {})
        assert response.status_code == 200, response.text
        return response.json()

    return _login


@pytest.fixture
def bearer() -> Callable[[str], dict]:
    """Authorization header for an access token"""

    def _bearer(access_token: str) -> dict:
        return {"Authorization": f"Bearer {access_token}"}

    return _bearer
