"""Tests for the admin endpoints and the admin bootstrap script"""
import pytest
from fastapi.testclient import TestClient

from bootstrap_admin import bootstrap_admin, main
from teachme.errors import ValidationError
from teachme.security import credentials


@pytest.fixture
def admin_headers(client: TestClient, db, login, bearer) -> dict:
    credentials.register(db, "root", "rootpass", role="admin")
    return bearer(login("root", "rootpass")["accessToken"])


def test_user_cannot_reach_admin_endpoints(client: TestClient, register, login, bearer):
    register()
    headers = bearer(login()["accessToken"])

    response = client.get("/admin/security-events", headers=headers)
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_admin_endpoints_require_token(client: TestClient):
    assert client.get("/admin/security-events").status_code == 401


def test_list_security_events(client: TestClient, register, login, bearer, admin_headers):
    user = register()
    client.delete("/auth/sessions/all", headers=bearer(login()["accessToken"]))

    response = client.get("/admin/security-events", headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    assert len(data) == 1
    assert data[0]["accountId"] == user["id"]
    assert data[0]["action"] == "all_tokens_revoked"
    assert data[0]["metadata"] == {"revoked_count": 1}
    assert data[0]["eventId"]


def test_list_security_events_filters(client: TestClient, register, login, bearer, admin_headers):
    alice = register()
    register("bob", "secret1")
    client.delete("/auth/sessions/all", headers=bearer(login()["accessToken"]))
    client.delete("/auth/sessions/all", headers=bearer(login("bob", "secret1")["accessToken"]))

    response = client.get(f"/admin/security-events?accountId={alice['id']}", headers=admin_headers)
    assert [e["accountId"] for e in response.json()] == [alice["id"]]

    response = client.get("/admin/security-events?action=suspicious_activity", headers=admin_headers)
    assert response.json() == []

    response = client.get("/admin/security-events?limit=1", headers=admin_headers)
    assert len(response.json()) == 1


def test_account_security_events(client: TestClient, register, admin_headers):
    user = register()

    response = client.get(f"/admin/accounts/{user['id']}/security-events", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == []

    response = client.get("/admin/accounts/acc_missing/security-events", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_deactivate_account_revokes_sessions(client: TestClient, register, login, bearer, admin_headers):
    user = register()
    tokens = login()

    response = client.patch(f"/admin/accounts/{user['id']}", json={"isActive": False}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["isActive"] is False

    # existing access token stops working, refresh token is gone, login fails
    assert client.get("/auth/me", headers=bearer(tokens["accessToken"])).status_code == 401
    assert client.post("/auth/refresh", json={"refreshToken": tokens["refreshToken"]}).status_code == 401
    assert client.post("/auth/login", json={"name": "alice", "password": "secret1"}).status_code == 401

    # reactivating allows a fresh login
    client.patch(f"/admin/accounts/{user['id']}", json={"isActive": True}, headers=admin_headers)
    assert client.post("/auth/login", json={"name": "alice", "password": "secret1"}).status_code == 200


def test_promote_account(client: TestClient, register, login, bearer, admin_headers):
    user = register()

    response = client.patch(f"/admin/accounts/{user['id']}", json={"role": "admin"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    headers = bearer(login()["accessToken"])
    assert client.get("/admin/security-events", headers=headers).status_code == 200


def test_update_account_rejects_unknown_role(client: TestClient, register, admin_headers):
    user = register()
    response = client.patch(f"/admin/accounts/{user['id']}", json={"role": "superuser"}, headers=admin_headers)
    assert response.status_code == 400


def test_update_unknown_account(client: TestClient, admin_headers):
    response = client.patch("/admin/accounts/acc_missing", json={"isActive": False}, headers=admin_headers)
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# bootstrap_admin
# ---------------------------------------------------------------------------

def test_bootstrap_creates_admin(db):
    account, status = bootstrap_admin(db, "root", "rootpass")
    assert status == "created"
    assert account.role == "admin"
    assert credentials.verify_credentials(db, "root", "rootpass").account_id == account.account_id


def test_bootstrap_promotes_existing_account(db):
    existing = credentials.register(db, "alice", "secret1")
    credentials.set_account_state(db, existing.account_id, is_active=False)

    account, status = bootstrap_admin(db, "alice", "newsecret")
    assert status == "updated"
    assert account.account_id == existing.account_id
    assert account.role == "admin"
    assert account.is_active is True
    assert credentials.verify_credentials(db, "alice", "newsecret")


def test_bootstrap_main_requires_arguments(monkeypatch):
    monkeypatch.delenv("ADMIN_NAME", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    with pytest.raises(SystemExit):
        main([])


def test_bootstrap_with_bad_password_leaves_account_untouched(db):
    existing = credentials.register(db, "bob", "secret1")

    with pytest.raises(ValidationError):
        bootstrap_admin(db, "bob", "123")

    db.refresh(existing)
    assert existing.role == "user"
    assert credentials.verify_credentials(db, "bob", "secret1")


def test_bootstrap_main_reports_bad_password(db, monkeypatch, capsys):
    credentials.register(db, "bob", "secret1")
    monkeypatch.setattr("bootstrap_admin.SessionLocal", lambda: db)
    monkeypatch.setattr(db, "close", lambda: None)

    assert main(["--name", "bob", "--password", "123"]) == 1
    assert "ERROR" in capsys.readouterr().err
    assert credentials.get_by_name(db, "bob").role == "user"
