# tests/test_auth.py
from jose import jwt

from tailorcraft.core.config import settings
from tailorcraft.core.security import DemoIdentityProvider, create_access_token, get_identity_provider
from tailorcraft.db.seed import DEMO_PASSWORD
from tailorcraft.main import app
from tailorcraft.models.user import RoleEnum


def test_login_returns_token_and_user(client):
    resp = client.post("/api/auth/login", json={"email": "admin@tailorcraft.com", "password": DEMO_PASSWORD})

    assert resp.status_code == 200
    body = resp.json()
    assert body["user"] == {"id": "u1", "name": "Admin User", "role": "ADMIN"}
    claims = jwt.decode(body["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    assert claims["sub"] == "u1"
    assert claims["role"] == "ADMIN"


def test_token_from_login_opens_protected_routes(client):
    token = client.post(
        "/api/auth/login", json={"email": "john@example.com", "password": DEMO_PASSWORD}
    ).json()["token"]
    resp = client.get("/api/orders", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200


def test_unknown_email_is_400(client):
    resp = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "AuthError"


def test_wrong_password_is_403(client):
    resp = client.post("/api/auth/login", json={"email": "john@example.com", "password": "wrong"})
    assert resp.status_code == 403


def test_demo_provider_skips_password(client):
    app.dependency_overrides[get_identity_provider] = DemoIdentityProvider
    resp = client.post("/api/auth/login", json={"email": "sarah@tailorcraft.com"})
    assert resp.status_code == 200
    assert resp.json()["user"]["role"] == "WORKER"

    assert client.post("/api/auth/login", json={"email": "ghost@example.com"}).status_code == 400


def test_register_creates_customer(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "Jane Roe", "email": "Jane@Example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert resp.json()["role"] == "CUSTOMER"

    login = client.post("/api/auth/login", json={"email": "jane@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["user"]["id"] == resp.json()["id"]


def test_register_duplicate_email(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "John Again", "email": "john@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "email"


def test_token_for_unknown_user_rejected(client):
    headers = {"Authorization": f"Bearer {create_access_token(subject='u999', role=RoleEnum.ADMIN)}"}
    assert client.get("/api/orders", headers=headers).status_code == 401


def test_register_blank_name_rejected(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "   ", "email": "blank@example.com", "password": "secret123"},
    )
    assert resp.status_code == 400
    assert resp.json()["field"] == "name"


def test_register_strips_name(client):
    resp = client.post(
        "/api/auth/register",
        json={"name": "  Jane Roe ", "email": "roe@example.com", "password": "secret123"},
    )
    assert resp.status_code == 201
    assert resp.json()["name"] == "Jane Roe"
