"""
Tests for admin login and the bearer-token gate.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId
from jose import jwt

from examadmin.config import settings
from examadmin.errors import PersistenceFailure
from examadmin.main import app
from examadmin.services import store as store_module
from examadmin.utils.database import get_database
from examadmin.utils.security import create_access_token, get_password_hash

PROTECTED_ENDPOINTS = [
    ("post", "/admin/create-test-with-questions"),
    ("get", "/admin/tests"),
    ("get", f"/admin/tests/{ObjectId()}/questions"),
    ("delete", f"/admin/delete-test/{ObjectId()}"),
    ("delete", f"/admin/delete-question/{ObjectId()}"),
]


@pytest.fixture
def admin(mock_db):
    doc = {"email": "admin@example.com", "password": get_password_hash("correct-horse")}
    doc["_id"] = asyncio.run(mock_db["admins"].insert_one(doc)).inserted_id
    return doc


def call(client, method, url, headers=None):
    if method == "post":
        return client.post(url, json={}, headers=headers)
    return getattr(client, method)(url, headers=headers)


class TestPublicEndpoints:
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"]
        assert set(data["env"]) == {"hasMongoUri", "hasJwtSecret", "environment"}

    def test_root_reports_default_secret(self, client, monkeypatch):
        monkeypatch.setattr(settings, "SECRET_KEY", "your-secret-key-here")
        assert client.get("/").json()["env"]["hasJwtSecret"] is False

        monkeypatch.setattr(settings, "SECRET_KEY", "a-real-deployment-secret")
        assert client.get("/").json()["env"]["hasJwtSecret"] is True

    def test_health(self, client):
        assert client.get("/health").json() == {"success": True, "status": "healthy"}

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/nope")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestLogin:
    """Tests for POST /admin/login."""

    def test_login_success(self, client, admin):
        response = client.post(
            "/admin/login", json={"email": "  Admin@Example.com ", "password": "correct-horse"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        payload = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert payload["sub"] == str(admin["_id"])
        assert payload["email"] == "admin@example.com"

    def test_token_from_login_opens_the_gate(self, client, admin):
        token = client.post(
            "/admin/login", json={"email": "admin@example.com", "password": "correct-horse"}
        ).json()["token"]

        response = client.get("/admin/tests", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200

    def test_wrong_password(self, client, admin):
        response = client.post(
            "/admin/login", json={"email": "admin@example.com", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid credentials"}

    def test_unknown_email_gets_same_message(self, client, admin):
        response = client.post(
            "/admin/login", json={"email": "ghost@example.com", "password": "correct-horse"}
        )

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid credentials"

    def test_missing_fields(self, client):
        response = client.post("/admin/login", json={"email": "admin@example.com"})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert "password" in response.json()["message"]


class TestAuthGate:
    @pytest.mark.parametrize("method,url", PROTECTED_ENDPOINTS)
    def test_missing_token(self, client, method, url):
        response = call(client, method, url)

        assert response.status_code == 401
        assert response.json()["success"] is False

    @pytest.mark.parametrize("method,url", PROTECTED_ENDPOINTS)
    def test_wrong_scheme(self, client, admin_token, method, url):
        response = call(client, method, url, headers={"Authorization": f"Basic {admin_token}"})
        assert response.status_code == 401

    @pytest.mark.parametrize("method,url", PROTECTED_ENDPOINTS)
    def test_token_signed_with_other_secret(self, client, method, url):
        token = jwt.encode(
            {"sub": "65f000000000000000000001", "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            "not-the-server-secret",
            algorithm=settings.ALGORITHM,
        )
        response = call(client, method, url, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid or expired token"}

    @pytest.mark.parametrize("method,url", PROTECTED_ENDPOINTS)
    def test_expired_token(self, client, method, url):
        token = create_access_token(
            {"sub": "65f000000000000000000001"}, expires_delta=timedelta(minutes=-1)
        )
        response = call(client, method, url, headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid or expired token"}

    @pytest.mark.parametrize("method,url", PROTECTED_ENDPOINTS)
    def test_token_checked_before_database(self, client, method, url):
        def unavailable():
            raise PersistenceFailure("Database unavailable")

        app.dependency_overrides[get_database] = unavailable
        app.dependency_overrides[store_module.get_store] = unavailable

        response = call(client, method, url)

        assert response.status_code == 401
        assert response.json()["success"] is False

    def test_database_outage_with_valid_token(self, client, auth_headers):
        def unavailable():
            raise PersistenceFailure("Database unavailable")

        app.dependency_overrides[store_module.get_store] = unavailable

        response = client.get("/admin/tests", headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Database unavailable"}
