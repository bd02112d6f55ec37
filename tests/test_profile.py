"""Tests for profile reads/updates and password changes."""

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.models.user import User
from app.services.auth import AuthService


def _auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class TestProfile:
    """Tests for GET/PATCH /profile."""

    def test_get_profile(self, client: TestClient, test_user: dict):
        response = client.get("/api/v1/users/profile", headers=_auth(test_user["access_token"]))
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile fetched successfully"
        assert body["data"]["email"] == "test@example.com"
        assert "passwordHash" not in body["data"]

    def test_get_profile_requires_auth(self, client: TestClient):
        response = client.get("/api/v1/users/profile")
        assert response.status_code == 401

    def test_update_full_name(self, client: TestClient, test_user: dict):
        response = client.patch(
            "/api/v1/users/profile",
            json={"fullName": "  Renamed User "},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 200
        assert response.json()["data"]["fullName"] == "Renamed User"

    def test_update_email_normalized(self, client: TestClient, test_user: dict, db_session: Session):
        response = client.patch(
            "/api/v1/users/profile",
            json={"email": " Moved@Example.com"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 200
        assert response.json()["data"]["email"] == "moved@example.com"
        assert db_session.query(User).filter(User.email == "moved@example.com").count() == 1

    def test_update_email_taken(self, client: TestClient, test_user: dict, admin_user: dict):
        response = client.patch(
            "/api/v1/users/profile",
            json={"email": "admin@example.com", "fullName": "Should Not Stick"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 409
        assert response.json()["message"] == "Email is already in use"

        profile = client.get("/api/v1/users/profile", headers=_auth(test_user["access_token"]))
        assert profile.json()["data"]["fullName"] == "Test User"

    def test_update_own_email_unchanged(self, client: TestClient, test_user: dict):
        """Re-submitting the current email is not a conflict."""
        response = client.patch(
            "/api/v1/users/profile",
            json={"email": "test@example.com"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 200

    def test_update_requires_a_field(self, client: TestClient, test_user: dict):
        response = client.patch("/api/v1/users/profile", json={}, headers=_auth(test_user["access_token"]))
        assert response.status_code == 400
        assert "At least one field" in response.json()["message"]

    def test_update_invalid_email(self, client: TestClient, test_user: dict):
        response = client.patch(
            "/api/v1/users/profile",
            json={"email": "nope@"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 400


class TestChangePassword:
    """Tests for POST /change-password."""

    def test_change_password_success(self, client: TestClient, test_user: dict, db_session: Session):
        response = client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "Passw0rd!", "newPassword": "Br4nd-New!"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password changed successfully"

        user = db_session.get(User, test_user["user_id"])
        db_session.refresh(user)
        assert AuthService().hasher.verify("Br4nd-New!", user.password_hash)
        # Password change does not end the session.
        assert user.refresh_token == test_user["refresh_token"]

        login = client.post("/api/v1/users/login", json={"email": "test@example.com", "password": "Br4nd-New!"})
        assert login.status_code == 200

    def test_wrong_current_password(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "Wr0ng-pass", "newPassword": "Br4nd-New!"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Current password is incorrect"

    def test_weak_new_password(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "Passw0rd!", "newPassword": "short"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 400
        assert len(response.json()["errors"]) == 4

    def test_same_password_rejected(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "Passw0rd!", "newPassword": "Passw0rd!"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 400
        assert "different" in response.json()["message"]

    def test_missing_fields(self, client: TestClient, test_user: dict):
        response = client.post(
            "/api/v1/users/change-password",
            json={"currentPassword": "Passw0rd!"},
            headers=_auth(test_user["access_token"]),
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Missing required fields: newPassword"
