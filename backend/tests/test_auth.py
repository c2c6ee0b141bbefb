"""Tests for login, session tokens and the forced password change."""
import jwt

from ensemble.config import settings
from tests.conftest import (
    ADMIN_EMAIL, ADMIN_PASSWORD, MEMBER_PASSWORD,
    create_db_role, create_db_user, login,
)


class TestLogin:
    """Email + password → signed session."""

    def test_login_returns_token_and_claims(self, client, admin):
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert resp.status_code == 200
        data = resp.json()
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "ADMIN"
        assert data["user"]["roles"] == ["ADMIN"]
        assert "MANAGE_USERS" in data["user"]["permissions"]
        assert data["user"]["must_change_password"] is False
        assert settings.SESSION_COOKIE_NAME in resp.cookies

    def test_wrong_password_and_unknown_email_look_the_same(self, client, admin):
        bad_pw = client.post("/api/auth/login", json={"email": ADMIN_EMAIL, "password": "nope"})
        unknown = client.post("/api/auth/login", json={"email": "ghost@example.com", "password": "nope"})
        assert bad_pw.status_code == unknown.status_code == 401
        assert bad_pw.json() == unknown.json()

    def test_missing_fields_are_invalid_credentials(self, client, admin):
        resp = client.post("/api/auth/login", json={"email": ADMIN_EMAIL})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    def test_null_fields_are_invalid_credentials(self, client, admin):
        resp = client.post("/api/auth/login", json={"email": None, "password": None})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Invalid credentials"

    def test_permissions_are_union_of_roles(self, client, db):
        events_role = create_db_role(db, "CONDUCTOR", ["MANAGE_EVENTS", "VIEW_ATTENDANCE"])
        viewer_role = create_db_role(db, "SECRETARY", ["VIEW_ATTENDANCE", "VIEW_ADMIN"])
        create_db_user(db, name="Carol", email="carol@example.com", roles=[events_role, viewer_role])

        resp = client.post("/api/auth/login", json={"email": "carol@example.com", "password": MEMBER_PASSWORD})
        user = resp.json()["user"]
        assert user["permissions"] == ["MANAGE_EVENTS", "VIEW_ADMIN", "VIEW_ATTENDANCE"]
        assert user["roles"] == ["CONDUCTOR", "SECRETARY"]
        assert user["role"] == "USER"


class TestSessionToken:
    """Token lookup and validation."""

    def test_missing_token_is_401(self, client):
        assert client.get("/api/events/").status_code == 401

    def test_tampered_token_is_401(self, client, member_headers):
        forged = jwt.encode({"id": "x", "role": "ADMIN"}, "not-the-secret", algorithm="HS256")
        resp = client.get("/api/events/", headers={"Authorization": f"Bearer {forged}"})
        assert resp.status_code == 401

    def test_deleted_user_session_is_401(self, client, admin_headers, member, member_headers, sent_emails):
        event = client.post("/api/events/", headers=admin_headers, json={
            "title": "Rehearsal", "date": "2031-01-01T18:00:00+00:00",
        }).json()
        assert client.delete(f"/api/users/{member.id}", headers=admin_headers).status_code == 204

        answer = client.post("/api/attendance/", headers=member_headers, json={
            "event_id": event["id"], "status": "PRESENT",
        })
        assert answer.status_code == 401
        proposal = client.post("/api/profile/requests/", headers=member_headers, json={"new_name": "Ghost"})
        assert proposal.status_code == 401
        assert client.get("/api/events/", headers=member_headers).status_code == 401

    def test_cookie_session_is_accepted(self, client, member):
        resp = client.post("/api/auth/login", json={"email": member.email, "password": MEMBER_PASSWORD})
        assert resp.status_code == 200
        # TestClient keeps the cookie for the next request
        assert client.get("/api/events/").status_code == 200

    def test_logout_clears_cookie(self, client, member):
        client.post("/api/auth/login", json={"email": member.email, "password": MEMBER_PASSWORD})
        client.post("/api/auth/logout")
        assert client.get("/api/events/").status_code == 401

    def test_session_endpoint_returns_claims(self, client, member, member_headers):
        resp = client.get("/api/auth/session", headers=member_headers)
        assert resp.status_code == 200
        assert resp.json()["id"] == member.id
        assert resp.json()["role"] == "USER"


class TestPasswordChange:
    """Accounts created by an admin must change their password first."""

    def test_must_change_password_blocks_protected_routes(self, client, db):
        create_db_user(db, name="New", email="new@example.com", must_change_password=True)
        headers = login(client, "new@example.com", MEMBER_PASSWORD)

        resp = client.get("/api/events/", headers=headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Password change required"

    def test_change_password_unlocks_session(self, client, db):
        create_db_user(db, name="New", email="new@example.com", must_change_password=True)
        headers = login(client, "new@example.com", MEMBER_PASSWORD)

        resp = client.post("/api/auth/change-password", headers=headers, json={"password": "brand-new"})
        assert resp.status_code == 200
        assert resp.json()["user"]["must_change_password"] is False

        new_headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        assert client.get("/api/events/", headers=new_headers).status_code == 200
        # Old password no longer works
        old = client.post("/api/auth/login", json={"email": "new@example.com", "password": MEMBER_PASSWORD})
        assert old.status_code == 401
        login(client, "new@example.com", "brand-new")

    def test_short_password_rejected(self, client, member_headers):
        resp = client.post("/api/auth/change-password", headers=member_headers, json={"password": "abc"})
        assert resp.status_code == 400
