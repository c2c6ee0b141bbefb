"""Tests for user administration and attendance history."""
from tests.conftest import create_db_role, create_db_user, create_test_event, login


def _create_user(client, headers, **overrides):
    payload = {"name": "Bob", "email": "bob@example.com", "password": "secret123", "instrument": "Drums"}
    payload.update(overrides)
    return client.post("/api/users/", headers=headers, json=payload)


class TestUserCRUD:
    """User create / get / update / list / delete."""

    def test_create_user(self, client, admin_headers):
        resp = _create_user(client, admin_headers, membership_number="M-042")
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "Bob"
        assert data["must_change_password"] is True
        assert data["role"] == "USER"
        assert data["membership_number"] == "M-042"
        assert "password_hash" not in data

    def test_new_user_must_change_password(self, client, admin_headers):
        _create_user(client, admin_headers)
        headers = login(client, "bob@example.com", "secret123")
        assert client.get("/api/events/", headers=headers).status_code == 403

    def test_create_with_roles(self, client, db, admin_headers):
        role = create_db_role(db, "CONDUCTOR", ["MANAGE_EVENTS"])
        resp = _create_user(client, admin_headers, role_ids=[role.id])
        assert resp.status_code == 201
        assert [r["name"] for r in resp.json()["roles"]] == ["CONDUCTOR"]

    def test_create_with_unknown_role(self, client, admin_headers):
        assert _create_user(client, admin_headers, role_ids=["missing"]).status_code == 400

    def test_duplicate_email(self, client, admin_headers):
        _create_user(client, admin_headers)
        assert _create_user(client, admin_headers).status_code == 409

    def test_missing_fields(self, client, admin_headers):
        resp = client.post("/api/users/", headers=admin_headers, json={"name": "Nobody"})
        assert resp.status_code == 400

    def test_members_cannot_manage_users(self, client, member_headers):
        assert client.get("/api/users/", headers=member_headers).status_code == 403
        assert _create_user(client, member_headers).status_code == 403

    def test_manage_users_permission(self, client, db):
        role = create_db_role(db, "SECRETARY", ["MANAGE_USERS"])
        create_db_user(db, name="Sec", email="sec@example.com", roles=[role])
        headers = login(client, "sec@example.com", "secret123")
        assert client.get("/api/users/", headers=headers).status_code == 200

    def test_get_self_but_not_others(self, client, db, member, member_headers):
        other = create_db_user(db, name="Bob", email="bob@example.com")
        mine = client.get(f"/api/users/{member.id}", headers=member_headers)
        assert mine.status_code == 200
        assert mine.json()["clothing_items"] == []
        assert client.get(f"/api/users/{other.id}", headers=member_headers).status_code == 403

    def test_get_missing_user(self, client, admin_headers):
        assert client.get("/api/users/missing", headers=admin_headers).status_code == 404

    def test_update_user_replaces_roles(self, client, db, admin_headers, member):
        first = create_db_role(db, "FIRST", ["VIEW_ATTENDANCE"])
        second = create_db_role(db, "SECOND", ["MANAGE_EVENTS"])
        client.patch(f"/api/users/{member.id}", headers=admin_headers, json={"role_ids": [first.id]})
        resp = client.patch(f"/api/users/{member.id}", headers=admin_headers, json={
            "role_ids": [second.id],
            "instrument": "Oboe",
        })
        assert resp.status_code == 200
        assert [r["name"] for r in resp.json()["roles"]] == ["SECOND"]
        assert resp.json()["instrument"] == "Oboe"
        assert resp.json()["name"] == "Alice"

    def test_update_password(self, client, admin_headers, member):
        resp = client.patch(f"/api/users/{member.id}", headers=admin_headers, json={"password": "changed1"})
        assert resp.status_code == 200
        login(client, member.email, "changed1")

    def test_delete_user(self, client, admin_headers, member):
        assert client.delete(f"/api/users/{member.id}", headers=admin_headers).status_code == 204
        assert client.get(f"/api/users/{member.id}", headers=admin_headers).status_code == 404

    def test_cannot_delete_self(self, client, admin, admin_headers):
        assert client.delete(f"/api/users/{admin.id}", headers=admin_headers).status_code == 400


class TestUserHistory:
    """Per-event status with participation stats."""

    def test_history_stats(self, client, admin_headers, member, member_headers, sent_emails):
        first = create_test_event(client, admin_headers, title="One", days_ahead=1)
        second = create_test_event(client, admin_headers, title="Two", days_ahead=2)
        create_test_event(client, admin_headers, title="Three", days_ahead=3)
        create_test_event(client, admin_headers, title="Four", days_ahead=4)
        client.post("/api/attendance/", headers=member_headers, json={"event_id": first["id"], "status": "PRESENT"})
        client.post("/api/attendance/", headers=member_headers, json={"event_id": second["id"], "status": "ABSENT"})

        resp = client.get(f"/api/users/{member.id}/history", headers=admin_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert [h["title"] for h in data["history"]] == ["Four", "Three", "Two", "One"]
        assert [h["status"] for h in data["history"]] == ["NO_RESPONSE", "NO_RESPONSE", "ABSENT", "PRESENT"]
        assert data["stats"] == {
            "total_events": 4,
            "present_count": 1,
            "absent_count": 1,
            "no_response_count": 2,
            "participation_rate": 25,
        }

    def test_history_without_events(self, client, member, member_headers):
        resp = client.get(f"/api/users/{member.id}/history", headers=member_headers)
        assert resp.status_code == 200
        assert resp.json()["stats"]["participation_rate"] == 0

    def test_history_of_someone_else_forbidden(self, client, admin, member_headers):
        assert client.get(f"/api/users/{admin.id}/history", headers=member_headers).status_code == 403
