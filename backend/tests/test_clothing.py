"""Tests for the per-member clothing inventory."""
from tests.conftest import create_db_user, login

SHIRT = {"name": "Black shirt", "image": "data:image/png;base64,AAAA"}


def test_add_and_list_own_items(client, member_headers, admin_headers):
    resp = client.post("/api/clothing/", headers=member_headers, json=SHIRT)
    assert resp.status_code == 201
    assert resp.json()["name"] == "Black shirt"

    mine = client.get("/api/clothing/", headers=member_headers).json()
    assert [i["name"] for i in mine] == ["Black shirt"]
    assert client.get("/api/clothing/", headers=admin_headers).json() == []


def test_item_requires_name_and_image(client, member_headers):
    resp = client.post("/api/clothing/", headers=member_headers, json={"name": "Hat"})
    assert resp.status_code == 400


def test_delete_own_item(client, member_headers):
    item = client.post("/api/clothing/", headers=member_headers, json=SHIRT).json()
    assert client.delete(f"/api/clothing/{item['id']}", headers=member_headers).status_code == 204
    assert client.get("/api/clothing/", headers=member_headers).json() == []


def test_cannot_delete_someone_elses_item(client, db, member_headers):
    item = client.post("/api/clothing/", headers=member_headers, json=SHIRT).json()
    create_db_user(db, name="Bob", email="bob@example.com")
    bob_headers = login(client, "bob@example.com", "secret123")

    assert client.delete(f"/api/clothing/{item['id']}", headers=bob_headers).status_code == 403
    assert client.delete("/api/clothing/missing", headers=bob_headers).status_code == 404


def test_items_show_on_user_detail(client, member, member_headers):
    client.post("/api/clothing/", headers=member_headers, json=SHIRT)
    detail = client.get(f"/api/users/{member.id}", headers=member_headers).json()
    assert [i["name"] for i in detail["clothing_items"]] == ["Black shirt"]
