"""Test membership management and how role changes reach the guard."""

from app.features.memberships.models import Membership
from tests.conftest import auth


def test_list_members(client, make_org, add_member):
    org = make_org("Acme")
    add_member(org["id"], "viewer-1", "viewer")

    response = client.get(f"/organizations/{org['id']}/members", headers=auth("viewer-1"))
    assert response.status_code == 200
    assert [(m["user_id"], m["role"]) for m in response.json()] == [("owner-1", "owner"), ("viewer-1", "viewer")]


def test_duplicate_membership_is_a_conflict(client, make_org, add_member, count_rows):
    org = make_org("Acme")
    add_member(org["id"], "editor-1", "editor")

    response = client.post(
        f"/organizations/{org['id']}/members",
        json={"user_id": "editor-1", "role": "admin"},
        headers=auth("owner-1"),
    )
    assert response.status_code == 409
    assert response.json()["error"] == "conflict"
    assert count_rows(Membership, organization_id=org["id"], user_id="editor-1") == 1


def test_owner_role_cannot_be_granted(client, make_org):
    org = make_org("Acme")
    response = client.post(
        f"/organizations/{org['id']}/members",
        json={"user_id": "someone", "role": "owner"},
        headers=auth("owner-1"),
    )
    assert response.status_code == 400


def test_editor_cannot_add_members(client, make_org, add_member):
    org = make_org("Acme")
    add_member(org["id"], "editor-1", "editor")
    response = client.post(
        f"/organizations/{org['id']}/members",
        json={"user_id": "someone", "role": "viewer"},
        headers=auth("editor-1"),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:insufficient-permission"


def test_stranger_cannot_list_members(client, make_org):
    org = make_org("Acme")
    response = client.get(f"/organizations/{org['id']}/members", headers=auth("stranger"))
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:no-membership"


def test_admin_removes_member(client, make_org, add_member, count_rows):
    org = make_org("Acme")
    add_member(org["id"], "admin-1", "admin")
    add_member(org["id"], "viewer-1", "viewer")

    response = client.delete(f"/organizations/{org['id']}/members/viewer-1", headers=auth("admin-1"))
    assert response.status_code == 204
    assert count_rows(Membership, organization_id=org["id"], user_id="viewer-1") == 0


def test_owner_cannot_be_removed(client, make_org, add_member):
    org = make_org("Acme")
    add_member(org["id"], "admin-1", "admin")
    response = client.delete(f"/organizations/{org['id']}/members/owner-1", headers=auth("admin-1"))
    assert response.status_code == 400


def test_remove_unknown_member(client, make_org):
    org = make_org("Acme")
    response = client.delete(f"/organizations/{org['id']}/members/ghost", headers=auth("owner-1"))
    assert response.status_code == 404


def test_revocation_applies_on_next_request(client, make_org, add_member, make_doc):
    org = make_org("Acme")
    add_member(org["id"], "editor-1", "editor")
    make_doc(org["id"], "First", user="editor-1")

    client.delete(f"/organizations/{org['id']}/members/editor-1", headers=auth("owner-1"))

    response = client.post(
        f"/organizations/{org['id']}/documents",
        json={"title": "Second"},
        headers=auth("editor-1"),
    )
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:no-membership"
