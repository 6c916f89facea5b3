"""Test the document hierarchy store."""

from app.features.documents.models import Document
from tests.conftest import auth


def test_create_document(client, make_org):
    org = make_org("Acme")
    response = client.post(
        f"/organizations/{org['id']}/documents",
        json={"title": "Getting Started", "content": {"type": "doc", "content": []}},
        headers=auth("owner-1"),
    )
    assert response.status_code == 201
    body = response.json()
    assert body["slug"] == "getting-started"
    assert body["order"] == 0
    assert body["parent_id"] is None
    assert body["published"] is False
    assert body["content"] == {"type": "doc", "content": []}
    assert body["created_by"] == "owner-1"
    assert body["last_edited_by"] == "owner-1"


def test_sibling_order_follows_creation(client, make_org, make_doc):
    org = make_org("Acme")
    orders = [make_doc(org["id"], title)["order"] for title in ("One", "Two", "Three")]
    assert orders == [0, 1, 2]


def test_order_is_per_parent(client, make_org, make_doc):
    org = make_org("Acme")
    root = make_doc(org["id"], "Root")
    make_doc(org["id"], "Other root")
    children = [make_doc(org["id"], f"Child {i}", parent_id=root["id"]) for i in range(2)]
    assert [c["order"] for c in children] == [0, 1]


def test_blank_title_is_rejected(client, make_org):
    org = make_org("Acme")
    response = client.post(f"/organizations/{org['id']}/documents", json={"title": " "}, headers=auth("owner-1"))
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_duplicate_slug_in_org_is_a_conflict(client, make_org, make_doc, count_rows):
    org = make_org("Acme")
    make_doc(org["id"], "Intro")
    response = client.post(
        f"/organizations/{org['id']}/documents",
        json={"title": "Another", "slug": "intro"},
        headers=auth("owner-1"),
    )
    assert response.status_code == 409
    assert count_rows(Document, organization_id=org["id"]) == 1


def test_same_slug_in_different_orgs(client, make_org, make_doc):
    acme = make_org("Acme")
    globex = make_org("Globex")
    assert make_doc(acme["id"], "Intro")["slug"] == make_doc(globex["id"], "Intro")["slug"]


def test_cross_org_parent_is_rejected(client, make_org, make_doc, count_rows):
    acme = make_org("Acme")
    globex = make_org("Globex")
    foreign_parent = make_doc(globex["id"], "Foreign")

    response = client.post(
        f"/organizations/{acme['id']}/documents",
        json={"title": "Child", "parent_id": foreign_parent["id"]},
        headers=auth("owner-1"),
    )
    assert response.status_code == 404
    assert count_rows(Document, organization_id=acme["id"]) == 0


def test_viewer_cannot_create(client, make_org, add_member):
    org = make_org("Acme")
    add_member(org["id"], "viewer-1", "viewer")
    response = client.post(f"/organizations/{org['id']}/documents", json={"title": "X"}, headers=auth("viewer-1"))
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:insufficient-permission"


def test_list_materializes_two_levels(client, make_org, make_doc, add_member):
    org = make_org("Acme")
    add_member(org["id"], "viewer-1", "viewer")
    guide = make_doc(org["id"], "Guide")
    api = make_doc(org["id"], "API")
    install = make_doc(org["id"], "Install", parent_id=guide["id"])
    linux = make_doc(org["id"], "Linux", parent_id=install["id"])
    make_doc(org["id"], "Debian", parent_id=linux["id"])

    response = client.get(f"/organizations/{org['id']}/documents", headers=auth("viewer-1"))
    assert response.status_code == 200
    roots = response.json()
    assert [r["id"] for r in roots] == [guide["id"], api["id"]]
    assert [c["id"] for c in roots[0]["children"]] == [install["id"]]
    grandchildren = roots[0]["children"][0]["children"]
    assert [g["id"] for g in grandchildren] == [linux["id"]]
    # Great-grandchildren are not loaded eagerly
    assert grandchildren[0]["children"] == []
    assert roots[1]["children"] == []


def test_list_orders_by_position(client, make_org, make_doc):
    org = make_org("Acme")
    first = make_doc(org["id"], "First")
    second = make_doc(org["id"], "Second")
    client.patch(f"/documents/{first['id']}", json={"order": 5}, headers=auth("owner-1"))

    roots = client.get(f"/organizations/{org['id']}/documents", headers=auth("owner-1")).json()
    assert [r["id"] for r in roots] == [second["id"], first["id"]]


def test_list_requires_membership(client, make_org):
    org = make_org("Acme")
    response = client.get(f"/organizations/{org['id']}/documents", headers=auth("stranger"))
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:no-membership"


def test_get_document_with_children(client, make_org, make_doc):
    org = make_org("Acme")
    parent = make_doc(org["id"], "Parent")
    child = make_doc(org["id"], "Child", parent_id=parent["id"])
    make_doc(org["id"], "Grandchild", parent_id=child["id"])

    response = client.get(f"/documents/{parent['id']}", headers=auth("owner-1"))
    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Parent"
    assert [c["id"] for c in body["children"]] == [child["id"]]
    assert body["children"][0]["children"] == []


def test_get_document_access(client, make_org, make_doc):
    org = make_org("Acme")
    doc = make_doc(org["id"], "Secret")
    assert client.get(f"/documents/{doc['id']}", headers=auth("stranger")).status_code == 403
    assert client.get("/documents/missing", headers=auth("owner-1")).status_code == 404


def test_partial_update(client, make_org, make_doc, add_member):
    org = make_org("Acme")
    add_member(org["id"], "editor-1", "editor")
    doc = make_doc(org["id"], "Draft", content={"blocks": [1]})

    response = client.patch(f"/documents/{doc['id']}", json={"published": True}, headers=auth("editor-1"))
    assert response.status_code == 200
    body = response.json()
    assert body["published"] is True
    assert body["title"] == "Draft"
    assert body["content"] == {"blocks": [1]}
    assert body["last_edited_by"] == "editor-1"
    assert body["created_by"] == "owner-1"

    unpublished = client.patch(f"/documents/{doc['id']}", json={"published": False}, headers=auth("editor-1"))
    assert unpublished.json()["published"] is False


def test_update_can_clear_content(client, make_org, make_doc):
    org = make_org("Acme")
    doc = make_doc(org["id"], "Draft", content={"blocks": [1]})
    response = client.patch(f"/documents/{doc['id']}", json={"content": None}, headers=auth("owner-1"))
    assert response.status_code == 200
    assert response.json()["content"] is None


def test_update_rejects_blank_title(client, make_org, make_doc):
    org = make_org("Acme")
    doc = make_doc(org["id"], "Draft")
    response = client.patch(f"/documents/{doc['id']}", json={"title": ""}, headers=auth("owner-1"))
    assert response.status_code == 400


def test_viewer_cannot_update(client, make_org, make_doc, add_member):
    org = make_org("Acme")
    add_member(org["id"], "viewer-1", "viewer")
    doc = make_doc(org["id"], "Draft")

    response = client.patch(f"/documents/{doc['id']}", json={"title": "Changed"}, headers=auth("viewer-1"))
    assert response.status_code == 403
    assert response.json()["error"] == "forbidden:insufficient-permission"

    unchanged = client.get(f"/documents/{doc['id']}", headers=auth("viewer-1")).json()
    assert unchanged["title"] == "Draft"
    assert unchanged["updated_at"] == doc["updated_at"]


def test_rename_slug_collision(client, make_org, make_doc):
    org = make_org("Acme")
    make_doc(org["id"], "Intro")
    other = make_doc(org["id"], "Setup")

    response = client.patch(f"/documents/{other['id']}", json={"slug": "intro"}, headers=auth("owner-1"))
    assert response.status_code == 409
    assert client.get(f"/documents/{other['id']}", headers=auth("owner-1")).json()["slug"] == "setup"


def test_rename_to_own_slug_is_a_noop(client, make_org, make_doc):
    org = make_org("Acme")
    doc = make_doc(org["id"], "Intro")
    response = client.patch(f"/documents/{doc['id']}", json={"slug": "intro"}, headers=auth("owner-1"))
    assert response.status_code == 200
    assert response.json()["slug"] == "intro"


def test_rename_slug(client, make_org, make_doc):
    org = make_org("Acme")
    doc = make_doc(org["id"], "Intro")
    response = client.patch(f"/documents/{doc['id']}", json={"slug": "Welcome Page"}, headers=auth("owner-1"))
    assert response.status_code == 200
    assert response.json()["slug"] == "welcome-page"


def test_move_appends_to_new_siblings(client, make_org, make_doc):
    org = make_org("Acme")
    parent = make_doc(org["id"], "Parent")
    make_doc(org["id"], "Existing child", parent_id=parent["id"])
    loose = make_doc(org["id"], "Loose")

    response = client.patch(f"/documents/{loose['id']}", json={"parent_id": parent["id"]}, headers=auth("owner-1"))
    assert response.status_code == 200
    assert response.json()["parent_id"] == parent["id"]
    assert response.json()["order"] == 1

    back = client.patch(f"/documents/{loose['id']}", json={"parent_id": None}, headers=auth("owner-1"))
    assert back.json()["parent_id"] is None
    assert back.json()["order"] == 1


def test_move_under_descendant_is_rejected(client, make_org, make_doc):
    org = make_org("Acme")
    top = make_doc(org["id"], "Top")
    middle = make_doc(org["id"], "Middle", parent_id=top["id"])
    bottom = make_doc(org["id"], "Bottom", parent_id=middle["id"])

    for target in (top, bottom):
        response = client.patch(f"/documents/{top['id']}", json={"parent_id": target["id"]}, headers=auth("owner-1"))
        assert response.status_code == 400
    assert client.get(f"/documents/{top['id']}", headers=auth("owner-1")).json()["parent_id"] is None


def test_move_to_other_org_is_rejected(client, make_org, make_doc):
    acme = make_org("Acme")
    globex = make_org("Globex")
    doc = make_doc(acme["id"], "Doc")
    foreign = make_doc(globex["id"], "Foreign")
    response = client.patch(f"/documents/{doc['id']}", json={"parent_id": foreign["id"]}, headers=auth("owner-1"))
    assert response.status_code == 404


def test_delete_cascades_to_subtree(client, make_org, make_doc, count_rows):
    org = make_org("Acme")
    target = make_doc(org["id"], "Target")
    first = make_doc(org["id"], "First child", parent_id=target["id"])
    second = make_doc(org["id"], "Second child", parent_id=target["id"])
    grandchild = make_doc(org["id"], "Grandchild", parent_id=first["id"])
    survivor = make_doc(org["id"], "Survivor")

    response = client.delete(f"/documents/{target['id']}", headers=auth("owner-1"))
    assert response.status_code == 204

    for doc in (target, first, second, grandchild):
        assert client.get(f"/documents/{doc['id']}", headers=auth("owner-1")).status_code == 404
    assert count_rows(Document, organization_id=org["id"]) == 1
    assert client.get(f"/documents/{survivor['id']}", headers=auth("owner-1")).status_code == 200


def test_viewer_cannot_delete(client, make_org, make_doc, add_member, count_rows):
    org = make_org("Acme")
    add_member(org["id"], "viewer-1", "viewer")
    doc = make_doc(org["id"], "Keep")
    response = client.delete(f"/documents/{doc['id']}", headers=auth("viewer-1"))
    assert response.status_code == 403
    assert count_rows(Document, id=doc["id"]) == 1
