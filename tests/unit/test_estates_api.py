import uuid
from datetime import UTC, datetime

from estate_core.db import models
from tests.conftest import auth_headers


def _h(user):
    return auth_headers(user.email, user.display_name)


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_write_without_identity_is_rejected(client):
    r = client.post("/estates/", json={"label": "Nobody's estate"})
    assert r.status_code == 401


def test_read_without_identity_is_rejected(client):
    r = client.get("/estates/")
    assert r.status_code == 401


def test_create_estate_makes_caller_owner(client):
    headers = auth_headers("New.Owner@Example.com", "New Owner")
    r = client.post("/estates/", json={"label": "Estate of A. Smith", "court_state": "CA"}, headers=headers)
    assert r.status_code == 201
    body = r.json()
    assert body["label"] == "Estate of A. Smith"
    assert body["status"] == "OPEN"
    assert body["access"]["role"] == "OWNER"
    assert body["access"]["is_owner"] is True
    assert body["access"]["can_edit"] is True

    listed = client.get("/estates/", headers=auth_headers("new.owner@example.com")).json()
    assert [e["id"] for e in listed] == [body["id"]]


def test_create_estate_validates_label(client, owner):
    r = client.post("/estates/", json={"label": ""}, headers=_h(owner))
    assert r.status_code == 422


def test_get_estate_reports_caller_access(client, estate, viewer):
    r = client.get(f"/estates/{estate.id}", headers=_h(viewer))
    assert r.status_code == 200
    access = r.json()["access"]
    assert access == {
        "estate_id": str(estate.id),
        "role": "VIEWER",
        "is_owner": False,
        "can_edit": False,
        "can_view_sensitive": False,
    }


def test_stranger_sees_not_found_same_as_missing_estate(client, estate, stranger):
    forbidden = client.get(f"/estates/{estate.id}", headers=_h(stranger))
    missing = client.get(f"/estates/{uuid.uuid4()}", headers=_h(stranger))
    assert forbidden.status_code == missing.status_code == 404
    assert forbidden.json() == missing.json() == {"detail": "Not found"}


def test_list_estates_includes_collaborations(client, estate, editor, stranger):
    assert [e["id"] for e in client.get("/estates/", headers=_h(editor)).json()] == [str(estate.id)]
    assert client.get("/estates/", headers=_h(stranger)).json() == []


def test_list_estates_skips_unusable_roles(client, db, estate, stranger):
    db.add(models.EstateCollaborator(estate_id=estate.id, user_id=stranger.id, role="ADMIN", position=3))
    db.commit()
    assert client.get("/estates/", headers=_h(stranger)).json() == []


def test_list_estates_pages_after_dropping_unusable_roles(client, db, owner, stranger):
    older = models.Estate(owner_id=owner.id, label="Older", created_at=datetime(2026, 1, 1, tzinfo=UTC))
    newer = models.Estate(owner_id=owner.id, label="Newer", created_at=datetime(2026, 2, 1, tzinfo=UTC))
    db.add_all([older, newer])
    db.flush()
    db.add_all([
        models.EstateCollaborator(estate_id=newer.id, user_id=stranger.id, role="ADMIN", position=0),
        models.EstateCollaborator(estate_id=older.id, user_id=stranger.id, role="VIEWER", position=0),
    ])
    db.commit()
    page = client.get("/estates/", params={"limit": 1}, headers=_h(stranger)).json()
    assert [e["label"] for e in page] == ["Older"]


def test_list_estates_uses_first_collaborator_row(client, db, estate, stranger):
    db.add_all([
        models.EstateCollaborator(estate_id=estate.id, user_id=stranger.id, role="editor", position=5),
        models.EstateCollaborator(estate_id=estate.id, user_id=stranger.id, role="VIEWER", position=6),
    ])
    db.commit()
    assert client.get("/estates/", headers=_h(stranger)).json() == []
    assert client.get(f"/estates/{estate.id}", headers=_h(stranger)).status_code == 404


def test_editor_can_update_viewer_cannot(client, estate, editor, viewer):
    r = client.put(f"/estates/{estate.id}", json={"court_county": "Travis"}, headers=_h(editor))
    assert r.status_code == 200
    assert r.json()["court_county"] == "Travis"
    assert r.json()["label"] == "Estate of J. Doe"

    r = client.put(f"/estates/{estate.id}", json={"status": "CLOSED"}, headers=_h(viewer))
    assert r.status_code == 404


def test_only_owner_deletes(client, estate, owner, editor):
    assert client.delete(f"/estates/{estate.id}", headers=_h(editor)).status_code == 404
    assert client.delete(f"/estates/{estate.id}", headers=_h(owner)).status_code == 204
    assert client.get(f"/estates/{estate.id}", headers=_h(owner)).status_code == 404


# Collaborators

def test_list_collaborators(client, estate, viewer, editor):
    r = client.get(f"/estates/{estate.id}/collaborators", headers=_h(viewer))
    assert r.status_code == 200
    assert [(c["user_id"], c["role"]) for c in r.json()] == [
        (str(editor.id), "EDITOR"),
        (str(viewer.id), "VIEWER"),
    ]


def test_owner_adds_collaborator_by_email(client, estate, owner):
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"email": "Attorney@Example.com", "role": "EDITOR"},
        headers=_h(owner),
    )
    assert r.status_code == 201
    assert r.json()["role"] == "EDITOR"

    attorney = auth_headers("attorney@example.com")
    detail = client.get(f"/estates/{estate.id}", headers=attorney)
    assert detail.status_code == 200
    assert detail.json()["access"]["role"] == "EDITOR"


def test_adding_existing_collaborator_updates_in_place(client, estate, owner, viewer):
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"user_id": str(viewer.id), "role": "EDITOR"},
        headers=_h(owner),
    )
    assert r.status_code == 201
    roles = [c["role"] for c in client.get(f"/estates/{estate.id}/collaborators", headers=_h(owner)).json()
             if c["user_id"] == str(viewer.id)]
    assert roles == ["EDITOR"]


def test_owner_cannot_be_added_as_collaborator(client, estate, owner):
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"user_id": str(owner.id), "role": "VIEWER"},
        headers=_h(owner),
    )
    assert r.status_code == 409


def test_owner_role_is_not_assignable(client, estate, owner, stranger):
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"user_id": str(stranger.id), "role": "OWNER"},
        headers=_h(owner),
    )
    assert r.status_code == 422


def test_collaborator_needs_an_identity(client, estate, owner):
    r = client.post(f"/estates/{estate.id}/collaborators", json={"role": "VIEWER"}, headers=_h(owner))
    assert r.status_code == 422
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"user_id": str(uuid.uuid4()), "role": "VIEWER"},
        headers=_h(owner),
    )
    assert r.status_code == 422


def test_editor_cannot_manage_collaborators(client, estate, editor, stranger):
    r = client.post(
        f"/estates/{estate.id}/collaborators",
        json={"user_id": str(stranger.id), "role": "VIEWER"},
        headers=_h(editor),
    )
    assert r.status_code == 404


def test_change_and_remove_collaborator(client, estate, owner, viewer):
    r = client.put(
        f"/estates/{estate.id}/collaborators/{viewer.id}",
        json={"role": "EDITOR"},
        headers=_h(owner),
    )
    assert r.status_code == 200
    assert client.get(f"/estates/{estate.id}", headers=_h(viewer)).json()["access"]["can_edit"] is True

    assert client.delete(f"/estates/{estate.id}/collaborators/{viewer.id}", headers=_h(owner)).status_code == 204
    # Revocation applies to the very next request
    assert client.get(f"/estates/{estate.id}", headers=_h(viewer)).status_code == 404
    assert client.delete(f"/estates/{estate.id}/collaborators/{viewer.id}", headers=_h(owner)).status_code == 404


def test_change_unknown_collaborator(client, estate, owner, stranger):
    r = client.put(
        f"/estates/{estate.id}/collaborators/{stranger.id}",
        json={"role": "VIEWER"},
        headers=_h(owner),
    )
    assert r.status_code == 404
