from datetime import timedelta

import pytest

from estate_core.api.invites import normalize_invite_email
from estate_core.db import models
from estate_core.exceptions import ValidationError
from estate_core.utils.settings import refresh_settings_cache
from tests.conftest import auth_headers


def _h(user):
    return auth_headers(user.email, user.display_name)


def _invite(client, estate, owner, email="heir@example.com", role="VIEWER"):
    return client.post(f"/estates/{estate.id}/invites", json={"email": email, "role": role}, headers=_h(owner))


@pytest.mark.parametrize("raw", ["", "heir", "@example.com", "heir@", "he ir@example.com"])
def test_invite_email_must_look_like_an_address(raw):
    with pytest.raises(ValidationError):
        normalize_invite_email(raw)


def test_invite_email_is_normalized():
    assert normalize_invite_email("  Heir@Example.COM ") == "heir@example.com"


def test_owner_creates_invite_link(client, estate, owner, monkeypatch):
    monkeypatch.setenv("APP_BASE_URL", "https://estates.example.com")
    refresh_settings_cache()
    r = _invite(client, estate, owner, email="Heir@Example.com", role="EDITOR")
    assert r.status_code == 201
    body = r.json()
    assert body["email"] == "heir@example.com"
    assert body["role"] == "EDITOR"
    assert body["status"] == "PENDING"
    assert body["invite_url"] == f"https://estates.example.com/estates/{estate.id}/invites/{body['token']}"

    listed = client.get(f"/estates/{estate.id}/invites", headers=_h(owner)).json()
    assert [i["token"] for i in listed] == [body["token"]]


def test_only_owner_manages_invites(client, estate, editor):
    assert _invite(client, estate, editor).status_code == 404
    assert client.get(f"/estates/{estate.id}/invites", headers=_h(editor)).status_code == 404


def test_owner_cannot_invite_themselves(client, estate, owner):
    assert _invite(client, estate, owner, email=owner.email.upper()).status_code == 422


def test_reinviting_an_address_reissues_the_link(client, estate, owner):
    first = _invite(client, estate, owner, role="VIEWER").json()
    r = _invite(client, estate, owner, role="EDITOR")
    assert r.status_code == 200
    second = r.json()
    assert second["id"] == first["id"]
    assert second["token"] != first["token"]
    assert second["previous_role"] == "VIEWER"
    assert second["role"] == "EDITOR"
    assert len(client.get(f"/estates/{estate.id}/invites", headers=_h(owner)).json()) == 1

    heir = auth_headers("heir@example.com")
    stale = client.post(f"/estates/{estate.id}/invites/{first['token']}/accept", headers=heir)
    assert stale.status_code == 404


def test_pending_invites_are_capped(client, estate, owner, monkeypatch):
    monkeypatch.setenv("INVITE_PENDING_LIMIT", "2")
    refresh_settings_cache()
    assert _invite(client, estate, owner, email="a@example.com").status_code == 201
    assert _invite(client, estate, owner, email="b@example.com").status_code == 201
    assert _invite(client, estate, owner, email="c@example.com").status_code == 429
    # Reissuing an existing pending invite does not count against the cap
    assert _invite(client, estate, owner, email="a@example.com").status_code == 200


def test_accepting_grants_the_role(client, estate, owner):
    token = _invite(client, estate, owner, email="heir@example.com", role="EDITOR").json()["token"]
    heir = auth_headers("Heir@example.com", "Heir")

    assert client.get(f"/estates/{estate.id}", headers=heir).status_code == 404
    r = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=heir)
    assert r.status_code == 200
    assert r.json() == {"estate_id": str(estate.id), "role": "EDITOR"}

    access = client.get(f"/estates/{estate.id}", headers=heir).json()["access"]
    assert access["role"] == "EDITOR" and access["can_edit"] is True

    invite = client.get(f"/estates/{estate.id}/invites", headers=_h(owner)).json()[0]
    assert invite["status"] == "ACCEPTED"
    assert invite["accepted_at"] is not None

    again = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=heir)
    assert again.status_code == 409


def test_accepting_updates_an_existing_collaborator(client, estate, owner, viewer):
    token = _invite(client, estate, owner, email=viewer.email, role="EDITOR").json()["token"]
    r = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=_h(viewer))
    assert r.status_code == 200
    roles = [c["role"] for c in client.get(f"/estates/{estate.id}/collaborators", headers=_h(owner)).json()
             if c["user_id"] == str(viewer.id)]
    assert roles == ["EDITOR"]


def test_invite_is_bound_to_its_email(client, estate, owner, stranger):
    token = _invite(client, estate, owner, email="heir@example.com").json()["token"]
    r = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=_h(stranger))
    assert r.status_code == 404
    assert client.get(f"/estates/{estate.id}", headers=_h(stranger)).status_code == 404


def test_expired_invite_cannot_be_accepted(client, db, estate, owner):
    token = _invite(client, estate, owner).json()["token"]
    invite = db.query(models.EstateInvite).filter(models.EstateInvite.token == token).one()
    invite.expires_at = models.now_utc() - timedelta(minutes=1)
    db.commit()

    r = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=auth_headers("heir@example.com"))
    assert r.status_code == 409
    listed = client.get(f"/estates/{estate.id}/invites", headers=_h(owner)).json()
    assert listed[0]["status"] == "EXPIRED"


def test_listing_marks_lapsed_invites_expired(client, db, estate, owner):
    token = _invite(client, estate, owner).json()["token"]
    invite = db.query(models.EstateInvite).filter(models.EstateInvite.token == token).one()
    invite.expires_at = models.now_utc() - timedelta(days=1)
    db.commit()
    listed = client.get(f"/estates/{estate.id}/invites", headers=_h(owner)).json()
    assert [i["status"] for i in listed] == ["EXPIRED"]


def test_revoke_invite(client, estate, owner):
    token = _invite(client, estate, owner).json()["token"]
    r = client.delete(f"/estates/{estate.id}/invites/{token}", headers=_h(owner))
    assert r.status_code == 200
    assert r.json()["status"] == "REVOKED"
    assert r.json()["revoked_at"] is not None

    # Revoking twice is harmless
    assert client.delete(f"/estates/{estate.id}/invites/{token}", headers=_h(owner)).json()["status"] == "REVOKED"

    r = client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=auth_headers("heir@example.com"))
    assert r.status_code == 409


def test_accepted_invite_cannot_be_revoked(client, estate, owner):
    token = _invite(client, estate, owner).json()["token"]
    client.post(f"/estates/{estate.id}/invites/{token}/accept", headers=auth_headers("heir@example.com"))
    r = client.delete(f"/estates/{estate.id}/invites/{token}", headers=_h(owner))
    assert r.status_code == 409


def test_unknown_invite_token(client, estate, owner):
    assert client.delete(f"/estates/{estate.id}/invites/nope", headers=_h(owner)).status_code == 404
    r = client.post(f"/estates/{estate.id}/invites/nope/accept", headers=auth_headers("heir@example.com"))
    assert r.status_code == 404
