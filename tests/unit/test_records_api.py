from estate_core.db import models
from tests.conftest import auth_headers


def _h(user):
    return auth_headers(user.email, user.display_name)


def _activity(client, estate, user, **params):
    r = client.get(f"/estates/{estate.id}/activity", params=params, headers=_h(user))
    assert r.status_code == 200
    return r.json()["records"]


# Notes

def test_note_lifecycle_is_recorded(client, estate, editor, viewer):
    r = client.post(f"/estates/{estate.id}/notes", json={"subject": "Bank", "body": "Call the bank"}, headers=_h(editor))
    assert r.status_code == 201
    note = r.json()
    assert note["owner_id"] == str(estate.owner_id)

    r = client.put(f"/estates/{estate.id}/notes/{note['id']}", json={"pinned": True}, headers=_h(editor))
    assert r.status_code == 200 and r.json()["pinned"] is True
    r = client.put(f"/estates/{estate.id}/notes/{note['id']}", json={"body": "Bank called"}, headers=_h(editor))
    assert r.status_code == 200
    assert client.delete(f"/estates/{estate.id}/notes/{note['id']}", headers=_h(editor)).status_code == 204

    records = _activity(client, estate, viewer, kind="note")
    assert [r["action"] for r in records] == ["deleted", "updated", "pinned", "created"]
    assert all(r["entity_id"] == note["id"] for r in records)
    assert records[-1]["message"] == "Note added: Bank"
    assert records[0]["snapshot"]["body"] == "Bank called"


def test_viewer_reads_but_cannot_write_notes(client, estate, editor, viewer):
    client.post(f"/estates/{estate.id}/notes", json={"body": "Visible"}, headers=_h(editor))
    r = client.get(f"/estates/{estate.id}/notes", headers=_h(viewer))
    assert r.status_code == 200
    assert [n["body"] for n in r.json()] == ["Visible"]

    r = client.post(f"/estates/{estate.id}/notes", json={"body": "Nope"}, headers=_h(viewer))
    assert r.status_code == 404
    assert len(_activity(client, estate, viewer)) == 1


def test_missing_note_is_not_found(client, estate, editor):
    r = client.delete(f"/estates/{estate.id}/notes/00000000-0000-0000-0000-000000000000", headers=_h(editor))
    assert r.status_code == 404


# Tasks

def test_task_status_change_is_recorded(client, estate, owner):
    r = client.post(f"/estates/{estate.id}/tasks", json={"title": "Inventory assets"}, headers=_h(owner))
    assert r.status_code == 201
    task = r.json()
    assert task["status"] == "NOT_STARTED"
    assert task["completed_at"] is None

    r = client.put(f"/estates/{estate.id}/tasks/{task['id']}", json={"status": "DONE"}, headers=_h(owner))
    assert r.status_code == 200
    assert r.json()["completed_at"] is not None

    r = client.put(f"/estates/{estate.id}/tasks/{task['id']}", json={"description": "All accounts"}, headers=_h(owner))
    assert r.status_code == 200

    records = _activity(client, estate, owner, kind="task")
    assert [r["action"] for r in records] == ["updated", "status_changed", "created"]
    assert records[1]["snapshot"] == {"from": "NOT_STARTED", "to": "DONE"}

    done = client.get(f"/estates/{estate.id}/tasks", params={"status": "DONE"}, headers=_h(owner)).json()
    assert [t["id"] for t in done] == [task["id"]]


def test_task_delete(client, estate, owner):
    task = client.post(f"/estates/{estate.id}/tasks", json={"title": "File will"}, headers=_h(owner)).json()
    assert client.delete(f"/estates/{estate.id}/tasks/{task['id']}", headers=_h(owner)).status_code == 204
    assert client.get(f"/estates/{estate.id}/tasks", headers=_h(owner)).json() == []
    assert _activity(client, estate, owner, action="deleted")[0]["message"] == "Task deleted: File will"


# Documents

def test_sensitive_documents_hidden_from_viewers(client, estate, editor, viewer):
    client.post(f"/estates/{estate.id}/documents", json={"label": "Death certificate"}, headers=_h(editor))
    client.post(
        f"/estates/{estate.id}/documents",
        json={"label": "Bank statement", "location": "Safe", "url": "https://bank.example/stmt", "is_sensitive": True},
        headers=_h(editor),
    )
    editor_view = client.get(f"/estates/{estate.id}/documents", headers=_h(editor)).json()
    viewer_view = client.get(f"/estates/{estate.id}/documents", headers=_h(viewer)).json()
    assert sorted(d["label"] for d in editor_view) == ["Bank statement", "Death certificate"]
    assert [d["label"] for d in viewer_view] == ["Death certificate"]


def test_sensitive_document_activity_omits_location(client, estate, editor, viewer):
    client.post(
        f"/estates/{estate.id}/documents",
        json={"label": "Brokerage login", "location": "Drawer 2", "notes": "PIN inside", "is_sensitive": True},
        headers=_h(editor),
    )
    snapshot = _activity(client, estate, viewer, kind="document")[0]["snapshot"]
    assert snapshot["label"] == "Brokerage login"
    assert "location" not in snapshot
    assert "notes" not in snapshot


def test_document_update_and_delete(client, estate, owner):
    doc = client.post(f"/estates/{estate.id}/documents", json={"label": "Deed"}, headers=_h(owner)).json()
    r = client.put(f"/estates/{estate.id}/documents/{doc['id']}", json={"location": "County office"}, headers=_h(owner))
    assert r.status_code == 200 and r.json()["location"] == "County office"
    assert client.delete(f"/estates/{estate.id}/documents/{doc['id']}", headers=_h(owner)).status_code == 204
    actions = [r["action"] for r in _activity(client, estate, owner, kind="document")]
    assert actions == ["deleted", "updated", "created"]


# Invoices

def test_invoice_status_change(client, estate, editor, viewer):
    r = client.post(
        f"/estates/{estate.id}/invoices",
        json={"invoice_number": "INV-7", "total_amount": "1250.00"},
        headers=_h(editor),
    )
    assert r.status_code == 201
    invoice = r.json()
    assert invoice["status"] == "DRAFT"

    r = client.post(f"/estates/{estate.id}/invoices/{invoice['id']}/status", json={"status": "PAID"}, headers=_h(editor))
    assert r.status_code == 200
    assert r.json()["status"] == "PAID"
    assert r.json()["paid_at"] is not None

    records = _activity(client, estate, viewer, kind="invoice", action="status_changed")
    assert len(records) == 1
    assert records[0]["snapshot"] == {"from": "DRAFT", "to": "PAID"}
    assert records[0]["message"] == "Invoice INV-7 marked PAID"

    # Re-applying the current status records nothing new
    client.post(f"/estates/{estate.id}/invoices/{invoice['id']}/status", json={"status": "PAID"}, headers=_h(editor))
    assert len(_activity(client, estate, viewer, kind="invoice")) == 2


def test_invoice_rejects_unknown_status(client, estate, owner):
    invoice = client.post(f"/estates/{estate.id}/invoices", json={}, headers=_h(owner)).json()
    r = client.post(f"/estates/{estate.id}/invoices/{invoice['id']}/status", json={"status": "LOST"}, headers=_h(owner))
    assert r.status_code == 422


def test_invoice_list_filters_by_status(client, estate, owner):
    first = client.post(f"/estates/{estate.id}/invoices", json={"invoice_number": "A"}, headers=_h(owner)).json()
    client.post(f"/estates/{estate.id}/invoices", json={"invoice_number": "B"}, headers=_h(owner))
    client.post(f"/estates/{estate.id}/invoices/{first['id']}/status", json={"status": "SENT"}, headers=_h(owner))
    sent = client.get(f"/estates/{estate.id}/invoices", params={"status": "SENT"}, headers=_h(owner)).json()
    assert [i["invoice_number"] for i in sent] == ["A"]


def test_invoice_read_update_delete(client, estate, editor, viewer):
    invoice = client.post(
        f"/estates/{estate.id}/invoices",
        json={"invoice_number": "INV-9", "total_amount": "80.00"},
        headers=_h(editor),
    ).json()
    url = f"/estates/{estate.id}/invoices/{invoice['id']}"

    r = client.get(url, headers=_h(viewer))
    assert r.status_code == 200 and r.json()["invoice_number"] == "INV-9"

    r = client.put(url, json={"total_amount": "95.50", "notes": "Court filing fee"}, headers=_h(editor))
    assert r.status_code == 200
    assert float(r.json()["total_amount"]) == 95.5
    assert r.json()["status"] == "DRAFT"

    r = client.put(url, json={"status": "PAID"}, headers=_h(editor))
    assert r.json()["status"] == "PAID" and r.json()["paid_at"] is not None

    assert client.put(url, json={"notes": "x"}, headers=_h(viewer)).status_code == 404
    assert client.delete(url, headers=_h(viewer)).status_code == 404
    assert client.delete(url, headers=_h(editor)).status_code == 204
    assert client.get(url, headers=_h(editor)).status_code == 404

    records = _activity(client, estate, viewer, kind="invoice")
    assert [r["action"] for r in records] == ["deleted", "status_changed", "updated", "created"]
    assert records[1]["snapshot"] == {"from": "DRAFT", "to": "PAID"}
    assert records[2]["snapshot"]["notes"] == "Court filing fee"
    assert records[0]["message"] == "Invoice INV-9 deleted"


def test_invoice_from_another_estate_is_not_found(client, db, estate, owner):
    other = models.Estate(owner_id=owner.id, label="Other")
    db.add(other)
    db.commit()
    invoice = client.post(f"/estates/{other.id}/invoices", json={}, headers=_h(owner)).json()
    assert client.get(f"/estates/{estate.id}/invoices/{invoice['id']}", headers=_h(owner)).status_code == 404
