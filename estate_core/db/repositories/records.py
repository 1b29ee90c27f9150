"""
Repository functions for estate sub-resources (notes, tasks, documents,
invoices).

Each function persists its own entity only; activity logging is the caller's
separate step.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy.orm import Session

from estate_core.db import schemas, models


def _create(db: Session, model, estate_id: uuid.UUID, owner_id: uuid.UUID, payload):
    row = model(estate_id=estate_id, owner_id=owner_id, **payload.model_dump())
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def _get(db: Session, model, estate_id: uuid.UUID, entity_id: uuid.UUID):
    return (
        db.query(model)
        .filter(model.id == entity_id, model.estate_id == estate_id)
        .first()
    )


def _apply_update(db: Session, row, payload):
    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return row


def _delete(db: Session, row) -> None:
    db.delete(row)
    db.commit()


# Notes

def create_note(db: Session, estate_id: uuid.UUID, owner_id: uuid.UUID, note: schemas.NoteCreate):
    return _create(db, models.EstateNote, estate_id, owner_id, note)


def get_note(db: Session, estate_id: uuid.UUID, note_id: uuid.UUID):
    return _get(db, models.EstateNote, estate_id, note_id)


def get_notes(db: Session, estate_id: uuid.UUID):
    return (
        db.query(models.EstateNote)
        .filter(models.EstateNote.estate_id == estate_id)
        .order_by(models.EstateNote.pinned.desc(), models.EstateNote.created_at.desc())
        .all()
    )


def update_note(db: Session, note: models.EstateNote, payload: schemas.NoteUpdate):
    return _apply_update(db, note, payload)


def delete_note(db: Session, note: models.EstateNote) -> None:
    _delete(db, note)


# Tasks

def create_task(db: Session, estate_id: uuid.UUID, owner_id: uuid.UUID, task: schemas.TaskCreate):
    row = _create(db, models.EstateTask, estate_id, owner_id, task)
    if row.status == "DONE" and row.completed_at is None:
        row.completed_at = models.now_utc()
        db.commit()
        db.refresh(row)
    return row


def get_task(db: Session, estate_id: uuid.UUID, task_id: uuid.UUID):
    return _get(db, models.EstateTask, estate_id, task_id)


def get_tasks(db: Session, estate_id: uuid.UUID, status: Optional[str] = None):
    query = db.query(models.EstateTask).filter(models.EstateTask.estate_id == estate_id)
    if status:
        query = query.filter(models.EstateTask.status == status)
    return query.order_by(models.EstateTask.due_date.asc(), models.EstateTask.created_at.desc()).all()


def update_task(db: Session, task: models.EstateTask, payload: schemas.TaskUpdate):
    changes = payload.model_dump(exclude_unset=True)
    if "status" in changes:
        if changes["status"] == "DONE" and task.status != "DONE":
            task.completed_at = models.now_utc()
        elif changes["status"] != "DONE":
            task.completed_at = None
    return _apply_update(db, task, payload)


def delete_task(db: Session, task: models.EstateTask) -> None:
    _delete(db, task)


# Documents

def create_document(db: Session, estate_id: uuid.UUID, owner_id: uuid.UUID, document: schemas.DocumentCreate):
    return _create(db, models.EstateDocument, estate_id, owner_id, document)


def get_document(db: Session, estate_id: uuid.UUID, document_id: uuid.UUID):
    return _get(db, models.EstateDocument, estate_id, document_id)


def get_documents(db: Session, estate_id: uuid.UUID, include_sensitive: bool = True):
    query = db.query(models.EstateDocument).filter(models.EstateDocument.estate_id == estate_id)
    if not include_sensitive:
        query = query.filter(models.EstateDocument.is_sensitive.is_(False))
    return query.order_by(models.EstateDocument.created_at.desc()).all()


def update_document(db: Session, document: models.EstateDocument, payload: schemas.DocumentUpdate):
    return _apply_update(db, document, payload)


def delete_document(db: Session, document: models.EstateDocument) -> None:
    _delete(db, document)


# Invoices

def create_invoice(db: Session, estate_id: uuid.UUID, owner_id: uuid.UUID, invoice: schemas.InvoiceCreate):
    return _create(db, models.Invoice, estate_id, owner_id, invoice)


def get_invoice(db: Session, estate_id: uuid.UUID, invoice_id: uuid.UUID):
    return _get(db, models.Invoice, estate_id, invoice_id)


def get_invoices(db: Session, estate_id: uuid.UUID, status: Optional[str] = None):
    query = db.query(models.Invoice).filter(models.Invoice.estate_id == estate_id)
    if status:
        query = query.filter(models.Invoice.status == status)
    return query.order_by(models.Invoice.created_at.desc()).all()


def set_invoice_status(db: Session, invoice: models.Invoice, status: str):
    invoice.status = status
    invoice.paid_at = models.now_utc() if status == "PAID" else None
    db.commit()
    db.refresh(invoice)
    return invoice


def update_invoice(db: Session, invoice: models.Invoice, payload: schemas.InvoiceUpdate):
    changes = payload.model_dump(exclude_unset=True)
    new_status = changes.pop("status", None)
    for key, value in changes.items():
        setattr(invoice, key, value)
    if new_status is not None and new_status != invoice.status:
        return set_invoice_status(db, invoice, new_status)
    db.commit()
    db.refresh(invoice)
    return invoice


def delete_invoice(db: Session, invoice: models.Invoice) -> None:
    _delete(db, invoice)
