"""
Estate notes API endpoints.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from estate_core.api.activity import record_activity, snapshot_of
from estate_core.api.deps import get_access_resolver, get_audit_logger, get_current_user
from estate_core.api.permissions import AccessResolver
from estate_core.audit import ActivityAction, ActivityKind, AuditLogger
from estate_core.db import models, schemas
from estate_core.db.database import get_db
from estate_core.db.repositories import estates as estate_repo
from estate_core.db.repositories import records as record_repo
from estate_core.exceptions import NotFoundError

router = APIRouter(prefix="/estates", tags=["notes"])


def _load_note(db: Session, estate_id: uuid.UUID, note_id: uuid.UUID) -> models.EstateNote:
    note = record_repo.get_note(db, estate_id, note_id)
    if note is None:
        raise NotFoundError(f"note {note_id}")
    return note


def _note_message(note: models.EstateNote, verb: str) -> str:
    return f"Note {verb}: {note.subject or note.body[:60]}"


@router.get("/{estate_id}/notes", response_model=List[schemas.Note])
def list_notes(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_access(estate_id, current_user.id)
    return record_repo.get_notes(db, estate_id)


@router.post("/{estate_id}/notes", response_model=schemas.Note, status_code=status.HTTP_201_CREATED)
def create_note(
    estate_id: uuid.UUID,
    payload: schemas.NoteCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    estate = estate_repo.require_estate(db, estate_id)
    note = record_repo.create_note(db, estate_id, estate.owner_id, payload)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=estate.owner_id,
        kind=ActivityKind.NOTE,
        action=ActivityAction.CREATED,
        entity_id=note.id,
        message=_note_message(note, "added"),
        snapshot=snapshot_of(schemas.Note, note),
    )
    return note


@router.put("/{estate_id}/notes/{note_id}", response_model=schemas.Note)
def update_note(
    estate_id: uuid.UUID,
    note_id: uuid.UUID,
    payload: schemas.NoteUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    note = _load_note(db, estate_id, note_id)
    was_pinned = note.pinned
    note = record_repo.update_note(db, note, payload)

    # A pure pin toggle is reported as its own action
    changes = payload.model_dump(exclude_unset=True)
    if set(changes) == {"pinned"} and note.pinned != was_pinned:
        action = ActivityAction.PINNED if note.pinned else ActivityAction.UNPINNED
        verb = "pinned" if note.pinned else "unpinned"
    else:
        action, verb = ActivityAction.UPDATED, "updated"

    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=note.owner_id,
        kind=ActivityKind.NOTE,
        action=action,
        entity_id=note.id,
        message=_note_message(note, verb),
        snapshot=snapshot_of(schemas.Note, note),
    )
    return note


@router.delete("/{estate_id}/notes/{note_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_note(
    estate_id: uuid.UUID,
    note_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    note = _load_note(db, estate_id, note_id)
    snapshot = snapshot_of(schemas.Note, note)
    message = _note_message(note, "deleted")
    owner_id = note.owner_id
    record_repo.delete_note(db, note)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=owner_id,
        kind=ActivityKind.NOTE,
        action=ActivityAction.DELETED,
        entity_id=note_id,
        message=message,
        snapshot=snapshot,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
