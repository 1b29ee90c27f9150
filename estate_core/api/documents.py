"""
Estate documents API endpoints.

Documents flagged ``is_sensitive`` are only listed for callers whose access
carries ``can_view_sensitive``. Their activity snapshots never include the
location, url or notes fields, since every collaborator can read the trail.
"""
import uuid
from typing import Any, Dict, List

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

router = APIRouter(prefix="/estates", tags=["documents"])

_SENSITIVE_FIELDS = ("location", "url", "notes")


def _load_document(db: Session, estate_id: uuid.UUID, document_id: uuid.UUID) -> models.EstateDocument:
    document = record_repo.get_document(db, estate_id, document_id)
    if document is None:
        raise NotFoundError(f"document {document_id}")
    return document


def _document_snapshot(document: models.EstateDocument) -> Dict[str, Any]:
    snapshot = snapshot_of(schemas.Document, document)
    if document.is_sensitive:
        for field in _SENSITIVE_FIELDS:
            snapshot.pop(field, None)
    return snapshot


def _record(audit_logger: AuditLogger, snapshot: Dict[str, Any], action: ActivityAction, verb: str):
    record_activity(
        audit_logger,
        estate_id=uuid.UUID(snapshot["estate_id"]),
        owner_id=uuid.UUID(snapshot["owner_id"]),
        kind=ActivityKind.DOCUMENT,
        action=action,
        entity_id=snapshot["id"],
        message=f"Document {verb}: {snapshot['label']}",
        snapshot=snapshot,
    )


@router.get("/{estate_id}/documents", response_model=List[schemas.Document])
def list_documents(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    access = resolver.require_access(estate_id, current_user.id)
    return record_repo.get_documents(db, estate_id, include_sensitive=access.can_view_sensitive)


@router.post("/{estate_id}/documents", response_model=schemas.Document, status_code=status.HTTP_201_CREATED)
def create_document(
    estate_id: uuid.UUID,
    payload: schemas.DocumentCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    estate = estate_repo.require_estate(db, estate_id)
    document = record_repo.create_document(db, estate_id, estate.owner_id, payload)
    _record(audit_logger, _document_snapshot(document), ActivityAction.CREATED, "added")
    return document


@router.put("/{estate_id}/documents/{document_id}", response_model=schemas.Document)
def update_document(
    estate_id: uuid.UUID,
    document_id: uuid.UUID,
    payload: schemas.DocumentUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    access = resolver.require_edit_access(estate_id, current_user.id)
    document = _load_document(db, estate_id, document_id)
    if document.is_sensitive and not access.can_view_sensitive:
        raise NotFoundError(f"document {document_id}")
    document = record_repo.update_document(db, document, payload)
    _record(audit_logger, _document_snapshot(document), ActivityAction.UPDATED, "updated")
    return document


@router.delete("/{estate_id}/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_document(
    estate_id: uuid.UUID,
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    access = resolver.require_edit_access(estate_id, current_user.id)
    document = _load_document(db, estate_id, document_id)
    if document.is_sensitive and not access.can_view_sensitive:
        raise NotFoundError(f"document {document_id}")
    snapshot = _document_snapshot(document)
    record_repo.delete_document(db, document)
    _record(audit_logger, snapshot, ActivityAction.DELETED, "deleted")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

