"""
Estate invoices API endpoints.
"""
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from estate_core.api.activity import record_activity, snapshot_of
from estate_core.api.deps import get_access_resolver, get_audit_logger, get_current_user
from estate_core.api.permissions import AccessResolver
from estate_core.audit import ActivityAction, ActivityKind, AuditLogger
from estate_core.db import models, schemas
from estate_core.db.database import get_db
from estate_core.db.repositories import estates as estate_repo
from estate_core.db.repositories import records as record_repo
from estate_core.db.schemas.records import InvoiceStatus
from estate_core.exceptions import NotFoundError

router = APIRouter(prefix="/estates", tags=["invoices"])


def _invoice_label(invoice: models.Invoice) -> str:
    return invoice.invoice_number or str(invoice.id)[:8]


@router.get("/{estate_id}/invoices", response_model=List[schemas.Invoice])
def list_invoices(
    estate_id: uuid.UUID,
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_access(estate_id, current_user.id)
    return record_repo.get_invoices(db, estate_id, status=status_filter)


@router.post("/{estate_id}/invoices", response_model=schemas.Invoice, status_code=status.HTTP_201_CREATED)
def create_invoice(
    estate_id: uuid.UUID,
    payload: schemas.InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    estate = estate_repo.require_estate(db, estate_id)
    invoice = record_repo.create_invoice(db, estate_id, estate.owner_id, payload)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=estate.owner_id,
        kind=ActivityKind.INVOICE,
        action=ActivityAction.CREATED,
        entity_id=invoice.id,
        message=f"Invoice {_invoice_label(invoice)} created",
        snapshot=snapshot_of(schemas.Invoice, invoice),
    )
    return invoice


def _load_invoice(db: Session, estate_id: uuid.UUID, invoice_id: uuid.UUID) -> models.Invoice:
    invoice = record_repo.get_invoice(db, estate_id, invoice_id)
    if invoice is None:
        raise NotFoundError(f"invoice {invoice_id}")
    return invoice


@router.get("/{estate_id}/invoices/{invoice_id}", response_model=schemas.Invoice)
def get_invoice(
    estate_id: uuid.UUID,
    invoice_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_access(estate_id, current_user.id)
    return _load_invoice(db, estate_id, invoice_id)


@router.put("/{estate_id}/invoices/{invoice_id}", response_model=schemas.Invoice)
def update_invoice(
    estate_id: uuid.UUID,
    invoice_id: uuid.UUID,
    payload: schemas.InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    invoice = _load_invoice(db, estate_id, invoice_id)
    previous_status = invoice.status
    only_status = payload.model_fields_set <= {"status"}
    invoice = record_repo.update_invoice(db, invoice, payload)

    if invoice.status != previous_status and only_status:
        action = ActivityAction.STATUS_CHANGED
        message = f"Invoice {_invoice_label(invoice)} marked {invoice.status}"
        snapshot = {"from": previous_status, "to": invoice.status}
    else:
        action = ActivityAction.UPDATED
        message = f"Invoice {_invoice_label(invoice)} updated"
        snapshot = snapshot_of(schemas.Invoice, invoice)

    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=invoice.owner_id,
        kind=ActivityKind.INVOICE,
        action=action,
        entity_id=invoice.id,
        message=message,
        snapshot=snapshot,
    )
    return invoice


@router.delete("/{estate_id}/invoices/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_invoice(
    estate_id: uuid.UUID,
    invoice_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    invoice = _load_invoice(db, estate_id, invoice_id)
    snapshot = snapshot_of(schemas.Invoice, invoice)
    label, owner_id = _invoice_label(invoice), invoice.owner_id
    record_repo.delete_invoice(db, invoice)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=owner_id,
        kind=ActivityKind.INVOICE,
        action=ActivityAction.DELETED,
        entity_id=invoice_id,
        message=f"Invoice {label} deleted",
        snapshot=snapshot,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{estate_id}/invoices/{invoice_id}/status", response_model=schemas.Invoice)
def change_invoice_status(
    estate_id: uuid.UUID,
    invoice_id: uuid.UUID,
    payload: schemas.InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    invoice = _load_invoice(db, estate_id, invoice_id)
    previous_status = invoice.status
    if previous_status == payload.status:
        return invoice

    invoice = record_repo.set_invoice_status(db, invoice, payload.status)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=invoice.owner_id,
        kind=ActivityKind.INVOICE,
        action=ActivityAction.STATUS_CHANGED,
        entity_id=invoice.id,
        message=f"Invoice {_invoice_label(invoice)} marked {payload.status}",
        snapshot={"from": previous_status, "to": invoice.status},
    )
    return invoice
