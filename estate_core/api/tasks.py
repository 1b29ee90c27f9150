"""
Estate tasks API endpoints.

Status transitions are recorded as ``status_changed`` activity with the
before/after values; other edits are ``updated``.
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
from estate_core.db.schemas.records import TaskStatus
from estate_core.exceptions import NotFoundError

router = APIRouter(prefix="/estates", tags=["tasks"])


def _load_task(db: Session, estate_id: uuid.UUID, task_id: uuid.UUID) -> models.EstateTask:
    task = record_repo.get_task(db, estate_id, task_id)
    if task is None:
        raise NotFoundError(f"task {task_id}")
    return task


@router.get("/{estate_id}/tasks", response_model=List[schemas.Task])
def list_tasks(
    estate_id: uuid.UUID,
    status_filter: Optional[TaskStatus] = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_access(estate_id, current_user.id)
    return record_repo.get_tasks(db, estate_id, status=status_filter)


@router.post("/{estate_id}/tasks", response_model=schemas.Task, status_code=status.HTTP_201_CREATED)
def create_task(
    estate_id: uuid.UUID,
    payload: schemas.TaskCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    estate = estate_repo.require_estate(db, estate_id)
    task = record_repo.create_task(db, estate_id, estate.owner_id, payload)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=estate.owner_id,
        kind=ActivityKind.TASK,
        action=ActivityAction.CREATED,
        entity_id=task.id,
        message=f"Task created: {task.title}",
        snapshot=snapshot_of(schemas.Task, task),
    )
    return task


@router.put("/{estate_id}/tasks/{task_id}", response_model=schemas.Task)
def update_task(
    estate_id: uuid.UUID,
    task_id: uuid.UUID,
    payload: schemas.TaskUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    task = _load_task(db, estate_id, task_id)
    previous_status = task.status
    task = record_repo.update_task(db, task, payload)

    if task.status != previous_status:
        action = ActivityAction.STATUS_CHANGED
        message = f"Task {task.title} moved from {previous_status} to {task.status}"
        snapshot = {"from": previous_status, "to": task.status}
    else:
        action = ActivityAction.UPDATED
        message = f"Task updated: {task.title}"
        snapshot = snapshot_of(schemas.Task, task)

    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=task.owner_id,
        kind=ActivityKind.TASK,
        action=action,
        entity_id=task.id,
        message=message,
        snapshot=snapshot,
    )
    return task


@router.delete("/{estate_id}/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    estate_id: uuid.UUID,
    task_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    audit_logger: AuditLogger = Depends(get_audit_logger),
):
    resolver.require_edit_access(estate_id, current_user.id)
    task = _load_task(db, estate_id, task_id)
    snapshot = snapshot_of(schemas.Task, task)
    title, owner_id = task.title, task.owner_id
    record_repo.delete_task(db, task)
    record_activity(
        audit_logger,
        estate_id=estate_id,
        owner_id=owner_id,
        kind=ActivityKind.TASK,
        action=ActivityAction.DELETED,
        entity_id=task_id,
        message=f"Task deleted: {title}",
        snapshot=snapshot,
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
