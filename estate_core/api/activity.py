"""
Activity feed endpoints and the route-side logging helper.

Any caller with access to an estate can read its full trail. ``GET /activity``
merges the trails of every estate the caller can open. Mutations in other
routers record their history through ``record_activity``.
"""
import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from estate_core.api.deps import get_access_resolver, get_activity_query, get_current_user
from estate_core.api.permissions import AccessResolver
from estate_core.audit import ActivityKind, AuditLogger
from estate_core.db import models, schemas
from estate_core.db.database import get_db
from estate_core.db.ports import ActivityFilter, ActivityRecord
from estate_core.db.repositories import estates as estate_repo
from estate_core.exceptions import ActivityValidationError, AuditWriteFailed
from estate_core.services.activity_feed import ActivityQuery

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estates", tags=["activity"])


def record_activity(audit_logger: AuditLogger, **fields) -> Optional[ActivityRecord]:
    """Append one activity record after a mutation has been committed.

    The mutation stands even when the history entry cannot be written.
    """
    try:
        return audit_logger.append(**fields)
    except AuditWriteFailed as exc:
        logger.warning(
            "activity_not_recorded estate_id=%s kind=%s action=%s: %s",
            fields.get("estate_id"), fields.get("kind"), fields.get("action"), exc,
        )
    except ActivityValidationError as exc:
        logger.error(
            "activity_rejected estate_id=%s field=%s: %s",
            fields.get("estate_id"), exc.field, exc,
        )
    return None


def snapshot_of(schema_cls, row) -> Dict[str, Any]:
    return schema_cls.model_validate(row).model_dump(mode="json")


@router.get("/{estate_id}/activity", response_model=schemas.ActivityPage)
def list_estate_activity(
    estate_id: uuid.UUID,
    kind: Optional[ActivityKind] = Query(default=None),
    action: Optional[str] = Query(default=None, min_length=1),
    cursor: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    activity_query: ActivityQuery = Depends(get_activity_query),
):
    resolver.require_access(estate_id, current_user.id)
    activity_filter = ActivityFilter(kind=kind.value if kind else None, action=action)
    return activity_query.list(estate_id, activity_filter=activity_filter, cursor=cursor, limit=limit)


feed_router = APIRouter(tags=["activity"])


@feed_router.get("/activity", response_model=schemas.ActivityPage)
def list_activity(
    estate_id: Optional[uuid.UUID] = Query(default=None),
    kind: Optional[ActivityKind] = Query(default=None),
    action: Optional[str] = Query(default=None, min_length=1),
    cursor: Optional[str] = Query(default=None),
    limit: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
    activity_query: ActivityQuery = Depends(get_activity_query),
):
    """Activity across every estate the caller can open, newest first."""
    if estate_id is not None:
        resolver.require_access(estate_id, current_user.id)
        estate_ids = [estate_id]
    else:
        estate_ids = estate_repo.get_estate_ids_for_user(db, current_user.id)
    activity_filter = ActivityFilter(kind=kind.value if kind else None, action=action)
    return activity_query.list_for_estates(estate_ids, activity_filter=activity_filter, cursor=cursor, limit=limit)
