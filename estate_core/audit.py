"""
Activity audit trail: kinds, actions and the append-only logger.

The logger validates and appends exactly one record per call. It is called
after the primary mutation has been persisted and is not part of that
mutation's transaction.
"""
from __future__ import annotations

import logging
import uuid
from enum import Enum
from typing import Any, Callable, Dict, Optional
from datetime import datetime

from estate_core.db.models.base import now_utc
from estate_core.db.ports import ActivityRecord, ActivityStore
from estate_core.exceptions import (
    ActivityValidationError,
    AuditWriteFailed,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)


class ActivityKind(str, Enum):
    INVOICE = "invoice"
    DOCUMENT = "document"
    TASK = "task"
    NOTE = "note"


class ActivityAction(str, Enum):
    """Common verbs; any non-empty action string is accepted."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"
    PINNED = "pinned"
    UNPINNED = "unpinned"


ACTIVITY_KINDS = frozenset(k.value for k in ActivityKind)


def _enum_value(value) -> Any:
    # Persist pure string values, not Enum reprs
    return value.value if isinstance(value, Enum) else value


def _required_text(field: str, value) -> str:
    if not isinstance(value, str):
        raise ActivityValidationError(field, "must be a string")
    cleaned = value.strip()
    if not cleaned:
        raise ActivityValidationError(field, "must not be empty")
    return cleaned


class AuditLogger:
    """Append-only writer for estate activity records.

    There is intentionally no update or delete method; corrections are new
    records.
    """

    def __init__(self, activity_store: ActivityStore, clock: Callable[[], datetime] = now_utc):
        self.activity_store = activity_store
        self.clock = clock

    def append(
        self,
        *,
        estate_id: uuid.UUID,
        owner_id: uuid.UUID,
        kind: ActivityKind | str,
        action: ActivityAction | str,
        entity_id: uuid.UUID | str,
        message: str,
        snapshot: Optional[Dict[str, Any]] = None,
    ) -> ActivityRecord:
        """Validate and append one activity record.

        Raises:
            ActivityValidationError: input failed field constraints; nothing was written.
            AuditWriteFailed: the store rejected the write. Non-fatal for the caller.
        """
        kind_value = _enum_value(kind)
        if kind_value not in ACTIVITY_KINDS:
            raise ActivityValidationError("kind", f"must be one of {sorted(ACTIVITY_KINDS)}")
        action_value = _required_text("action", _enum_value(action))
        entity_value = _required_text("entity_id", str(entity_id) if isinstance(entity_id, uuid.UUID) else entity_id)
        message_value = _required_text("message", message)
        if snapshot is not None and not isinstance(snapshot, dict):
            raise ActivityValidationError("snapshot", "must be a mapping")

        record = ActivityRecord(
            id=uuid.uuid4(),
            estate_id=estate_id,
            owner_id=owner_id,
            kind=kind_value,
            action=action_value,
            entity_id=entity_value,
            message=message_value,
            created_at=self.clock(),
            snapshot=dict(snapshot) if snapshot is not None else None,
        )
        try:
            return self.activity_store.insert(record)
        except StoreUnavailableError as exc:
            logger.warning(
                "activity_append_failed estate_id=%s kind=%s action=%s entity_id=%s: %s",
                estate_id, kind_value, action_value, entity_value, exc,
            )
            raise AuditWriteFailed(str(exc)) from exc


__all__ = ["ActivityKind", "ActivityAction", "ACTIVITY_KINDS", "AuditLogger"]
