"""
Activity trail repository.

Implements the append/query store contract over SQLAlchemy. Rows are only
ever inserted; there is no update or delete path.
"""
from __future__ import annotations

import uuid
from datetime import UTC
from typing import Optional, Sequence

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from estate_core.db import models
from estate_core.db.ports import ActivityFilter, ActivityRecord, CursorKey
from estate_core.exceptions import StoreUnavailableError


def _as_aware(value):
    # SQLite drops tzinfo; every stored timestamp is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def to_record(row: models.EstateActivity) -> ActivityRecord:
    return ActivityRecord(
        id=row.id,
        estate_id=row.estate_id,
        owner_id=row.owner_id,
        kind=row.kind,
        action=row.action,
        entity_id=row.entity_id,
        message=row.message,
        created_at=_as_aware(row.created_at),
        snapshot=row.snapshot,
    )


class SqlActivityStore:
    """ActivityStore backed by the ``estate_activity`` table."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, record: ActivityRecord) -> ActivityRecord:
        row = models.EstateActivity(
            id=record.id,
            estate_id=record.estate_id,
            owner_id=record.owner_id,
            kind=record.kind,
            action=record.action,
            entity_id=record.entity_id,
            message=record.message,
            snapshot=record.snapshot,
            created_at=record.created_at,
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreUnavailableError(f"activity insert failed: {exc}") from exc
        return record

    def _filtered(self, query, activity_filter: ActivityFilter, before: Optional[CursorKey], limit: int):
        Activity = models.EstateActivity
        if activity_filter.kind:
            query = query.filter(Activity.kind == activity_filter.kind)
        if activity_filter.action:
            query = query.filter(Activity.action == activity_filter.action)
        if before is not None:
            # Keyset: (created_at, id) strictly below the cursor
            query = query.filter(
                or_(
                    Activity.created_at < before.created_at,
                    and_(Activity.created_at == before.created_at, Activity.id < before.id),
                )
            )
        try:
            rows = query.order_by(Activity.created_at.desc(), Activity.id.desc()).limit(limit).all()
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"activity query failed: {exc}") from exc
        return [to_record(row) for row in rows]

    def query(
        self,
        estate_id: uuid.UUID,
        activity_filter: ActivityFilter,
        before: Optional[CursorKey],
        limit: int,
    ) -> list[ActivityRecord]:
        Activity = models.EstateActivity
        query = self.db.query(Activity).filter(Activity.estate_id == estate_id)
        return self._filtered(query, activity_filter, before, limit)

    def query_estates(
        self,
        estate_ids: Sequence[uuid.UUID],
        activity_filter: ActivityFilter,
        before: Optional[CursorKey],
        limit: int,
    ) -> list[ActivityRecord]:
        if not estate_ids:
            return []
        Activity = models.EstateActivity
        query = self.db.query(Activity).filter(Activity.estate_id.in_(list(estate_ids)))
        return self._filtered(query, activity_filter, before, limit)
