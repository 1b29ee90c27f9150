"""Store contracts for the access resolver and the activity trail.

Components receive these at construction time; the SQLAlchemy
implementations live in ``estate_core.db.repositories`` and tests use
in-memory fakes.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Protocol, Sequence


@dataclass(frozen=True)
class CollaboratorEntry:
    """One collaborator row; ``role`` is the raw stored string."""

    user_id: uuid.UUID
    role: str


@dataclass(frozen=True)
class EstateAccessProjection:
    """The only estate fields needed to decide access."""

    owner_id: uuid.UUID
    collaborators: tuple[CollaboratorEntry, ...] = ()


@dataclass(frozen=True)
class ActivityRecord:
    """Immutable history entry for one change to an estate sub-resource."""

    id: uuid.UUID
    estate_id: uuid.UUID
    owner_id: uuid.UUID
    kind: str
    action: str
    entity_id: str
    message: str
    created_at: datetime
    snapshot: Optional[dict[str, Any]] = field(default=None)

    @property
    def sort_key(self) -> "CursorKey":
        return CursorKey(created_at=self.created_at, id=self.id)


@dataclass(frozen=True)
class ActivityFilter:
    """Narrowing predicate applied before pagination."""

    kind: Optional[str] = None
    action: Optional[str] = None


@dataclass(frozen=True, order=True)
class CursorKey:
    """Ordering key of the activity trail; records sort descending by it."""

    created_at: datetime
    id: uuid.UUID


class EstateStore(Protocol):
    """Read contract against estate storage."""

    def fetch_estate_access_projection(self, estate_id: uuid.UUID) -> Optional[EstateAccessProjection]:
        """Return owner and ordered collaborators, or None if the estate is missing."""


class ActivityStore(Protocol):
    """Append/query contract against activity storage."""

    def insert(self, record: ActivityRecord) -> ActivityRecord:
        """Persist one record and return it as stored."""

    def query(
        self,
        estate_id: uuid.UUID,
        activity_filter: ActivityFilter,
        before: Optional[CursorKey],
        limit: int,
    ) -> list[ActivityRecord]:
        """Return up to ``limit`` records ordered by (created_at, id) descending,
        strictly below ``before`` when given."""

    def query_estates(
        self,
        estate_ids: Sequence[uuid.UUID],
        activity_filter: ActivityFilter,
        before: Optional[CursorKey],
        limit: int,
    ) -> list[ActivityRecord]:
        """Same ordering as ``query``, merged across several estates."""
