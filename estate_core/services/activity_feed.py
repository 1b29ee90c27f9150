"""Reverse-chronological, cursor-paginated reads of the activity trail.

Pages are ordered by ``(created_at, id)`` descending. The cursor names the
last record already returned, so records appended after a page was served
never shift later pages.
"""

from __future__ import annotations

import base64
import binascii
import json
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import List, Optional, Sequence

from estate_core.db.ports import ActivityFilter, ActivityRecord, ActivityStore, CursorKey
from estate_core.exceptions import InvalidCursorError
from estate_core.utils.settings import get_settings


@dataclass(frozen=True)
class ActivityPage:
    records: List[ActivityRecord]
    next_cursor: Optional[str] = None


def encode_cursor(key: CursorKey) -> str:
    """Return the opaque URL-safe cursor for an ordering key."""
    payload = json.dumps({"at": key.created_at.isoformat(), "id": key.id.hex}, separators=(",", ":"))
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii").rstrip("=")


def decode_cursor(cursor: str) -> CursorKey:
    """Parse a cursor produced by :func:`encode_cursor`.

    Raises:
        InvalidCursorError: if the value is not a cursor we issued.
    """
    padded = cursor + "=" * (-len(cursor) % 4)
    try:
        data = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise InvalidCursorError("invalid activity cursor") from exc
    if not isinstance(data, dict) or not isinstance(data.get("at"), str) or not isinstance(data.get("id"), str):
        raise InvalidCursorError("invalid activity cursor")
    try:
        created_at = datetime.fromisoformat(data["at"])
        key_id = uuid.UUID(hex=data["id"])
    except ValueError as exc:
        raise InvalidCursorError("invalid activity cursor") from exc
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    # Stored timestamps are UTC; SQLite compares them without an offset
    return CursorKey(created_at=created_at.astimezone(UTC), id=key_id)


def clamp_limit(limit: Optional[int]) -> int:
    settings = get_settings()
    if limit is None:
        return settings.activity_page_default
    return max(1, min(int(limit), settings.activity_page_max))


class ActivityQuery:
    """Read-only view over the activity trail."""

    def __init__(self, activity_store: ActivityStore):
        self.activity_store = activity_store

    def list(
        self,
        estate_id: uuid.UUID,
        activity_filter: Optional[ActivityFilter] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> ActivityPage:
        """Return one page of an estate's records strictly older than ``cursor``.

        ``limit`` counts records after filtering; ``next_cursor`` is None once
        the trail is exhausted.
        """
        return self._page(
            lambda flt, before, size: self.activity_store.query(estate_id, flt, before, size),
            activity_filter,
            cursor,
            limit,
        )

    def list_for_estates(
        self,
        estate_ids: Sequence[uuid.UUID],
        activity_filter: Optional[ActivityFilter] = None,
        cursor: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> ActivityPage:
        """One merged, newest-first page across ``estate_ids``."""
        estate_ids = list(estate_ids)
        return self._page(
            lambda flt, before, size: self.activity_store.query_estates(estate_ids, flt, before, size),
            activity_filter,
            cursor,
            limit,
        )

    def _page(self, fetch, activity_filter, cursor, limit) -> ActivityPage:
        page_size = clamp_limit(limit)
        before = decode_cursor(cursor) if cursor else None
        # One extra row tells us whether another page exists
        rows = fetch(activity_filter or ActivityFilter(), before, page_size + 1)
        has_more = len(rows) > page_size
        records = rows[:page_size]
        next_cursor = encode_cursor(records[-1].sort_key) if has_more and records else None
        return ActivityPage(records=records, next_cursor=next_cursor)
