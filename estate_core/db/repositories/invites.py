"""
Collaborator invite repository functions.

Expiry is evaluated lazily: a pending invite past ``expires_at`` is stored as
EXPIRED the next time it is read through these helpers.
"""
from __future__ import annotations

import secrets
import uuid
from datetime import UTC, datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from estate_core.db import models

PENDING = "PENDING"
ACCEPTED = "ACCEPTED"
REVOKED = "REVOKED"
EXPIRED = "EXPIRED"


def _as_aware(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def new_token() -> str:
    return secrets.token_hex(24)


def is_expired(invite: models.EstateInvite, now: datetime) -> bool:
    return invite.status == PENDING and _as_aware(invite.expires_at) <= now


def expire_if_stale(db: Session, invite: models.EstateInvite, now: datetime) -> bool:
    """Persist EXPIRED for a lapsed pending invite; return True if it lapsed."""
    if not is_expired(invite, now):
        return False
    invite.status = EXPIRED
    db.commit()
    db.refresh(invite)
    return True


def get_invites(db: Session, estate_id: uuid.UUID, now: datetime):
    invites = (
        db.query(models.EstateInvite)
        .filter(models.EstateInvite.estate_id == estate_id)
        .order_by(models.EstateInvite.created_at.desc())
        .all()
    )
    stale = [i for i in invites if is_expired(i, now)]
    if stale:
        for invite in stale:
            invite.status = EXPIRED
        db.commit()
    return invites


def get_invite(db: Session, estate_id: uuid.UUID, token: str):
    return (
        db.query(models.EstateInvite)
        .filter(models.EstateInvite.estate_id == estate_id, models.EstateInvite.token == token)
        .first()
    )


def get_pending_invite_for_email(db: Session, estate_id: uuid.UUID, email: str, now: datetime):
    invite = (
        db.query(models.EstateInvite)
        .filter(
            models.EstateInvite.estate_id == estate_id,
            models.EstateInvite.email == email,
            models.EstateInvite.status == PENDING,
        )
        .first()
    )
    if invite is None or expire_if_stale(db, invite, now):
        return None
    return invite


def count_pending_invites(db: Session, estate_id: uuid.UUID, now: datetime) -> int:
    pending = (
        db.query(models.EstateInvite)
        .filter(models.EstateInvite.estate_id == estate_id, models.EstateInvite.status == PENDING)
        .all()
    )
    return sum(1 for invite in pending if not is_expired(invite, now))


def create_invite(
    db: Session,
    estate_id: uuid.UUID,
    email: str,
    role: str,
    created_by: uuid.UUID,
    now: datetime,
    ttl_days: int,
):
    invite = models.EstateInvite(
        estate_id=estate_id,
        email=email,
        role=role,
        status=PENDING,
        token=new_token(),
        created_by=created_by,
        created_at=now,
        expires_at=now + timedelta(days=ttl_days),
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)
    return invite


def rotate_invite(
    db: Session,
    invite: models.EstateInvite,
    role: str,
    created_by: uuid.UUID,
    now: datetime,
    ttl_days: int,
):
    """Reissue a pending invite; the old link stops working."""
    invite.token = new_token()
    invite.role = role
    invite.created_by = created_by
    invite.created_at = now
    invite.expires_at = now + timedelta(days=ttl_days)
    db.commit()
    db.refresh(invite)
    return invite


def revoke_invite(db: Session, invite: models.EstateInvite, now: datetime):
    invite.status = REVOKED
    invite.revoked_at = now
    db.commit()
    db.refresh(invite)
    return invite


def mark_accepted(db: Session, invite: models.EstateInvite, user_id: uuid.UUID, now: datetime):
    invite.status = ACCEPTED
    invite.accepted_by = user_id
    invite.accepted_at = now
    db.commit()
    db.refresh(invite)
    return invite
