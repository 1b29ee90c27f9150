"""
Estate repository functions.

Implements CRUD for estates and their collaborator lists, plus the narrow
access projection read used by the access resolver.
"""
from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from estate_core.db import schemas, models
from estate_core.db.ports import CollaboratorEntry, EstateAccessProjection
from estate_core.exceptions import NotFoundError, StoreUnavailableError
from estate_core.utils.role_permissions import ALLOWED_ROLES, validate_assignable_role


class SqlEstateStore:
    """EstateStore reading only ``owner_id`` and the ordered collaborator rows."""

    def __init__(self, db: Session):
        self.db = db

    def fetch_estate_access_projection(self, estate_id: uuid.UUID) -> Optional[EstateAccessProjection]:
        try:
            owner_row = (
                self.db.query(models.Estate.owner_id)
                .filter(models.Estate.id == estate_id)
                .first()
            )
            if owner_row is None:
                return None
            collaborator_rows = (
                self.db.query(models.EstateCollaborator.user_id, models.EstateCollaborator.role)
                .filter(models.EstateCollaborator.estate_id == estate_id)
                .order_by(models.EstateCollaborator.position, models.EstateCollaborator.id)
                .all()
            )
        except SQLAlchemyError as exc:
            raise StoreUnavailableError(f"estate projection read failed: {exc}") from exc
        return EstateAccessProjection(
            owner_id=owner_row.owner_id,
            collaborators=tuple(CollaboratorEntry(user_id=r.user_id, role=r.role) for r in collaborator_rows),
        )


def create_estate(db: Session, estate: schemas.EstateCreate, owner_id: uuid.UUID):
    db_estate = models.Estate(owner_id=owner_id, **estate.model_dump())
    db.add(db_estate)
    db.commit()
    db.refresh(db_estate)
    return db_estate


def get_estate(db: Session, estate_id: uuid.UUID):
    return db.query(models.Estate).filter(models.Estate.id == estate_id).first()


def require_estate(db: Session, estate_id: uuid.UUID):
    estate = get_estate(db, estate_id)
    if estate is None:
        raise NotFoundError(f"estate {estate_id}")
    return estate


def _accessible_estates(db: Session, user_id: uuid.UUID):
    """Estates the user owns, or where their first collaborator row has a usable role."""
    Collaborator = models.EstateCollaborator
    first_role = (
        select(Collaborator.role)
        .where(Collaborator.estate_id == models.Estate.id, Collaborator.user_id == user_id)
        .order_by(Collaborator.position, Collaborator.id)
        .limit(1)
        .correlate(models.Estate)
        .scalar_subquery()
    )
    return db.query(models.Estate).filter(
        or_(models.Estate.owner_id == user_id, first_role.in_(sorted(ALLOWED_ROLES)))
    )


def get_estates_for_user(db: Session, user_id: uuid.UUID, skip: int = 0, limit: int = 100):
    """Estates the user can open, newest first."""
    return (
        _accessible_estates(db, user_id)
        .order_by(models.Estate.created_at.desc(), models.Estate.id)
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_estate_ids_for_user(db: Session, user_id: uuid.UUID) -> list[uuid.UUID]:
    return [row.id for row in _accessible_estates(db, user_id).with_entities(models.Estate.id).all()]


def update_estate(db: Session, estate_id: uuid.UUID, estate: schemas.EstateUpdate):
    db_estate = get_estate(db, estate_id)
    if db_estate:
        update_data = estate.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(db_estate, key, value)
        db.commit()
        db.refresh(db_estate)
    return db_estate


def delete_estate(db: Session, estate_id: uuid.UUID):
    db_estate = get_estate(db, estate_id)
    if db_estate:
        db.delete(db_estate)
        db.commit()
        return True
    return False


def get_collaborators(db: Session, estate_id: uuid.UUID):
    return (
        db.query(models.EstateCollaborator)
        .filter(models.EstateCollaborator.estate_id == estate_id)
        .order_by(models.EstateCollaborator.position, models.EstateCollaborator.id)
        .all()
    )


def upsert_collaborator(db: Session, estate_id: uuid.UUID, user_id: uuid.UUID, role: str):
    """Grant ``role`` to ``user_id``, keeping at most one row per user.

    Existing duplicates (left by older writers) collapse onto the first row.
    Raises ValueError for roles that cannot be granted.
    Returns ``(collaborator, previous_role)``; ``previous_role`` is None for
    a new grant.
    """
    validate_assignable_role(role)
    rows = [c for c in get_collaborators(db, estate_id) if c.user_id == user_id]
    if rows:
        first, extras = rows[0], rows[1:]
        previous_role = first.role
        first.role = role
        for extra in extras:
            db.delete(extra)
        db.commit()
        db.refresh(first)
        return first, previous_role

    existing = get_collaborators(db, estate_id)
    next_position = (max(c.position for c in existing) + 1) if existing else 0
    db_collaborator = models.EstateCollaborator(
        estate_id=estate_id,
        user_id=user_id,
        role=role,
        position=next_position,
    )
    db.add(db_collaborator)
    db.commit()
    db.refresh(db_collaborator)
    return db_collaborator, None


def remove_collaborator(db: Session, estate_id: uuid.UUID, user_id: uuid.UUID) -> bool:
    rows = (
        db.query(models.EstateCollaborator)
        .filter(
            models.EstateCollaborator.estate_id == estate_id,
            models.EstateCollaborator.user_id == user_id,
        )
        .all()
    )
    if not rows:
        return False
    for row in rows:
        db.delete(row)
    db.commit()
    return True
