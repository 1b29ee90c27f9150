"""
Estates API endpoints.

Estate CRUD plus collaborator management. Access is resolved per request via
``AccessResolver``; only the owner may change the collaborator list or delete
the estate.
"""
import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from estate_core.api.auth import get_or_create_user
from estate_core.api.deps import get_access_resolver, get_current_user
from estate_core.api.permissions import Access, AccessResolver
from estate_core.db import models, schemas
from estate_core.db.database import get_db
from estate_core.db.repositories import estates as estate_repo
from estate_core.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estates", tags=["estates"])


def _detail(estate: models.Estate, access: Access) -> schemas.EstateDetail:
    return schemas.EstateDetail(
        **schemas.Estate.model_validate(estate).model_dump(),
        access=schemas.EstateAccess(
            estate_id=access.estate_id,
            role=access.role,
            is_owner=access.is_owner,
            can_edit=access.can_edit,
            can_view_sensitive=access.can_view_sensitive,
        ),
    )


@router.post("/", response_model=schemas.EstateDetail, status_code=status.HTTP_201_CREATED)
def create_estate(
    payload: schemas.EstateCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    estate = estate_repo.create_estate(db, payload, owner_id=current_user.id)
    logger.info("estate_created estate_id=%s owner_id=%s", estate.id, current_user.id)
    access = resolver.require_access(estate.id, current_user.id)
    return _detail(estate, access)


@router.get("/", response_model=List[schemas.Estate])
def list_estates(
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    # Unusable collaborator roles are filtered before offset/limit
    return estate_repo.get_estates_for_user(db, current_user.id, skip=skip, limit=limit)


@router.get("/{estate_id}", response_model=schemas.EstateDetail)
def get_estate(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    access = resolver.require_access(estate_id, current_user.id)
    return _detail(estate_repo.require_estate(db, estate_id), access)


@router.put("/{estate_id}", response_model=schemas.EstateDetail)
def update_estate(
    estate_id: uuid.UUID,
    payload: schemas.EstateUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    access = resolver.require_edit_access(estate_id, current_user.id)
    estate = estate_repo.update_estate(db, estate_id, payload)
    if estate is None:
        raise NotFoundError(f"estate {estate_id}")
    return _detail(estate, access)


@router.delete("/{estate_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_estate(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    if not estate_repo.delete_estate(db, estate_id):
        raise NotFoundError(f"estate {estate_id}")
    logger.info("estate_deleted estate_id=%s owner_id=%s", estate_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Collaborators

@router.get("/{estate_id}/collaborators", response_model=List[schemas.Collaborator])
def list_collaborators(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_access(estate_id, current_user.id)
    return estate_repo.get_collaborators(db, estate_id)


@router.post(
    "/{estate_id}/collaborators",
    response_model=schemas.Collaborator,
    status_code=status.HTTP_201_CREATED,
)
def add_collaborator(
    estate_id: uuid.UUID,
    payload: schemas.CollaboratorCreate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    estate = estate_repo.require_estate(db, estate_id)

    if payload.user_id is not None:
        target = db.query(models.User).filter(models.User.id == payload.user_id).first()
        if target is None:
            raise HTTPException(status_code=422, detail="Unknown user_id")
    elif payload.email and payload.email.strip():
        target = get_or_create_user(db, email=payload.email)
    else:
        raise HTTPException(status_code=422, detail="user_id or email is required")

    if target.id == estate.owner_id:
        raise HTTPException(status_code=409, detail="The owner cannot be added as a collaborator")

    collaborator, previous_role = estate_repo.upsert_collaborator(db, estate_id, target.id, payload.role)
    logger.info(
        "estate_collaborator_granted estate_id=%s user_id=%s role=%s previous_role=%s",
        estate_id, target.id, payload.role, previous_role,
    )
    return collaborator


@router.put("/{estate_id}/collaborators/{user_id}", response_model=schemas.Collaborator)
def update_collaborator(
    estate_id: uuid.UUID,
    user_id: uuid.UUID,
    payload: schemas.CollaboratorUpdate,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    if not any(c.user_id == user_id for c in estate_repo.get_collaborators(db, estate_id)):
        raise NotFoundError(f"collaborator {user_id}")
    collaborator, previous_role = estate_repo.upsert_collaborator(db, estate_id, user_id, payload.role)
    logger.info(
        "estate_collaborator_role_changed estate_id=%s user_id=%s from=%s to=%s",
        estate_id, user_id, previous_role, payload.role,
    )
    return collaborator


@router.delete("/{estate_id}/collaborators/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_collaborator(
    estate_id: uuid.UUID,
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    if not estate_repo.remove_collaborator(db, estate_id, user_id):
        raise NotFoundError(f"collaborator {user_id}")
    logger.info("estate_collaborator_removed estate_id=%s user_id=%s", estate_id, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
