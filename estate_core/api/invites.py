"""
Collaborator invite endpoints.

The owner issues a link for one email address and role. Whoever signs in with
that address can redeem it once, which grants the role through the normal
collaborator upsert. Invites expire after ``INVITE_TTL_DAYS``.
"""
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from estate_core.api.deps import get_access_resolver, get_current_user
from estate_core.api.permissions import AccessResolver
from estate_core.db import models, schemas
from estate_core.db.database import get_db
from estate_core.db.repositories import estates as estate_repo
from estate_core.db.repositories import invites as invite_repo
from estate_core.exceptions import ForbiddenError, NotFoundError, ValidationError
from estate_core.utils.settings import get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/estates", tags=["invites"])

DEFAULT_APP_BASE_URL = "http://localhost:3000"


def normalize_invite_email(raw: Optional[str]) -> str:
    email = (raw or "").strip().lower()
    local, sep, domain = email.partition("@")
    if not sep or not local or not domain or " " in email or len(email) > 254:
        raise ValidationError("A valid email address is required")
    return email


def invite_url(estate_id: uuid.UUID, token: str) -> str:
    base = get_settings().app_base_url or DEFAULT_APP_BASE_URL
    return f"{base}/estates/{estate_id}/invites/{token}"


def _link(invite: models.EstateInvite, previous_role: Optional[str] = None) -> schemas.InviteLink:
    return schemas.InviteLink(
        **schemas.Invite.model_validate(invite).model_dump(),
        invite_url=invite_url(invite.estate_id, invite.token),
        previous_role=previous_role,
    )


@router.get("/{estate_id}/invites", response_model=List[schemas.Invite])
def list_invites(
    estate_id: uuid.UUID,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    return invite_repo.get_invites(db, estate_id, models.now_utc())


@router.post("/{estate_id}/invites", response_model=schemas.InviteLink, status_code=status.HTTP_201_CREATED)
def create_invite(
    estate_id: uuid.UUID,
    payload: schemas.InviteCreate,
    response: Response,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    email = normalize_invite_email(payload.email)
    if email == (current_user.email or "").lower():
        raise ValidationError("You cannot invite yourself")

    settings = get_settings()
    now = models.now_utc()

    # A pending invite for the same address is reissued, not duplicated
    existing = invite_repo.get_pending_invite_for_email(db, estate_id, email, now)
    if existing is not None:
        previous_role = existing.role
        invite = invite_repo.rotate_invite(db, existing, payload.role, current_user.id, now, settings.invite_ttl_days)
        logger.info(
            "estate_invite_reissued estate_id=%s invite_id=%s role=%s previous_role=%s",
            estate_id, invite.id, invite.role, previous_role,
        )
        response.status_code = status.HTTP_200_OK
        return _link(invite, previous_role=previous_role)

    if invite_repo.count_pending_invites(db, estate_id, now) >= settings.invite_pending_limit:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Invite limit reached. Revoke or wait for existing invites to expire.",
        )

    invite = invite_repo.create_invite(
        db, estate_id, email, payload.role, current_user.id, now, settings.invite_ttl_days
    )
    logger.info("estate_invite_created estate_id=%s invite_id=%s role=%s", estate_id, invite.id, invite.role)
    return _link(invite)


@router.delete("/{estate_id}/invites/{token}", response_model=schemas.Invite)
def revoke_invite(
    estate_id: uuid.UUID,
    token: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
    resolver: AccessResolver = Depends(get_access_resolver),
):
    resolver.require_owner(estate_id, current_user.id)
    invite = invite_repo.get_invite(db, estate_id, token)
    if invite is None:
        raise NotFoundError(f"invite for estate {estate_id}")

    now = models.now_utc()
    if invite.status in (invite_repo.REVOKED, invite_repo.EXPIRED) or invite_repo.expire_if_stale(db, invite, now):
        return invite
    if invite.status == invite_repo.ACCEPTED:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invite was already accepted")

    invite = invite_repo.revoke_invite(db, invite, now)
    logger.info("estate_invite_revoked estate_id=%s invite_id=%s", estate_id, invite.id)
    return invite


@router.post("/{estate_id}/invites/{token}/accept", response_model=schemas.InviteAccepted)
def accept_invite(
    estate_id: uuid.UUID,
    token: str,
    db: Session = Depends(get_db),
    current_user: models.User = Depends(get_current_user),
):
    invite = invite_repo.get_invite(db, estate_id, token)
    if invite is None:
        raise NotFoundError(f"invite for estate {estate_id}")
    if invite.status != invite_repo.PENDING:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=f"Invite is {invite.status.lower()}")

    now = models.now_utc()
    if invite_repo.expire_if_stale(db, invite, now):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Invite is expired")

    # Only the invited address may redeem the link
    if (current_user.email or "").lower() != invite.email:
        raise ForbiddenError("invite addressed to another email", estate_id=estate_id)

    estate = estate_repo.require_estate(db, estate_id)
    if estate.owner_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="The owner cannot accept a collaborator invite")

    _, previous_role = estate_repo.upsert_collaborator(db, estate_id, current_user.id, invite.role)
    invite_repo.mark_accepted(db, invite, current_user.id, now)
    logger.info(
        "estate_invite_accepted estate_id=%s invite_id=%s user_id=%s role=%s previous_role=%s",
        estate_id, invite.id, current_user.id, invite.role, previous_role,
    )
    return schemas.InviteAccepted(estate_id=estate_id, role=invite.role)
