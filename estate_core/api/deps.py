"""
API dependency helpers.

Provides the resolved caller and the store-backed components that route
handlers use. Stores are separate dependencies so tests can swap in fakes
through ``app.dependency_overrides``.
"""
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from estate_core.api.auth import get_or_create_user, resolve_identity_from_headers
from estate_core.api.permissions import AccessResolver
from estate_core.audit import AuditLogger
from estate_core.db import models
from estate_core.db.database import get_db
from estate_core.db.repositories.activity import SqlActivityStore
from estate_core.db.repositories.estates import SqlEstateStore
from estate_core.services.activity_feed import ActivityQuery
from estate_core.utils.runtime import dev_identity, dev_mode_active


# Contract:
# Returns the ORM User for the caller.
# Raises 401 if identity cannot be resolved.
def get_current_user(
    db: Session = Depends(get_db),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> models.User:
    if dev_mode_active():
        name, email = dev_identity()
    else:
        name, email = resolve_identity_from_headers(
            x_auth_request_user=x_auth_request_user,
            x_auth_request_email=x_auth_request_email,
            x_forwarded_user=x_forwarded_user,
            x_forwarded_email=x_forwarded_email,
        )
        if not email:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return get_or_create_user(db, email=email, display_name=name)


def get_estate_store(db: Session = Depends(get_db)):
    return SqlEstateStore(db)


def get_activity_store(db: Session = Depends(get_db)):
    return SqlActivityStore(db)


def get_access_resolver(estate_store=Depends(get_estate_store)) -> AccessResolver:
    return AccessResolver(estate_store)


def get_audit_logger(activity_store=Depends(get_activity_store)) -> AuditLogger:
    return AuditLogger(activity_store)


def get_activity_query(activity_store=Depends(get_activity_store)) -> ActivityQuery:
    return ActivityQuery(activity_store)
