"""
Estate access resolution.

Key helpers:
- AccessResolver.resolve(estate_id, caller_id) -> Access | None
- AccessResolver.require_access(estate_id, caller_id) -> Access
- AccessResolver.require_edit_access(estate_id, caller_id) -> Access

Every call reads the estate store afresh; grants are never cached.
"""
import logging
import uuid
from dataclasses import dataclass
from typing import Optional

from estate_core.db.ports import EstateStore
from estate_core.exceptions import ForbiddenError
from estate_core.utils.role_permissions import (
    EstateRole,
    capabilities_for,
    parse_role,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Access:
    estate_id: uuid.UUID
    role: EstateRole
    can_edit: bool
    can_view_sensitive: bool

    @property
    def is_owner(self) -> bool:
        return self.role == EstateRole.OWNER


def _same_id(left, right) -> bool:
    if left is None or right is None:
        return False
    return str(left) == str(right)


class AccessResolver:
    """Decide a caller's effective role on an estate."""

    def __init__(self, estate_store: EstateStore):
        self.estate_store = estate_store

    def resolve(self, estate_id: uuid.UUID, caller_id: Optional[uuid.UUID]) -> Optional[Access]:
        """Return the caller's Access, or None when they have none.

        None covers a missing estate, an anonymous caller, no matching
        collaborator, and a collaborator row with an unrecognized role.
        Store failures propagate.
        """
        if caller_id is None:
            return None

        projection = self.estate_store.fetch_estate_access_projection(estate_id)
        if projection is None:
            return None

        # Ownership is never shadowed by a collaborator row
        if _same_id(projection.owner_id, caller_id):
            return Access(
                estate_id=estate_id,
                role=EstateRole.OWNER,
                can_edit=True,
                can_view_sensitive=True,
            )

        match = next((c for c in projection.collaborators if _same_id(c.user_id, caller_id)), None)
        if match is None:
            return None

        role = parse_role(match.role)
        if role is None:
            logger.warning(
                "estate_access_unrecognized_role estate_id=%s user_id=%s role=%r",
                estate_id, caller_id, match.role,
            )
            return None
        if role == EstateRole.OWNER:
            # Only owner_id confers OWNER; a collaborator row claiming it gets editor rights
            logger.warning("estate_access_collaborator_owner_row estate_id=%s user_id=%s", estate_id, caller_id)
            role = EstateRole.EDITOR

        caps = capabilities_for(role)
        return Access(
            estate_id=estate_id,
            role=role,
            can_edit=caps.can_edit,
            can_view_sensitive=caps.can_view_sensitive,
        )

    def require_access(self, estate_id: uuid.UUID, caller_id: Optional[uuid.UUID]) -> Access:
        """Resolve access or raise ForbiddenError."""
        access = self.resolve(estate_id, caller_id)
        if access is None:
            logger.info("estate_access_denied estate_id=%s user_id=%s", estate_id, caller_id)
            raise ForbiddenError(estate_id=estate_id)
        return access

    def require_edit_access(self, estate_id: uuid.UUID, caller_id: Optional[uuid.UUID]) -> Access:
        """Resolve access and additionally require edit capability."""
        access = self.require_access(estate_id, caller_id)
        if not access.can_edit:
            logger.info("estate_edit_denied estate_id=%s user_id=%s role=%s", estate_id, caller_id, access.role.value)
            raise ForbiddenError("edit access required", estate_id=estate_id)
        return access

    def require_owner(self, estate_id: uuid.UUID, caller_id: Optional[uuid.UUID]) -> Access:
        """Resolve access and require true ownership of the estate."""
        access = self.require_access(estate_id, caller_id)
        if not access.is_owner:
            raise ForbiddenError("owner access required", estate_id=estate_id)
        return access
