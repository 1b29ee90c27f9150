"""
Role-based capability policy for estate collaborators.

Maps the fixed three-tier estate role set to the capability flags checked by
route handlers. The edit and sensitive-data flags are derived from separate
role groups so either can change without touching the access resolver.
"""

from dataclasses import dataclass, asdict
from typing import Dict, Optional, FrozenSet
from enum import Enum


# Central role constants, stored verbatim on collaborator rows
ROLE_OWNER = "OWNER"
ROLE_EDITOR = "EDITOR"
ROLE_VIEWER = "VIEWER"

ALLOWED_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_EDITOR, ROLE_VIEWER})

# Derived role groups
WRITE_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_EDITOR})
SENSITIVE_ROLES: FrozenSet[str] = frozenset({ROLE_OWNER, ROLE_EDITOR})

# Ownership comes from Estate.owner_id, never from a collaborator row
ASSIGNABLE_ROLES: FrozenSet[str] = frozenset({ROLE_EDITOR, ROLE_VIEWER})


class EstateRole(str, Enum):
    """Enum for estate roles used in schemas and access results."""
    OWNER = ROLE_OWNER
    EDITOR = ROLE_EDITOR
    VIEWER = ROLE_VIEWER


@dataclass(frozen=True)
class Capabilities:
    can_edit: bool
    can_view_sensitive: bool

    def as_dict(self) -> Dict[str, bool]:
        return asdict(self)


def role_allows_write(role: str) -> bool:
    """Return True if the role may mutate estate data."""
    return role in WRITE_ROLES


def role_allows_sensitive(role: str) -> bool:
    """Return True if the role may see fields flagged as sensitive."""
    return role in SENSITIVE_ROLES


def capabilities_for(role: str) -> Capabilities:
    """
    Get the capability flags for a given role.

    Args:
        role: The role name (OWNER, EDITOR, VIEWER)

    Returns:
        Capabilities with can_edit and can_view_sensitive set. Roles outside
        the recognized set receive no capabilities.
    """
    value = role.value if isinstance(role, EstateRole) else role
    return Capabilities(
        can_edit=role_allows_write(value),
        can_view_sensitive=role_allows_sensitive(value),
    )


def parse_role(value) -> Optional[EstateRole]:
    """Return the EstateRole for a stored role string, or None if unrecognized.

    Matching is exact: stored roles are upper-case and anything else is
    treated as corrupt rather than coerced.
    """
    if isinstance(value, EstateRole):
        return value
    if not isinstance(value, str) or value not in ALLOWED_ROLES:
        return None
    return EstateRole(value)


def validate_assignable_role(role: str) -> None:
    """
    Validate that a role can be granted to a collaborator.

    Raises:
        ValueError: If role is not assignable
    """
    if role not in ASSIGNABLE_ROLES:
        raise ValueError(f"Role '{role}' cannot be assigned. Assignable roles: {sorted(ASSIGNABLE_ROLES)}")
