"""
Domain-split SQLAlchemy models with a single aggregator.

Exposes `Base`, `now_utc`, and all ORM classes.
"""

from .base import Base, now_utc  # re-export

# Domain models
from .users import User
from .estates import Estate, EstateCollaborator
from .activity import EstateActivity
from .invites import EstateInvite
from .records import EstateNote, EstateTask, EstateDocument, Invoice

__all__ = [
    # base
    "Base",
    "now_utc",
    # users/estates
    "User",
    "Estate",
    "EstateCollaborator",
    "EstateInvite",
    # activity
    "EstateActivity",
    # sub-resources
    "EstateNote",
    "EstateTask",
    "EstateDocument",
    "Invoice",
]
