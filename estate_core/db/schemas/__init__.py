"""
Domain-split Pydantic schemas with a single aggregator.
"""

from .estates import (
    EstateBase,
    EstateCreate,
    EstateUpdate,
    Estate,
    EstateAccess,
    EstateDetail,
    CollaboratorCreate,
    CollaboratorUpdate,
    Collaborator,
)
from .activity import ActivityRecord, ActivityPage
from .invites import InviteCreate, Invite, InviteLink, InviteAccepted
from .records import (
    NoteCreate,
    NoteUpdate,
    Note,
    TaskCreate,
    TaskUpdate,
    Task,
    DocumentCreate,
    DocumentUpdate,
    Document,
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceStatusUpdate,
    Invoice,
)

__all__ = [
    "EstateBase",
    "EstateCreate",
    "EstateUpdate",
    "Estate",
    "EstateAccess",
    "EstateDetail",
    "CollaboratorCreate",
    "CollaboratorUpdate",
    "Collaborator",
    "ActivityRecord",
    "ActivityPage",
    "InviteCreate",
    "Invite",
    "InviteLink",
    "InviteAccepted",
    "NoteCreate",
    "NoteUpdate",
    "Note",
    "TaskCreate",
    "TaskUpdate",
    "Task",
    "DocumentCreate",
    "DocumentUpdate",
    "Document",
    "InvoiceCreate",
    "InvoiceUpdate",
    "InvoiceStatusUpdate",
    "Invoice",
]
