import uuid
from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

InviteStatus = Literal["PENDING", "ACCEPTED", "REVOKED", "EXPIRED"]


class InviteCreate(BaseModel):
    email: str = Field(min_length=3, max_length=254)
    role: Literal["EDITOR", "VIEWER"]


class Invite(BaseModel):
    id: uuid.UUID
    estate_id: uuid.UUID
    email: str
    role: str
    status: InviteStatus
    token: str
    created_by: uuid.UUID
    created_at: datetime
    expires_at: datetime
    accepted_by: Optional[uuid.UUID] = None
    accepted_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class InviteLink(Invite):
    invite_url: str
    # Role held by a pending invite this one replaced
    previous_role: Optional[str] = None


class InviteAccepted(BaseModel):
    estate_id: uuid.UUID
    role: str
