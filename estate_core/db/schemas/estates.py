import uuid
from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

from estate_core.utils.role_permissions import EstateRole


class EstateBase(BaseModel):
    label: str = Field(min_length=1, max_length=200)
    decedent_name: Optional[str] = None
    court_county: Optional[str] = None
    court_case_number: Optional[str] = None
    court_state: Optional[str] = None


class EstateCreate(EstateBase):
    pass


class EstateUpdate(BaseModel):
    label: Optional[str] = Field(default=None, min_length=1, max_length=200)
    decedent_name: Optional[str] = None
    court_county: Optional[str] = None
    court_case_number: Optional[str] = None
    court_state: Optional[str] = None
    status: Optional[Literal["OPEN", "CLOSED"]] = None


class Estate(EstateBase):
    id: uuid.UUID
    owner_id: uuid.UUID
    status: str
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


class EstateAccess(BaseModel):
    estate_id: uuid.UUID
    role: EstateRole
    is_owner: bool
    can_edit: bool
    can_view_sensitive: bool
    model_config = ConfigDict(from_attributes=True)


class EstateDetail(Estate):
    access: EstateAccess


class CollaboratorCreate(BaseModel):
    # Exactly one of user_id / email identifies the collaborator
    user_id: Optional[uuid.UUID] = None
    email: Optional[str] = None
    role: Literal["EDITOR", "VIEWER"]


class CollaboratorUpdate(BaseModel):
    role: Literal["EDITOR", "VIEWER"]


class Collaborator(BaseModel):
    user_id: uuid.UUID
    role: str
    created_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)
