import uuid
from datetime import datetime
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict


class ActivityRecord(BaseModel):
    id: uuid.UUID
    estate_id: uuid.UUID
    owner_id: uuid.UUID
    kind: str
    action: str
    entity_id: str
    message: str
    snapshot: Optional[Dict[str, Any]] = None
    created_at: datetime
    model_config = ConfigDict(from_attributes=True)


class ActivityPage(BaseModel):
    records: List[ActivityRecord]
    next_cursor: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)
