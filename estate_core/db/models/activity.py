import uuid
from sqlalchemy import Column, Text, DateTime, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID, JSONB
from .base import Base, now_utc


class EstateActivity(Base):
    """Append-only history entry for a change to an estate sub-resource."""
    __tablename__ = 'estate_activity'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # No foreign keys: history outlives the rows it describes
    estate_id = Column(UUID(as_uuid=True), nullable=False)
    owner_id = Column(UUID(as_uuid=True), nullable=False)
    kind = Column(Text, nullable=False)
    action = Column(Text, nullable=False)
    entity_id = Column(Text, nullable=False)
    message = Column(Text, nullable=False)
    snapshot = Column(JSONB(none_as_null=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)

    __table_args__ = (
        Index('ix_estate_activity_estate_created_id', estate_id, created_at.desc(), id.desc()),
        Index('ix_estate_activity_estate_kind_action_created_id', estate_id, kind, action, created_at.desc(), id.desc()),
        Index('ix_estate_activity_owner_created', 'owner_id', 'created_at'),
        CheckConstraint("kind in ('invoice','document','task','note')", name='ck_estate_activity_kind'),
    )
