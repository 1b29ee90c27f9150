import uuid
from sqlalchemy import Column, String, Text, Integer, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
from .base import Base, now_utc


class Estate(Base):
    __tablename__ = 'estates'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Set once at creation; never reassigned
    owner_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    label = Column(String, nullable=False)
    decedent_name = Column(String, nullable=True)
    court_county = Column(String, nullable=True)
    court_case_number = Column(String, nullable=True)
    court_state = Column(String, nullable=True)
    status = Column(String, nullable=False, default='OPEN')  # 'OPEN'|'CLOSED'
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    collaborators = relationship(
        "EstateCollaborator",
        back_populates="estate",
        order_by="(EstateCollaborator.position, EstateCollaborator.id)",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('ix_estates_owner_id', 'owner_id'),
        CheckConstraint("status in ('OPEN','CLOSED')", name='ck_estates_status'),
    )


class EstateCollaborator(Base):
    __tablename__ = 'estate_collaborators'
    id = Column(Integer, primary_key=True, autoincrement=True)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    # Stored verbatim; the access resolver rejects anything outside OWNER|EDITOR|VIEWER
    role = Column(Text, nullable=False)
    position = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=now_utc)

    estate = relationship("Estate", back_populates="collaborators")

    __table_args__ = (
        Index('ix_estate_collaborators_estate_id_position', 'estate_id', 'position'),
        Index('ix_estate_collaborators_user_id', 'user_id'),
    )
