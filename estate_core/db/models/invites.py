import uuid
from sqlalchemy import Column, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class EstateInvite(Base):
    """Link-based offer of a collaborator role, redeemable by one email address."""
    __tablename__ = 'estate_invites'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    email = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default='PENDING')  # PENDING|ACCEPTED|REVOKED|EXPIRED
    token = Column(Text, nullable=False, unique=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_by = Column(UUID(as_uuid=True), ForeignKey('users.id'), nullable=True)
    accepted_at = Column(DateTime(timezone=True), nullable=True)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_estate_invites_estate_id', 'estate_id'),
        Index('ix_estate_invites_email', 'email'),
        CheckConstraint("role in ('EDITOR','VIEWER')", name='ck_estate_invites_role'),
        CheckConstraint("status in ('PENDING','ACCEPTED','REVOKED','EXPIRED')", name='ck_estate_invites_status'),
    )
