"""
Estate sub-resources: notes, tasks, documents and invoices.

Each row carries its estate id and the estate owner's id; none of them knows
about the activity trail that records changes to it.
"""
import uuid
from sqlalchemy import Column, String, Text, Boolean, Numeric, Date, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from .base import Base, now_utc


class EstateNote(Base):
    __tablename__ = 'estate_notes'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    owner_id = Column(UUID(as_uuid=True), nullable=False)
    subject = Column(String, nullable=True)
    body = Column(Text, nullable=False)
    pinned = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_estate_notes_estate_id', 'estate_id'),
    )


class EstateTask(Base):
    __tablename__ = 'estate_tasks'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    owner_id = Column(UUID(as_uuid=True), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default='NOT_STARTED')  # NOT_STARTED|IN_PROGRESS|DONE
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_estate_tasks_estate_id', 'estate_id'),
        CheckConstraint("status in ('NOT_STARTED','IN_PROGRESS','DONE')", name='ck_estate_tasks_status'),
    )


class EstateDocument(Base):
    __tablename__ = 'estate_documents'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    owner_id = Column(UUID(as_uuid=True), nullable=False)
    label = Column(String, nullable=False)
    subject = Column(String, nullable=True)
    location = Column(String, nullable=True)
    url = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    is_sensitive = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_estate_documents_estate_id', 'estate_id'),
    )


class Invoice(Base):
    __tablename__ = 'invoices'
    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    estate_id = Column(UUID(as_uuid=True), ForeignKey('estates.id', ondelete='CASCADE'), nullable=False)
    owner_id = Column(UUID(as_uuid=True), nullable=False)
    invoice_number = Column(String, nullable=True)
    status = Column(String, nullable=False, default='DRAFT')  # DRAFT|SENT|PAID|VOID
    issue_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    paid_at = Column(DateTime(timezone=True), nullable=True)
    currency = Column(String(3), nullable=False, default='USD')
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)

    __table_args__ = (
        Index('ix_invoices_estate_id', 'estate_id'),
        CheckConstraint("status in ('DRAFT','SENT','PAID','VOID')", name='ck_invoices_status'),
    )
