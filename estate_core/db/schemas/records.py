import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, Field

TaskStatus = Literal["NOT_STARTED", "IN_PROGRESS", "DONE"]
InvoiceStatus = Literal["DRAFT", "SENT", "PAID", "VOID"]


class _EstateRecord(BaseModel):
    id: uuid.UUID
    estate_id: uuid.UUID
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
    model_config = ConfigDict(from_attributes=True)


# Notes

class NoteCreate(BaseModel):
    subject: Optional[str] = None
    body: str = Field(min_length=1, max_length=5000)
    pinned: bool = False


class NoteUpdate(BaseModel):
    subject: Optional[str] = None
    body: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    pinned: Optional[bool] = None


class Note(_EstateRecord):
    subject: Optional[str] = None
    body: str
    pinned: bool


# Tasks

class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: Optional[str] = None
    status: TaskStatus = "NOT_STARTED"
    due_date: Optional[date] = None


class TaskUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=300)
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    due_date: Optional[date] = None


class Task(_EstateRecord):
    title: str
    description: Optional[str] = None
    status: str
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None


# Documents

class DocumentCreate(BaseModel):
    label: str = Field(min_length=1, max_length=300)
    subject: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    is_sensitive: bool = False


class DocumentUpdate(BaseModel):
    label: Optional[str] = Field(default=None, min_length=1, max_length=300)
    subject: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    is_sensitive: Optional[bool] = None


class Document(_EstateRecord):
    label: str
    subject: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    notes: Optional[str] = None
    is_sensitive: bool


# Invoices

class InvoiceCreate(BaseModel):
    invoice_number: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: str = Field(default="USD", min_length=3, max_length=3)
    total_amount: Decimal = Field(default=Decimal("0"), ge=0)
    notes: Optional[str] = None


class InvoiceUpdate(BaseModel):
    invoice_number: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    total_amount: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class Invoice(_EstateRecord):
    invoice_number: Optional[str] = None
    status: str
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None
    currency: str
    total_amount: Decimal
    notes: Optional[str] = None
