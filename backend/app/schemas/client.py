"""Client schemas for TrainerBox."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, EmailStr

from backend.app.schemas.base import PartialUpdate, RecordRead


class ClientBase(BaseModel):
    name: str
    phone: str
    email: Optional[EmailStr] = None
    birth_date: Optional[date] = None
    emergency_contact: Optional[str] = None
    notes: Optional[str] = None


class ClientCreate(ClientBase):
    pass


class ClientUpdate(PartialUpdate):
    not_nullable = ("name", "phone")

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    birth_date: Optional[date] = None
    emergency_contact: Optional[str] = None
    notes: Optional[str] = None


class ClientRead(ClientBase, RecordRead):
    id: int
    created_at: datetime
    updated_at: datetime
