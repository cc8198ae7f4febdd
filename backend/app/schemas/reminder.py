"""Reminder schemas for WhatsApp follow-ups."""

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel

from backend.app.schemas.base import PartialUpdate, RecordRead

ReminderType = Literal["payment", "session", "general"]
ReminderStatus = Literal["pending", "sent", "failed"]


class ReminderBase(BaseModel):
    client_id: int
    title: str
    message: str
    reminder_date: date
    reminder_time: time
    type: ReminderType = "general"
    status: ReminderStatus = "pending"
    whatsapp_sent: bool = False


class ReminderCreate(ReminderBase):
    """Schema for creating a reminder."""


class ReminderUpdate(PartialUpdate):
    """Schema for updating a reminder."""

    not_nullable = ("title", "message", "reminder_date", "reminder_time", "type", "status", "whatsapp_sent")

    title: Optional[str] = None
    message: Optional[str] = None
    reminder_date: Optional[date] = None
    reminder_time: Optional[time] = None
    type: Optional[ReminderType] = None
    status: Optional[ReminderStatus] = None
    whatsapp_sent: Optional[bool] = None


class ReminderRead(ReminderBase, RecordRead):
    """Schema for reading a reminder."""

    id: int
    client_name: Optional[str] = None
    created_at: datetime
