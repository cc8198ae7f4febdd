"""Training session schemas for TrainerBox."""

from datetime import date, datetime, time
from typing import Literal, Optional

from pydantic import BaseModel

from backend.app.schemas.base import PartialUpdate, RecordRead

SessionType = Literal["personal", "group", "online"]
SessionStatus = Literal["scheduled", "completed", "cancelled", "no_show"]


class SessionBase(BaseModel):
    client_id: int
    session_date: date
    session_time: time
    duration: int
    type: SessionType = "personal"
    status: SessionStatus = "scheduled"
    notes: Optional[str] = None


class SessionCreate(SessionBase):
    pass


class SessionUpdate(PartialUpdate):
    not_nullable = ("session_date", "session_time", "duration", "type", "status")

    session_date: Optional[date] = None
    session_time: Optional[time] = None
    duration: Optional[int] = None
    type: Optional[SessionType] = None
    status: Optional[SessionStatus] = None
    notes: Optional[str] = None


class SessionRead(SessionBase, RecordRead):
    id: int
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    created_at: datetime
