"""Payment schemas."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel

from backend.app.schemas.base import PartialUpdate, RecordRead

PaymentStatus = Literal["pending", "paid", "overdue"]


class PaymentBase(BaseModel):
    client_id: int
    amount: float
    due_date: date
    paid_date: Optional[datetime] = None
    status: PaymentStatus = "pending"
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class PaymentCreate(PaymentBase):
    pass


class PaymentUpdate(PartialUpdate):
    not_nullable = ("amount", "due_date", "status")

    amount: Optional[float] = None
    due_date: Optional[date] = None
    paid_date: Optional[datetime] = None
    status: Optional[PaymentStatus] = None
    payment_method: Optional[str] = None
    notes: Optional[str] = None


class MarkPaidRequest(BaseModel):
    payment_method: Optional[str] = None


class PaymentRead(PaymentBase, RecordRead):
    id: int
    client_name: Optional[str] = None
    client_phone: Optional[str] = None
    created_at: datetime
