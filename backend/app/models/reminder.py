"""Reminder model for WhatsApp follow-ups."""

from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Reminder(Base):
    __tablename__ = "reminders"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    reminder_date = Column(Date, nullable=False)
    reminder_time = Column(Time, nullable=False)
    type = Column(String(20), nullable=False, default="general")
    status = Column(String(20), nullable=False, default="pending")
    whatsapp_sent = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=utc_now)

    client = relationship("Client", back_populates="reminders")
