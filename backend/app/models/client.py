"""Client model for TrainerBox."""

from sqlalchemy import Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.app.core.time import utc_now
from backend.app.db.base_class import Base


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    birth_date = Column(Date, nullable=True)
    emergency_contact = Column(String, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    # Dependents are removed by the database (ON DELETE CASCADE)
    payments = relationship("Payment", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    sessions = relationship("Session", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
    reminders = relationship("Reminder", back_populates="client", cascade="all, delete-orphan", passive_deletes=True)
