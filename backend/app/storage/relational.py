"""Relational backend: SQLAlchemy over an embedded SQLite database."""

import logging
import os
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import distinct, func
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from backend.app.core.exceptions import ClientNotFoundError, InitializationError, NotInitializedError
from backend.app.core.time import month_bounds
from backend.app.db.base import Base
from backend.app.db.session import create_db_engine, create_session_factory
from backend.app.models.client import Client
from backend.app.models.payment import Payment
from backend.app.models.reminder import Reminder
from backend.app.models.session import Session as SessionModel
from backend.app.schemas.client import ClientCreate, ClientRead
from backend.app.schemas.dashboard import DashboardStats
from backend.app.schemas.payment import PaymentCreate, PaymentRead
from backend.app.schemas.reminder import ReminderCreate, ReminderRead
from backend.app.schemas.session import SessionCreate, SessionRead
from backend.app.storage.base import StorageBackend

logger = logging.getLogger(__name__)


class RelationalBackend(StorageBackend):
    name = "relational"

    def __init__(self, database_url: str):
        self.database_url = database_url
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise NotInitializedError(self.name)
        return self._engine

    def initialize(self) -> None:
        if self._engine is not None:
            return
        try:
            url = make_url(self.database_url)
            if url.get_backend_name() == "sqlite" and url.database not in (None, "", ":memory:"):
                db_dir = os.path.dirname(os.path.abspath(url.database))
                os.makedirs(db_dir, exist_ok=True)
            engine = create_db_engine(self.database_url)
            Base.metadata.create_all(bind=engine)
        except Exception as exc:
            raise InitializationError(f"Could not initialize {self.database_url}: {exc}") from exc
        self._engine = engine
        self._session_factory = create_session_factory(engine)
        logger.info("Relational storage ready at %s", self.database_url)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    @contextmanager
    def _session(self) -> Iterator[Session]:
        if self._session_factory is None:
            raise NotInitializedError(self.name)
        db = self._session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    @staticmethod
    def _ensure_client(db: Session, client_id: int) -> None:
        if db.get(Client, client_id) is None:
            raise ClientNotFoundError(client_id)

    @staticmethod
    def _apply(obj, changes: Dict[str, Any]) -> None:
        for field, value in changes.items():
            setattr(obj, field, value)

    def _update(self, model, obj_id: int, changes: Dict[str, Any]) -> bool:
        with self._session() as db:
            obj = db.get(model, obj_id)
            if obj is None:
                return False
            self._apply(obj, changes)
            db.commit()
            return True

    def _delete(self, model, obj_id: int) -> bool:
        with self._session() as db:
            obj = db.get(model, obj_id)
            if obj is None:
                return False
            db.delete(obj)
            db.commit()
            return True

    # --- Clients ---

    def list_clients(self) -> List[ClientRead]:
        with self._session() as db:
            clients = db.query(Client).order_by(Client.name.asc(), Client.id.asc()).all()
            return [ClientRead.model_validate(c) for c in clients]

    def get_client(self, client_id: int) -> Optional[ClientRead]:
        with self._session() as db:
            client = db.get(Client, client_id)
            return ClientRead.model_validate(client) if client else None

    def add_client(self, data: ClientCreate, now: datetime) -> int:
        with self._session() as db:
            client = Client(**data.model_dump(), created_at=now, updated_at=now)
            db.add(client)
            db.commit()
            db.refresh(client)
            return client.id

    def update_client(self, client_id: int, changes: Dict[str, Any], now: datetime) -> bool:
        return self._update(Client, client_id, {**changes, "updated_at": now})

    def delete_client(self, client_id: int) -> bool:
        # Payments, sessions and reminders go with it through ON DELETE CASCADE
        return self._delete(Client, client_id)

    # --- Payments ---

    def sweep_overdue_payments(self, today: date) -> int:
        with self._session() as db:
            updated = (
                db.query(Payment)
                .filter(Payment.status == "pending", Payment.due_date < today)
                .update({Payment.status: "overdue"}, synchronize_session=False)
            )
            db.commit()
            return updated

    def _payment_rows(self, db: Session):
        return db.query(Payment, Client.name, Client.phone).join(Client, Payment.client_id == Client.id)

    @staticmethod
    def _payment_read(payment: Payment, client_name: str, client_phone: str) -> PaymentRead:
        return PaymentRead.model_validate(payment).model_copy(
            update={"client_name": client_name, "client_phone": client_phone}
        )

    def list_payments(self) -> List[PaymentRead]:
        with self._session() as db:
            rows = self._payment_rows(db).order_by(Payment.due_date.desc(), Payment.id.asc()).all()
            return [self._payment_read(*row) for row in rows]

    def get_payment(self, payment_id: int) -> Optional[PaymentRead]:
        with self._session() as db:
            row = self._payment_rows(db).filter(Payment.id == payment_id).first()
            return self._payment_read(*row) if row else None

    def list_overdue_payments(self, today: date) -> List[PaymentRead]:
        with self._session() as db:
            rows = (
                self._payment_rows(db)
                .filter(Payment.status != "paid", Payment.due_date < today)
                .order_by(Payment.due_date.asc(), Payment.id.asc())
                .all()
            )
            return [self._payment_read(*row) for row in rows]

    def add_payment(self, data: PaymentCreate, now: datetime) -> int:
        with self._session() as db:
            self._ensure_client(db, data.client_id)
            payment = Payment(**data.model_dump(), created_at=now)
            db.add(payment)
            db.commit()
            db.refresh(payment)
            return payment.id

    def update_payment(self, payment_id: int, changes: Dict[str, Any]) -> bool:
        return self._update(Payment, payment_id, changes)

    def mark_payment_as_paid(self, payment_id: int, payment_method: Optional[str], now: datetime) -> bool:
        changes: Dict[str, Any] = {"status": "paid", "paid_date": now}
        if payment_method:
            changes["payment_method"] = payment_method
        return self._update(Payment, payment_id, changes)

    def delete_payment(self, payment_id: int) -> bool:
        return self._delete(Payment, payment_id)

    # --- Sessions ---

    def _session_rows(self, db: Session):
        return (
            db.query(SessionModel, Client.name, Client.phone)
            .join(Client, SessionModel.client_id == Client.id)
            .order_by(SessionModel.session_date.asc(), SessionModel.session_time.asc(), SessionModel.id.asc())
        )

    @staticmethod
    def _session_read(session_obj: SessionModel, client_name: str, client_phone: str) -> SessionRead:
        return SessionRead.model_validate(session_obj).model_copy(
            update={"client_name": client_name, "client_phone": client_phone}
        )

    def list_sessions(self) -> List[SessionRead]:
        with self._session() as db:
            return [self._session_read(*row) for row in self._session_rows(db).all()]

    def get_session(self, session_id: int) -> Optional[SessionRead]:
        with self._session() as db:
            row = self._session_rows(db).filter(SessionModel.id == session_id).first()
            return self._session_read(*row) if row else None

    def list_todays_sessions(self, today: date) -> List[SessionRead]:
        with self._session() as db:
            rows = (
                self._session_rows(db)
                .filter(SessionModel.session_date == today, SessionModel.status == "scheduled")
                .all()
            )
            return [self._session_read(*row) for row in rows]

    def add_session(self, data: SessionCreate, now: datetime) -> int:
        with self._session() as db:
            self._ensure_client(db, data.client_id)
            session_obj = SessionModel(**data.model_dump(), created_at=now)
            db.add(session_obj)
            db.commit()
            db.refresh(session_obj)
            return session_obj.id

    def update_session(self, session_id: int, changes: Dict[str, Any]) -> bool:
        return self._update(SessionModel, session_id, changes)

    def delete_session(self, session_id: int) -> bool:
        return self._delete(SessionModel, session_id)

    # --- Reminders ---

    def _reminder_rows(self, db: Session):
        return (
            db.query(Reminder, Client.name)
            .join(Client, Reminder.client_id == Client.id)
            .order_by(Reminder.reminder_date.asc(), Reminder.reminder_time.asc(), Reminder.id.asc())
        )

    @staticmethod
    def _reminder_read(reminder: Reminder, client_name: str) -> ReminderRead:
        return ReminderRead.model_validate(reminder).model_copy(update={"client_name": client_name})

    def list_reminders(self) -> List[ReminderRead]:
        with self._session() as db:
            return [self._reminder_read(*row) for row in self._reminder_rows(db).all()]

    def get_reminder(self, reminder_id: int) -> Optional[ReminderRead]:
        with self._session() as db:
            row = self._reminder_rows(db).filter(Reminder.id == reminder_id).first()
            return self._reminder_read(*row) if row else None

    def add_reminder(self, data: ReminderCreate, now: datetime) -> int:
        with self._session() as db:
            self._ensure_client(db, data.client_id)
            reminder = Reminder(**data.model_dump(), created_at=now)
            db.add(reminder)
            db.commit()
            db.refresh(reminder)
            return reminder.id

    def update_reminder(self, reminder_id: int, changes: Dict[str, Any]) -> bool:
        return self._update(Reminder, reminder_id, changes)

    def delete_reminder(self, reminder_id: int) -> bool:
        return self._delete(Reminder, reminder_id)

    # --- Dashboard ---

    def dashboard_stats(self, today: date) -> DashboardStats:
        month_start, month_end = month_bounds(today)
        with self._session() as db:
            total_clients = db.query(func.count(Client.id)).scalar()
            active_clients = (
                db.query(func.count(distinct(SessionModel.client_id)))
                .filter(SessionModel.status == "scheduled")
                .scalar()
            )
            pending_payments = db.query(func.count(Payment.id)).filter(Payment.status == "pending").scalar()
            overdue_payments = db.query(func.count(Payment.id)).filter(Payment.status == "overdue").scalar()
            total_revenue = (
                db.query(func.coalesce(func.sum(Payment.amount), 0.0))
                .filter(Payment.status == "paid")
                .scalar()
            )
            monthly_revenue = (
                db.query(func.coalesce(func.sum(Payment.amount), 0.0))
                .filter(
                    Payment.status == "paid",
                    Payment.paid_date >= month_start,
                    Payment.paid_date < month_end,
                )
                .scalar()
            )
            upcoming_sessions = (
                db.query(func.count(SessionModel.id))
                .filter(SessionModel.status == "scheduled", SessionModel.session_date >= today)
                .scalar()
            )
            today_sessions = (
                db.query(func.count(SessionModel.id))
                .filter(SessionModel.status == "scheduled", SessionModel.session_date == today)
                .scalar()
            )

        return DashboardStats(
            total_clients=total_clients or 0,
            active_clients=active_clients or 0,
            pending_payments=pending_payments or 0,
            overdue_payments=overdue_payments or 0,
            total_revenue=round(float(total_revenue or 0), 2),
            monthly_revenue=round(float(monthly_revenue or 0), 2),
            upcoming_sessions=upcoming_sessions or 0,
            today_sessions=today_sessions or 0,
        )
