"""Data-access contract used by the API, independent of the active storage backend."""

import logging
from datetime import date, datetime
from typing import List, Optional

from backend.app.core.events import (
    CLIENTS_UPDATED,
    PAYMENTS_UPDATED,
    REMINDERS_UPDATED,
    SESSIONS_UPDATED,
    ChangeNotifier,
)
from backend.app.core.time import as_utc, utc_now, utc_today
from backend.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from backend.app.schemas.dashboard import DashboardStats
from backend.app.schemas.payment import PaymentCreate, PaymentRead, PaymentUpdate
from backend.app.schemas.reminder import ReminderCreate, ReminderRead, ReminderUpdate
from backend.app.schemas.session import SessionCreate, SessionRead, SessionUpdate
from backend.app.storage.base import StorageBackend

logger = logging.getLogger(__name__)


def _utc_paid_date(changes: dict) -> dict:
    if changes.get("paid_date") is not None:
        changes["paid_date"] = as_utc(changes["paid_date"])
    return changes


class Repository:
    """
    CRUD per entity over an injected backend.

    Mutations publish a change notification once the write is done. Partial
    updates with no fields skip the write entirely.
    """

    def __init__(self, backend: StorageBackend, notifier: Optional[ChangeNotifier] = None):
        self.backend = backend
        self.notifier = notifier or ChangeNotifier()

    @property
    def backend_name(self) -> str:
        return self.backend.name

    def initialize(self) -> None:
        self.backend.initialize()

    def close(self) -> None:
        self.backend.close()

    def _notify(self, *topics: str) -> None:
        for topic in topics:
            self.notifier.publish(topic)

    # --- Clients ---

    def list_clients(self) -> List[ClientRead]:
        return self.backend.list_clients()

    def get_client(self, client_id: int) -> Optional[ClientRead]:
        return self.backend.get_client(client_id)

    def add_client(self, client_in: ClientCreate) -> int:
        client_id = self.backend.add_client(client_in, utc_now())
        logger.info("Client %s added", client_id)
        self._notify(CLIENTS_UPDATED)
        return client_id

    def update_client(self, client_id: int, client_in: ClientUpdate) -> bool:
        changes = client_in.changes()
        if not changes:
            return False
        updated = self.backend.update_client(client_id, changes, utc_now())
        if updated:
            self._notify(CLIENTS_UPDATED)
        return updated

    def delete_client(self, client_id: int) -> bool:
        deleted = self.backend.delete_client(client_id)
        if deleted:
            logger.info("Client %s deleted", client_id)
            self._notify(CLIENTS_UPDATED, PAYMENTS_UPDATED, SESSIONS_UPDATED, REMINDERS_UPDATED)
        return deleted

    # --- Payments ---

    def sweep_overdue_payments(self, today: Optional[date] = None) -> int:
        updated = self.backend.sweep_overdue_payments(today or utc_today())
        if updated:
            logger.info("Marked %s payment(s) as overdue", updated)
            self._notify(PAYMENTS_UPDATED)
        return updated

    def list_payments(self, today: Optional[date] = None) -> List[PaymentRead]:
        """Run the overdue sweep, then return every payment, latest due date first."""
        self.sweep_overdue_payments(today)
        return self.backend.list_payments()

    def get_payment(self, payment_id: int) -> Optional[PaymentRead]:
        return self.backend.get_payment(payment_id)

    def list_overdue_payments(self, today: Optional[date] = None) -> List[PaymentRead]:
        return self.backend.list_overdue_payments(today or utc_today())

    def add_payment(self, payment_in: PaymentCreate) -> int:
        if payment_in.paid_date is not None:
            payment_in = payment_in.model_copy(update={"paid_date": as_utc(payment_in.paid_date)})
        payment_id = self.backend.add_payment(payment_in, utc_now())
        self._notify(PAYMENTS_UPDATED)
        return payment_id

    def update_payment(self, payment_id: int, payment_in: PaymentUpdate) -> bool:
        changes = payment_in.changes()
        if not changes:
            return False
        updated = self.backend.update_payment(payment_id, _utc_paid_date(changes))
        if updated:
            self._notify(PAYMENTS_UPDATED)
        return updated

    def mark_payment_as_paid(
        self, payment_id: int, payment_method: Optional[str] = None, now: Optional[datetime] = None
    ) -> bool:
        paid_at = as_utc(now) if now is not None else utc_now()
        updated = self.backend.mark_payment_as_paid(payment_id, payment_method, paid_at)
        if updated:
            self._notify(PAYMENTS_UPDATED)
        return updated

    def delete_payment(self, payment_id: int) -> bool:
        deleted = self.backend.delete_payment(payment_id)
        if deleted:
            self._notify(PAYMENTS_UPDATED)
        return deleted

    # --- Sessions ---

    def list_sessions(self) -> List[SessionRead]:
        return self.backend.list_sessions()

    def get_session(self, session_id: int) -> Optional[SessionRead]:
        return self.backend.get_session(session_id)

    def list_todays_sessions(self, today: Optional[date] = None) -> List[SessionRead]:
        return self.backend.list_todays_sessions(today or utc_today())

    def add_session(self, session_in: SessionCreate) -> int:
        session_id = self.backend.add_session(session_in, utc_now())
        self._notify(SESSIONS_UPDATED)
        return session_id

    def update_session(self, session_id: int, session_in: SessionUpdate) -> bool:
        changes = session_in.changes()
        if not changes:
            return False
        updated = self.backend.update_session(session_id, changes)
        if updated:
            self._notify(SESSIONS_UPDATED)
        return updated

    def delete_session(self, session_id: int) -> bool:
        deleted = self.backend.delete_session(session_id)
        if deleted:
            self._notify(SESSIONS_UPDATED)
        return deleted

    # --- Reminders ---

    def list_reminders(self) -> List[ReminderRead]:
        return self.backend.list_reminders()

    def get_reminder(self, reminder_id: int) -> Optional[ReminderRead]:
        return self.backend.get_reminder(reminder_id)

    def add_reminder(self, reminder_in: ReminderCreate) -> int:
        reminder_id = self.backend.add_reminder(reminder_in, utc_now())
        self._notify(REMINDERS_UPDATED)
        return reminder_id

    def update_reminder(self, reminder_id: int, reminder_in: ReminderUpdate) -> bool:
        changes = reminder_in.changes()
        if not changes:
            return False
        updated = self.backend.update_reminder(reminder_id, changes)
        if updated:
            self._notify(REMINDERS_UPDATED)
        return updated

    def mark_reminder_sent(self, reminder_id: int) -> bool:
        return self.update_reminder(reminder_id, ReminderUpdate(status="sent", whatsapp_sent=True))

    def delete_reminder(self, reminder_id: int) -> bool:
        deleted = self.backend.delete_reminder(reminder_id)
        if deleted:
            self._notify(REMINDERS_UPDATED)
        return deleted

    # --- Dashboard ---

    def get_dashboard_stats(self, today: Optional[date] = None) -> DashboardStats:
        return self.backend.dashboard_stats(today or utc_today())
