"""
Fallback backend: the whole dataset as one JSON document under a single key
of a local key-value store.

Every mutation reads the document, changes it and writes it back whole.
Ids are the highest existing id plus one.
"""

import json
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.core.time import utc_now
from backend.app.schemas.client import ClientCreate, ClientRead
from backend.app.schemas.dashboard import DashboardStats
from backend.app.schemas.payment import PaymentCreate, PaymentRead
from backend.app.schemas.reminder import ReminderCreate, ReminderRead
from backend.app.schemas.session import SessionCreate, SessionRead
from backend.app.services.dashboard_service import compute_dashboard_stats, is_due_for_overdue
from backend.app.storage.base import UNKNOWN_CLIENT_NAME, StorageBackend
from backend.app.storage.seed import COLLECTIONS, build_seed_document, empty_document

logger = logging.getLogger(__name__)

# Joined display fields are never persisted
DERIVED_FIELDS = {"client_name", "client_phone"}


def _next_id(items: List[Dict[str, Any]]) -> int:
    return max((item.get("id") or 0 for item in items), default=0) + 1


def _find_index(items: List[Dict[str, Any]], obj_id: int) -> Optional[int]:
    return next((i for i, item in enumerate(items) if item.get("id") == obj_id), None)


def _dump(record: BaseModel) -> Dict[str, Any]:
    return record.model_dump(mode="json", exclude=DERIVED_FIELDS)


class FallbackBackend(StorageBackend):
    name = "fallback"

    def __init__(self, store, key: str = "trainerDB", seed: bool = True, cascade_delete: bool = True):
        self.store = store
        self.key = key
        self.seed = seed
        self.cascade_delete = cascade_delete

    def initialize(self) -> None:
        if self.store.get_item(self.key) is not None:
            return
        if self.seed:
            logger.info("Seeding empty key-value store under %r", self.key)
            self._save(build_seed_document(utc_now()))

    # --- Document access ---

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        raw = self.store.get_item(self.key)
        if raw:
            try:
                doc = json.loads(raw)
            except (TypeError, ValueError):
                logger.warning("Corrupt document under %r, starting empty", self.key)
            else:
                if isinstance(doc, dict):
                    for collection in COLLECTIONS:
                        doc.setdefault(collection, [])
                    return doc
        doc = empty_document()
        self._save(doc)
        return doc

    def _save(self, doc: Dict[str, List[Dict[str, Any]]]) -> None:
        self.store.set_item(self.key, json.dumps(doc, ensure_ascii=False))

    @staticmethod
    def _records(doc, collection: str, schema: Type[BaseModel]) -> list:
        return [schema.model_validate(item) for item in doc[collection]]

    def _clients_by_id(self, doc) -> Dict[int, ClientRead]:
        return {c.id: c for c in self._records(doc, "clients", ClientRead)}

    def _ensure_client(self, doc, client_id: int) -> None:
        if _find_index(doc["clients"], client_id) is None:
            raise ClientNotFoundError(client_id)

    def _insert(self, collection: str, schema: Type[BaseModel], data: BaseModel, **stamps) -> int:
        doc = self._load()
        if collection != "clients":
            self._ensure_client(doc, data.client_id)
        new_id = _next_id(doc[collection])
        record = schema(**data.model_dump(), id=new_id, **stamps)
        doc[collection].append(_dump(record))
        self._save(doc)
        return new_id

    def _update(self, collection: str, schema: Type[BaseModel], obj_id: int, changes: Dict[str, Any]) -> bool:
        doc = self._load()
        index = _find_index(doc[collection], obj_id)
        if index is None:
            return False
        current = schema.model_validate(doc[collection][index])
        merged = schema.model_validate({**current.model_dump(), **changes})
        doc[collection][index] = _dump(merged)
        self._save(doc)
        return True

    def _delete(self, collection: str, obj_id: int) -> bool:
        doc = self._load()
        remaining = [item for item in doc[collection] if item.get("id") != obj_id]
        if len(remaining) == len(doc[collection]):
            return False
        doc[collection] = remaining
        self._save(doc)
        return True

    # --- Clients ---

    def list_clients(self) -> List[ClientRead]:
        clients = self._records(self._load(), "clients", ClientRead)
        return sorted(clients, key=lambda c: (c.name, c.id))

    def get_client(self, client_id: int) -> Optional[ClientRead]:
        return self._clients_by_id(self._load()).get(client_id)

    def add_client(self, data: ClientCreate, now: datetime) -> int:
        return self._insert("clients", ClientRead, data, created_at=now, updated_at=now)

    def update_client(self, client_id: int, changes: Dict[str, Any], now: datetime) -> bool:
        return self._update("clients", ClientRead, client_id, {**changes, "updated_at": now})

    def delete_client(self, client_id: int) -> bool:
        doc = self._load()
        remaining = [c for c in doc["clients"] if c.get("id") != client_id]
        if len(remaining) == len(doc["clients"]):
            return False
        doc["clients"] = remaining
        if self.cascade_delete:
            for collection in ("payments", "sessions", "reminders"):
                doc[collection] = [item for item in doc[collection] if item.get("client_id") != client_id]
        self._save(doc)
        return True

    # --- Payments ---

    def _decorated_payments(self, doc) -> List[PaymentRead]:
        clients = self._clients_by_id(doc)
        payments = []
        for payment in self._records(doc, "payments", PaymentRead):
            client = clients.get(payment.client_id)
            payments.append(
                payment.model_copy(
                    update={
                        "client_name": client.name if client else UNKNOWN_CLIENT_NAME,
                        "client_phone": client.phone if client else None,
                    }
                )
            )
        return sorted(payments, key=lambda p: p.id)

    def sweep_overdue_payments(self, today: date) -> int:
        doc = self._load()
        updated = 0
        for item in doc["payments"]:
            if is_due_for_overdue(PaymentRead.model_validate(item), today):
                item["status"] = "overdue"
                updated += 1
        if updated:
            self._save(doc)
        return updated

    def list_payments(self) -> List[PaymentRead]:
        payments = self._decorated_payments(self._load())
        return sorted(payments, key=lambda p: p.due_date, reverse=True)

    def get_payment(self, payment_id: int) -> Optional[PaymentRead]:
        return next((p for p in self._decorated_payments(self._load()) if p.id == payment_id), None)

    def list_overdue_payments(self, today: date) -> List[PaymentRead]:
        payments = self._decorated_payments(self._load())
        overdue = [p for p in payments if p.status != "paid" and p.due_date < today]
        return sorted(overdue, key=lambda p: p.due_date)

    def add_payment(self, data: PaymentCreate, now: datetime) -> int:
        return self._insert("payments", PaymentRead, data, created_at=now)

    def update_payment(self, payment_id: int, changes: Dict[str, Any]) -> bool:
        return self._update("payments", PaymentRead, payment_id, changes)

    def mark_payment_as_paid(self, payment_id: int, payment_method: Optional[str], now: datetime) -> bool:
        changes: Dict[str, Any] = {"status": "paid", "paid_date": now}
        if payment_method:
            changes["payment_method"] = payment_method
        return self._update("payments", PaymentRead, payment_id, changes)

    def delete_payment(self, payment_id: int) -> bool:
        return self._delete("payments", payment_id)

    # --- Sessions ---

    def _decorated_sessions(self, doc) -> List[SessionRead]:
        clients = self._clients_by_id(doc)
        sessions = []
        for session in self._records(doc, "sessions", SessionRead):
            client = clients.get(session.client_id)
            sessions.append(
                session.model_copy(
                    update={
                        "client_name": client.name if client else UNKNOWN_CLIENT_NAME,
                        "client_phone": client.phone if client else None,
                    }
                )
            )
        return sorted(sessions, key=lambda s: (s.session_date, s.session_time, s.id))

    def list_sessions(self) -> List[SessionRead]:
        return self._decorated_sessions(self._load())

    def get_session(self, session_id: int) -> Optional[SessionRead]:
        return next((s for s in self._decorated_sessions(self._load()) if s.id == session_id), None)

    def list_todays_sessions(self, today: date) -> List[SessionRead]:
        return [
            s
            for s in self._decorated_sessions(self._load())
            if s.session_date == today and s.status == "scheduled"
        ]

    def add_session(self, data: SessionCreate, now: datetime) -> int:
        return self._insert("sessions", SessionRead, data, created_at=now)

    def update_session(self, session_id: int, changes: Dict[str, Any]) -> bool:
        return self._update("sessions", SessionRead, session_id, changes)

    def delete_session(self, session_id: int) -> bool:
        return self._delete("sessions", session_id)

    # --- Reminders ---

    def _decorated_reminders(self, doc) -> List[ReminderRead]:
        clients = self._clients_by_id(doc)
        reminders = [
            r.model_copy(
                update={"client_name": clients[r.client_id].name if r.client_id in clients else UNKNOWN_CLIENT_NAME}
            )
            for r in self._records(doc, "reminders", ReminderRead)
        ]
        return sorted(reminders, key=lambda r: (r.reminder_date, r.reminder_time, r.id))

    def list_reminders(self) -> List[ReminderRead]:
        return self._decorated_reminders(self._load())

    def get_reminder(self, reminder_id: int) -> Optional[ReminderRead]:
        return next((r for r in self._decorated_reminders(self._load()) if r.id == reminder_id), None)

    def add_reminder(self, data: ReminderCreate, now: datetime) -> int:
        return self._insert("reminders", ReminderRead, data, created_at=now)

    def update_reminder(self, reminder_id: int, changes: Dict[str, Any]) -> bool:
        return self._update("reminders", ReminderRead, reminder_id, changes)

    def delete_reminder(self, reminder_id: int) -> bool:
        return self._delete("reminders", reminder_id)

    # --- Dashboard ---

    def dashboard_stats(self, today: date) -> DashboardStats:
        doc = self._load()
        return compute_dashboard_stats(
            self._records(doc, "clients", ClientRead),
            self._records(doc, "payments", PaymentRead),
            self._records(doc, "sessions", SessionRead),
            today=today,
        )
