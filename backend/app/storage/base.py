"""Storage contract shared by the relational and fallback backends."""

from abc import ABC, abstractmethod
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from backend.app.schemas.client import ClientCreate, ClientRead
from backend.app.schemas.dashboard import DashboardStats
from backend.app.schemas.payment import PaymentCreate, PaymentRead
from backend.app.schemas.reminder import ReminderCreate, ReminderRead
from backend.app.schemas.session import SessionCreate, SessionRead

UNKNOWN_CLIENT_NAME = "Cliente desconocido"


class StorageBackend(ABC):
    """
    One storage strategy. The repository talks only to this interface, so both
    implementations must return the same shapes in the same order.

    ``changes`` arguments hold only the fields the caller supplied; callers
    never pass an empty dict. Update and delete methods return False when the
    id does not exist.
    """

    name: str = "abstract"

    @abstractmethod
    def initialize(self) -> None:
        """Prepare storage for use. Safe to call more than once."""

    def close(self) -> None:
        """Release resources held by the backend."""

    # --- Clients ---

    @abstractmethod
    def list_clients(self) -> List[ClientRead]: ...

    @abstractmethod
    def get_client(self, client_id: int) -> Optional[ClientRead]: ...

    @abstractmethod
    def add_client(self, data: ClientCreate, now: datetime) -> int: ...

    @abstractmethod
    def update_client(self, client_id: int, changes: Dict[str, Any], now: datetime) -> bool: ...

    @abstractmethod
    def delete_client(self, client_id: int) -> bool: ...

    # --- Payments ---

    @abstractmethod
    def sweep_overdue_payments(self, today: date) -> int:
        """Flip pending payments due before ``today`` to overdue; return how many changed."""

    @abstractmethod
    def list_payments(self) -> List[PaymentRead]: ...

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[PaymentRead]: ...

    @abstractmethod
    def list_overdue_payments(self, today: date) -> List[PaymentRead]: ...

    @abstractmethod
    def add_payment(self, data: PaymentCreate, now: datetime) -> int: ...

    @abstractmethod
    def update_payment(self, payment_id: int, changes: Dict[str, Any]) -> bool: ...

    @abstractmethod
    def mark_payment_as_paid(self, payment_id: int, payment_method: Optional[str], now: datetime) -> bool: ...

    @abstractmethod
    def delete_payment(self, payment_id: int) -> bool: ...

    # --- Sessions ---

    @abstractmethod
    def list_sessions(self) -> List[SessionRead]: ...

    @abstractmethod
    def get_session(self, session_id: int) -> Optional[SessionRead]: ...

    @abstractmethod
    def list_todays_sessions(self, today: date) -> List[SessionRead]: ...

    @abstractmethod
    def add_session(self, data: SessionCreate, now: datetime) -> int: ...

    @abstractmethod
    def update_session(self, session_id: int, changes: Dict[str, Any]) -> bool: ...

    @abstractmethod
    def delete_session(self, session_id: int) -> bool: ...

    # --- Reminders ---

    @abstractmethod
    def list_reminders(self) -> List[ReminderRead]: ...

    @abstractmethod
    def get_reminder(self, reminder_id: int) -> Optional[ReminderRead]: ...

    @abstractmethod
    def add_reminder(self, data: ReminderCreate, now: datetime) -> int: ...

    @abstractmethod
    def update_reminder(self, reminder_id: int, changes: Dict[str, Any]) -> bool: ...

    @abstractmethod
    def delete_reminder(self, reminder_id: int) -> bool: ...

    # --- Dashboard ---

    @abstractmethod
    def dashboard_stats(self, today: date) -> DashboardStats: ...
