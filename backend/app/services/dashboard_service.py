"""Dashboard statistics and payment status rules computed over in-memory records."""

from datetime import date
from typing import Iterable, List

from backend.app.core.time import as_utc
from backend.app.schemas.client import ClientRead
from backend.app.schemas.dashboard import DashboardStats
from backend.app.schemas.payment import PaymentRead
from backend.app.schemas.session import SessionRead


def is_due_for_overdue(payment: PaymentRead, today: date) -> bool:
    return payment.status == "pending" and payment.due_date < today


def compute_dashboard_stats(
    clients: List[ClientRead],
    payments: List[PaymentRead],
    sessions: List[SessionRead],
    *,
    today: date,
) -> DashboardStats:
    scheduled = [s for s in sessions if s.status == "scheduled"]
    paid = [p for p in payments if p.status == "paid"]

    monthly_paid: Iterable[PaymentRead] = (
        p
        for p in paid
        if p.paid_date is not None
        and (as_utc(p.paid_date).year, as_utc(p.paid_date).month) == (today.year, today.month)
    )

    return DashboardStats(
        total_clients=len(clients),
        active_clients=len({s.client_id for s in scheduled}),
        pending_payments=sum(1 for p in payments if p.status == "pending"),
        overdue_payments=sum(1 for p in payments if p.status == "overdue"),
        total_revenue=round(sum(p.amount for p in paid), 2),
        monthly_revenue=round(sum(p.amount for p in monthly_paid), 2),
        upcoming_sessions=sum(1 for s in scheduled if s.session_date >= today),
        today_sessions=sum(1 for s in scheduled if s.session_date == today),
    )
