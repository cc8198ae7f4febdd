"""Dashboard schemas for the trainer overview."""

from pydantic import BaseModel, ConfigDict


class DashboardStats(BaseModel):
    total_clients: int = 0
    active_clients: int = 0
    pending_payments: int = 0
    overdue_payments: int = 0
    total_revenue: float = 0.0
    monthly_revenue: float = 0.0
    upcoming_sessions: int = 0
    today_sessions: int = 0

    model_config = ConfigDict(from_attributes=True)
