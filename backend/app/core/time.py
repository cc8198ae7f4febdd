"""Time utilities for timezone-aware UTC datetimes."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime for defaults and onupdate hooks."""
    return datetime.now(UTC)


def utc_today() -> date:
    """Return the current UTC calendar date, the reference day for overdue and session checks."""
    return utc_now().date()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes and convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def month_bounds(day: date) -> tuple[datetime, datetime]:
    """Return the [start, end) UTC datetimes of the calendar month containing ``day``."""
    start = datetime(day.year, day.month, 1, tzinfo=UTC)
    if day.month == 12:
        end = datetime(day.year + 1, 1, 1, tzinfo=UTC)
    else:
        end = datetime(day.year, day.month + 1, 1, tzinfo=UTC)
    return start, end
