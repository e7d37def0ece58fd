from __future__ import annotations

from datetime import date, datetime, timedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def elapsed(start: datetime, end: datetime) -> timedelta:
    """Wall-clock time between two instants, never negative."""
    delta = end - start
    if delta < timedelta(0):
        return timedelta(0)
    return delta


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[first instant of month, first instant of next month)."""
    start = datetime(int(year), int(month), 1)
    if start.month == 12:
        end = datetime(start.year + 1, 1, 1)
    else:
        end = datetime(start.year, start.month + 1, 1)
    return start, end
