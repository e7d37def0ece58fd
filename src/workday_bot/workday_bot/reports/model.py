from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import EntryType, Location, SessionType


@dataclass(frozen=True)
class PresenceRow:
    user_id: str
    display_name: str
    session_type: SessionType
    location: Location
    since: datetime


@dataclass(frozen=True)
class VacationRow:
    request_id: int
    user_id: str
    display_name: str
    start_date: date
    end_date: date
    requested_days: int


@dataclass(frozen=True)
class EntryRow:
    user_id: str
    display_name: str
    entry_type: EntryType
    timestamp: datetime
    location: Location
    notes: Optional[str] = None


@dataclass(frozen=True)
class TeamOverview:
    online: int
    on_break: int
    on_vacation: int
    off_duty: int
    generated_at: datetime


@dataclass(frozen=True)
class DayActivity:
    """Ledger entries of one user for one day, in time order."""

    user_id: str
    display_name: str
    entries: list[EntryRow] = field(default_factory=list)


@dataclass(frozen=True)
class DaysCountRow:
    user_id: str
    display_name: str
    days: int


@dataclass(frozen=True)
class ProductivityRow:
    user_id: str
    display_name: str
    work_days: int
    breaks_taken: int


@dataclass(frozen=True)
class ActivityRow:
    user_id: str
    display_name: str
    last_active: datetime


@dataclass(frozen=True)
class BalanceRow:
    user_id: str
    display_name: str
    total_days: int
    used_days: int
    pending_days: int
    available_days: int


@dataclass(frozen=True)
class WorkHoursRow:
    user_id: str
    display_name: str
    minutes: int

    @property
    def hours_text(self) -> str:
        return f"{self.minutes // 60:02d}:{self.minutes % 60:02d}"
