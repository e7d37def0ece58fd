"""Read-only status, schedule and report views.

Every view takes an injectable `now` so the trailing windows ("today",
"last 24h", "last N days") are deterministic in tests.
"""

from __future__ import annotations

from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import month_bounds
from ..common.validators import require_in_range
from ..core.constants import (
    DEFAULT_PRODUCTIVITY_DAYS,
    DEFAULT_REPORT_DAYS,
    MAX_REPORT_DAYS,
    MAX_REPORT_YEAR,
    MIN_REPORT_YEAR,
    OFF_DUTY_LIMIT,
    OFF_DUTY_WINDOW_HOURS,
    VACATION_CALENDAR_LIMIT,
    WEEK_DAYS,
)
from ..core.enums import EntryType, RequestStatus, SessionType
from ..ledger.model import TimeEntry
from ..ledger.repository import TimeEntryRepository
from ..sessions.repository import SessionRepository
from ..users.repository import UserRepository
from ..vacations.model import VacationRequest
from ..vacations.repository import BalanceRepository, VacationRequestRepository
from .calculator.base import WorkHoursCalculator
from .calculator.standard_calculator import StandardWorkHoursCalculator
from .model import (
    ActivityRow,
    BalanceRow,
    DayActivity,
    DaysCountRow,
    EntryRow,
    PresenceRow,
    ProductivityRow,
    TeamOverview,
    VacationRow,
    WorkHoursRow,
)

OFF_ENTRY_TYPES = (EntryType.OFF, EntryType.OFF_SICK)


def _start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


class _NamedView:
    """Shared helper: resolve user ids to display names (id when unknown)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def _names(self) -> dict[str, str]:
        return {u.user_id: u.display_name for u in self._users.list_all()}

    @staticmethod
    def _entry_rows(entries: Iterable[TimeEntry], names: dict[str, str]) -> list[EntryRow]:
        return [
            EntryRow(
                user_id=e.user_id,
                display_name=names.get(e.user_id, e.user_id),
                entry_type=e.entry_type,
                timestamp=e.timestamp,
                location=e.location,
                notes=e.notes,
            )
            for e in entries
        ]

    @staticmethod
    def _vacation_rows(requests: Iterable[VacationRequest], names: dict[str, str]) -> list[VacationRow]:
        return [
            VacationRow(
                request_id=r.request_id,
                user_id=r.user_id,
                display_name=names.get(r.user_id, r.user_id),
                start_date=r.start_date,
                end_date=r.end_date,
                requested_days=r.requested_days,
            )
            for r in requests
        ]

    def _distinct_days(self, entries: Iterable[TimeEntry], names: dict[str, str]) -> list[DaysCountRow]:
        days: dict[str, set] = {uid: set() for uid in names}
        for e in entries:
            days.setdefault(e.user_id, set()).add(e.timestamp.date())

        rows = [DaysCountRow(user_id=uid, display_name=names.get(uid, uid), days=len(d)) for uid, d in days.items()]
        rows.sort(key=lambda r: (-r.days, r.display_name))
        return rows


class StatusService(_NamedView):
    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        entries: TimeEntryRepository,
        requests: VacationRequestRepository,
    ):
        super().__init__(users)
        self._sessions = sessions
        self._entries = entries
        self._requests = requests

    def _presence(self, session_type: SessionType) -> list[PresenceRow]:
        names = self._names()
        return [
            PresenceRow(
                user_id=s.user_id,
                display_name=names.get(s.user_id, s.user_id),
                session_type=s.session_type,
                location=s.location,
                since=s.start_time,
            )
            for s in self._sessions.list_by_type(session_type)
        ]

    def online(self) -> list[PresenceRow]:
        return self._presence(SessionType.WORK)

    def on_break(self) -> list[PresenceRow]:
        return self._presence(SessionType.BREAK)

    def on_vacation(self, *, now: datetime | None = None) -> list[VacationRow]:
        now = now or datetime.now()
        return self._vacation_rows(self._requests.list_approved_covering(day=now.date()), self._names())

    def off_duty(self, *, now: datetime | None = None, limit: int = OFF_DUTY_LIMIT) -> list[EntryRow]:
        now = now or datetime.now()
        entries = self._entries.list_between(
            start=now - timedelta(hours=OFF_DUTY_WINDOW_HOURS),
            entry_types=OFF_ENTRY_TYPES,
            newest_first=True,
            limit=limit,
        )
        return self._entry_rows(entries, self._names())

    def team_overview(self, *, now: datetime | None = None) -> TeamOverview:
        now = now or datetime.now()
        off_entries = self._entries.list_between(
            start=now - timedelta(hours=OFF_DUTY_WINDOW_HOURS),
            entry_types=OFF_ENTRY_TYPES,
        )
        return TeamOverview(
            online=len(self._sessions.list_by_type(SessionType.WORK)),
            on_break=len(self._sessions.list_by_type(SessionType.BREAK)),
            on_vacation=len(self._requests.list_approved_covering(day=now.date())),
            off_duty=len(off_entries),
            generated_at=now,
        )


class ScheduleService(_NamedView):
    def __init__(self, users: UserRepository, entries: TimeEntryRepository, requests: VacationRequestRepository):
        super().__init__(users)
        self._entries = entries
        self._requests = requests

    def today(self, *, now: datetime | None = None) -> list[DayActivity]:
        now = now or datetime.now()
        start = _start_of_day(now)
        entries = self._entries.list_between(start=start, end=start + timedelta(days=1), newest_first=False)

        grouped: "OrderedDict[str, list[TimeEntry]]" = OrderedDict()
        for e in entries:
            grouped.setdefault(e.user_id, []).append(e)

        names = self._names()
        return [
            DayActivity(user_id=uid, display_name=names.get(uid, uid), entries=self._entry_rows(items, names))
            for uid, items in grouped.items()
        ]

    def week(self, *, now: datetime | None = None) -> list[DaysCountRow]:
        """Distinct active days per user over the last 7 days (users without entries show 0)."""
        now = now or datetime.now()
        entries = self._entries.list_between(start=now - timedelta(days=WEEK_DAYS), newest_first=False)
        return self._distinct_days(entries, self._names())

    def vacation_calendar(
        self, *, now: datetime | None = None, limit: int = VACATION_CALENDAR_LIMIT
    ) -> list[VacationRow]:
        now = now or datetime.now()
        upcoming = self._requests.list_approved_upcoming(from_day=now.date(), limit=limit)
        return self._vacation_rows(upcoming, self._names())


class ReportService(_NamedView):
    def __init__(
        self,
        users: UserRepository,
        entries: TimeEntryRepository,
        requests: VacationRequestRepository,
        balances: BalanceRepository,
        *,
        calculator: Optional[WorkHoursCalculator] = None,
    ):
        super().__init__(users)
        self._entries = entries
        self._requests = requests
        self._balances = balances
        self._calculator = calculator or StandardWorkHoursCalculator()

    @staticmethod
    def _days(days: Optional[int], default: int) -> int:
        if days is None:
            return default
        return require_in_range(days, "Days", 1, MAX_REPORT_DAYS)

    def time_today(self, *, now: datetime | None = None) -> list[EntryRow]:
        now = now or datetime.now()
        start = _start_of_day(now)
        entries = self._entries.list_between(start=start, end=start + timedelta(days=1), newest_first=True)
        return self._entry_rows(entries, self._names())

    def vacation_pending(self) -> list[VacationRow]:
        return self._vacation_rows(self._requests.list_by_status(status=RequestStatus.PENDING), self._names())

    def user_activity(self, days: Optional[int] = None, *, now: datetime | None = None) -> list[ActivityRow]:
        days = self._days(days, DEFAULT_REPORT_DAYS)
        now = now or datetime.now()
        return [
            ActivityRow(user_id=u.user_id, display_name=u.display_name, last_active=u.last_active)
            for u in self._users.list_active_since(now - timedelta(days=days))
        ]

    def monthly_attendance(
        self,
        month: Optional[int] = None,
        year: Optional[int] = None,
        *,
        now: datetime | None = None,
    ) -> list[DaysCountRow]:
        now = now or datetime.now()
        month = now.month if month is None else require_in_range(month, "Month", 1, 12)
        year = now.year if year is None else require_in_range(year, "Year", MIN_REPORT_YEAR, MAX_REPORT_YEAR)

        start, end = month_bounds(year, month)
        entries = self._entries.list_between(start=start, end=end, newest_first=False)
        return self._distinct_days(entries, self._names())

    def productivity(self, days: Optional[int] = None, *, now: datetime | None = None) -> list[ProductivityRow]:
        days = self._days(days, DEFAULT_PRODUCTIVITY_DAYS)
        now = now or datetime.now()
        entries = self._entries.list_between(start=now - timedelta(days=days), newest_first=False)

        names = self._names()
        work_days: dict[str, set] = {uid: set() for uid in names}
        breaks: dict[str, int] = {uid: 0 for uid in names}
        for e in entries:
            work_days.setdefault(e.user_id, set()).add(e.timestamp.date())
            if e.entry_type == EntryType.PAUZA_START:
                breaks[e.user_id] = breaks.get(e.user_id, 0) + 1

        rows = [
            ProductivityRow(
                user_id=uid,
                display_name=names.get(uid, uid),
                work_days=len(d),
                breaks_taken=breaks.get(uid, 0),
            )
            for uid, d in work_days.items()
        ]
        rows.sort(key=lambda r: (-r.work_days, r.display_name))
        return rows

    def vacation_usage(self) -> list[BalanceRow]:
        names = self._names()
        return [
            BalanceRow(
                user_id=b.user_id,
                display_name=names.get(b.user_id, b.user_id),
                total_days=b.total_days,
                used_days=b.used_days,
                pending_days=b.pending_days,
                available_days=b.available_days,
            )
            for b in self._balances.list_all()
        ]

    def work_hours(self, days: Optional[int] = None, *, now: datetime | None = None) -> list[WorkHoursRow]:
        days = self._days(days, DEFAULT_REPORT_DAYS)
        now = now or datetime.now()
        entries = self._entries.list_between(start=now - timedelta(days=days), end=now, newest_first=False)

        per_user: dict[str, list[TimeEntry]] = {}
        for e in entries:
            per_user.setdefault(e.user_id, []).append(e)

        names = self._names()
        rows = [
            WorkHoursRow(
                user_id=uid,
                display_name=names.get(uid, uid),
                minutes=self._calculator.worked_minutes(items),
            )
            for uid, items in per_user.items()
        ]
        rows.sort(key=lambda r: r.minutes, reverse=True)
        return rows
