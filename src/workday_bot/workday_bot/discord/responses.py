"""Plain-text rendering of service results into interaction responses."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from ..audit.model import Reminder
from ..core.enums import BalanceOperation, Location
from ..ledger.model import TimeEntry
from ..reports.model import (
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
from ..sessions.model import ActiveSession, ClockInResult, EndedSession, OffResult
from ..vacations.model import VacationBalance, VacationRequest
from .commands import EPHEMERAL, ResponseType

# Discord rejects message content above 2000 characters.
MAX_CONTENT = 2000

LOCATION_LABELS = {
    Location.OFFICE: "office",
    Location.HOME: "home",
    Location.AWAY: "away",
}


def pong() -> dict:
    return {"type": int(ResponseType.PONG)}


def message(content: str, *, ephemeral: bool = False) -> dict:
    if len(content) > MAX_CONTENT:
        content = content[: MAX_CONTENT - 3] + "..."
    data: dict = {"content": content}
    if ephemeral:
        data["flags"] = EPHEMERAL
    return {"type": int(ResponseType.CHANNEL_MESSAGE_WITH_SOURCE), "data": data}


def error(content: str) -> dict:
    return message(content, ephemeral=True)


def format_duration(delta: timedelta) -> str:
    minutes = int(delta.total_seconds() // 60)
    hours, minutes = divmod(max(minutes, 0), 60)
    if hours:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def _time(value: datetime) -> str:
    return value.strftime("%H:%M")


def _stamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def _lines(title: str, rows: Iterable[str], empty: str) -> str:
    body = list(rows)
    if not body:
        return f"{title}\n{empty}"
    return "\n".join([title, *body])


# --- sessions ---


def clock_in(name: str, result: ClockInResult) -> dict:
    text = f"{name} clocked in ({LOCATION_LABELS[result.location]}) at {_time(result.started_at)}"
    if result.closed_break:
        text += f"\nBreak ended automatically after {format_duration(result.closed_break.duration)}"
    return message(text)


def clock_out(name: str, ended: EndedSession) -> dict:
    return message(
        f"{name} clocked out at {_time(ended.end_time)}\n"
        f"Worked {format_duration(ended.duration)} ({LOCATION_LABELS[ended.location]})"
    )


def break_started(name: str, session: ActiveSession) -> dict:
    return message(f"{name} started a break at {_time(session.start_time)}")


def break_ended(name: str, ended: EndedSession) -> dict:
    return message(f"{name} is back from a break of {format_duration(ended.duration)}")


def off(name: str, result: OffResult) -> dict:
    text = f"{name} is off duty since {_time(result.at)}"
    if result.closed_work:
        text += f"\nWorked {format_duration(result.closed_work.duration)}"
    return message(text)


def time_log(entries: Sequence[TimeEntry], days: int) -> dict:
    rows = (
        f"{_stamp(e.timestamp)}  {e.entry_type.value} ({LOCATION_LABELS[e.location]})"
        + (f"  {e.notes}" if e.notes else "")
        for e in entries
    )
    return message(_lines(f"Time log, last {days} days:", rows, "No entries."), ephemeral=True)


# --- vacations ---


def vacation_requested(request_id: int, days: int, start, end) -> dict:
    return message(
        f"Vacation request #{request_id} submitted: {days} working days, {start} to {end}.\n"
        "Waiting for PM approval."
    )


def sick_leave(request_id: int, days: int, start, end) -> dict:
    return message(f"Sick leave #{request_id} recorded: {days} working days, {start} to {end}.")


def _request_line(r: VacationRequest, name: Optional[str] = None) -> str:
    who = f" {name}" if name else ""
    return (
        f"#{r.request_id}{who}: {r.kind.value} {r.start_date} to {r.end_date}, "
        f"{r.requested_days} days, {r.status.value}"
    )


def vacation_status(balance: Optional[VacationBalance], requests: Sequence[VacationRequest]) -> dict:
    if balance:
        head = (
            f"Vacation balance: {balance.available_days} available "
            f"(total {balance.total_days}, used {balance.used_days}, pending {balance.pending_days})"
        )
    else:
        head = "No vacation balance yet, ask an administrator."
    body = _lines("Recent requests:", (_request_line(r) for r in requests), "None.")
    return message(f"{head}\n{body}", ephemeral=True)


def balance_adjusted(target_name: str, operation: BalanceOperation, days: int, balance: VacationBalance) -> dict:
    verbs = {
        BalanceOperation.ADD: f"added {days} days to",
        BalanceOperation.REMOVE: f"removed {days} days from",
        BalanceOperation.SET: f"set to {days} days for",
    }
    return message(
        f"Balance {verbs[operation]} {target_name}. "
        f"Total {balance.total_days}, available {balance.available_days}."
    )


def pending_requests(requests: Sequence[VacationRequest], names: dict[str, str]) -> dict:
    rows = (_request_line(r, names.get(r.user_id, r.user_id)) for r in requests)
    return message(_lines("Pending vacation requests:", rows, "Nothing to review."), ephemeral=True)


def decision(request: VacationRequest) -> dict:
    text = f"Request #{request.request_id} is now {request.status.value}"
    if request.rejection_reason:
        text += f": {request.rejection_reason}"
    return message(text)


# --- reminders ---


def reminder(actor_name: str, target_name: str, item: Reminder) -> dict:
    return message(
        f"{actor_name} set a reminder for {target_name} at {_stamp(item.scheduled_for)}: {item.message}"
    )


# --- status / schedule / report ---


def presence(title: str, rows: Sequence[PresenceRow], empty: str) -> dict:
    lines = (f"{r.display_name}: {LOCATION_LABELS[r.location]} since {_time(r.since)}" for r in rows)
    return message(_lines(f"{title} ({len(rows)})", lines, empty))


def vacations(title: str, rows: Sequence[VacationRow], empty: str) -> dict:
    lines = (f"{r.display_name}: {r.start_date} to {r.end_date}, {r.requested_days} days" for r in rows)
    return message(_lines(title, lines, empty))


def entries(title: str, rows: Sequence[EntryRow], empty: str) -> dict:
    lines = (
        f"{_stamp(r.timestamp)} {r.display_name}: {r.entry_type.value}" + (f" ({r.notes})" if r.notes else "")
        for r in rows
    )
    return message(_lines(title, lines, empty))


def team_overview(view: TeamOverview) -> dict:
    return message(
        f"Team overview {_stamp(view.generated_at)}\n"
        f"Online: {view.online}\n"
        f"On break: {view.on_break}\n"
        f"On vacation: {view.on_vacation}\n"
        f"Off duty (24h): {view.off_duty}"
    )


def day_schedule(rows: Sequence[DayActivity]) -> dict:
    lines = (
        f"{a.display_name}: " + ", ".join(f"{e.entry_type.value} {_time(e.timestamp)}" for e in a.entries)
        for a in rows
    )
    return message(_lines("Today's activity:", lines, "No activity today."))


def day_counts(title: str, rows: Sequence[DaysCountRow]) -> dict:
    lines = (f"{r.display_name}: {r.days} days" for r in rows)
    return message(_lines(title, lines, "No users yet."))


def activity(rows: Sequence[ActivityRow], days: int) -> dict:
    lines = (f"{r.display_name}: last seen {_stamp(r.last_active)}" for r in rows)
    return message(_lines(f"Active users, last {days} days ({len(rows)}):", lines, "Nobody."))


def productivity(rows: Sequence[ProductivityRow], days: int) -> dict:
    lines = (f"{r.display_name}: {r.work_days} days, {r.breaks_taken} breaks" for r in rows)
    return message(_lines(f"Productivity, last {days} days:", lines, "No users yet."))


def vacation_usage(rows: Sequence[BalanceRow]) -> dict:
    lines = (
        f"{r.display_name}: {r.used_days} used, {r.pending_days} pending, "
        f"{r.available_days} of {r.total_days} available"
        for r in rows
    )
    return message(_lines("Vacation usage:", lines, "No balances."))


def work_hours(rows: Sequence[WorkHoursRow], days: int) -> dict:
    lines = (f"{r.display_name}: {r.hours_text}" for r in rows)
    return message(_lines(f"Work hours, last {days} days:", lines, "No completed work."))
