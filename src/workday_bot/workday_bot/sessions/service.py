from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..core.enums import EntryType, Location, SessionType
from ..core.exceptions import AlreadyWorking, SessionConflict, ValidationError
from ..ledger.service import TimeLedger
from .model import ActiveSession, ClockInResult, EndedSession, OffResult
from .repository import SessionRepository
from .transitions import SessionEvent, SessionState, StoreAction, Transition, resolve, state_of

logger = logging.getLogger(__name__)


class SessionService:
    """Clock-in/out and breaks on top of the session state machine.

    Each call resolves one transition, performs its single store write
    (insert / compare-and-swap replace / compare-and-swap delete) and then
    appends the transition's ledger entries.
    """

    def __init__(self, sessions: SessionRepository, ledger: TimeLedger):
        self._sessions = sessions
        self._ledger = ledger

    def current(self, user_id: str) -> Optional[ActiveSession]:
        return self._sessions.get(str(user_id))

    def start_work(self, user_id: str, location: Location | str = Location.OFFICE, *, now: datetime | None = None) -> ClockInResult:
        location = self._work_location(location)
        now = now or datetime.now()
        current, _ = self._apply(str(user_id), SessionEvent.START_WORK, now, location=location)

        closed_break = None
        if state_of(current) == SessionState.BREAK:
            closed_break = EndedSession(SessionType.BREAK, current.start_time, now, current.location)
        return ClockInResult(location=location, started_at=now, closed_break=closed_break)

    def end_work(self, user_id: str, *, now: datetime | None = None) -> EndedSession:
        now = now or datetime.now()
        current, _ = self._apply(str(user_id), SessionEvent.END_WORK, now)
        return self._work_span(current, now)

    def start_break(self, user_id: str, *, now: datetime | None = None) -> ActiveSession:
        now = now or datetime.now()
        _, new = self._apply(str(user_id), SessionEvent.START_BREAK, now)
        return new

    def end_break(self, user_id: str, *, now: datetime | None = None) -> EndedSession:
        now = now or datetime.now()
        current, _ = self._apply(str(user_id), SessionEvent.END_BREAK, now)
        return EndedSession(SessionType.BREAK, current.start_time, now, current.location)

    def mark_off(self, user_id: str, *, now: datetime | None = None) -> OffResult:
        now = now or datetime.now()
        current, _ = self._apply(str(user_id), SessionEvent.MARK_OFF, now)
        closed = self._work_span(current, now) if current is not None else None
        return OffResult(at=now, closed_work=closed)

    @staticmethod
    def _work_location(location: Location | str) -> Location:
        try:
            loc = Location(location)
        except ValueError:
            raise ValidationError(f"Unknown location {location!r}")
        if loc == Location.AWAY:
            raise ValidationError("Work location must be office or home")
        return loc

    @staticmethod
    def _work_span(current: ActiveSession, now: datetime) -> EndedSession:
        start = current.start_time
        if current.session_type == SessionType.BREAK and current.work_started_at:
            start = current.work_started_at
        return EndedSession(SessionType.WORK, start, now, current.location)

    @staticmethod
    def _next_session(
        user_id: str,
        event: SessionEvent,
        current: Optional[ActiveSession],
        now: datetime,
        location: Optional[Location],
    ) -> Optional[ActiveSession]:
        if event == SessionEvent.START_WORK:
            return ActiveSession(user_id, SessionType.WORK, now, location or Location.OFFICE)
        if event == SessionEvent.START_BREAK:
            return ActiveSession(user_id, SessionType.BREAK, now, current.location, work_started_at=current.start_time)
        if event == SessionEvent.END_BREAK:
            return ActiveSession(user_id, SessionType.WORK, current.work_started_at or now, current.location)
        return None

    def _apply(
        self,
        user_id: str,
        event: SessionEvent,
        now: datetime,
        *,
        location: Optional[Location] = None,
    ) -> tuple[Optional[ActiveSession], Optional[ActiveSession]]:
        current = self._sessions.get(user_id)
        transition = resolve(state_of(current), event)
        new = self._next_session(user_id, event, current, now, location)

        self._write(transition, current, new)

        for entry_type in transition.entries:
            self._ledger.append(
                user_id,
                entry_type,
                location=self._entry_location(entry_type, current, new),
                timestamp=now,
            )

        logger.info(
            "session user=%s event=%s %s -> %s",
            user_id,
            event.value,
            state_of(current).value,
            transition.target.value,
        )
        return current, new

    def _write(self, transition: Transition, current: Optional[ActiveSession], new: Optional[ActiveSession]) -> None:
        if transition.store == StoreAction.INSERT:
            if not self._sessions.insert(new):
                # Another clock-in for the same user won the race.
                raise AlreadyWorking()
        elif transition.store == StoreAction.REPLACE:
            if not self._sessions.replace(expected=current, new=new):
                raise SessionConflict()
        elif transition.store == StoreAction.DELETE:
            if not self._sessions.delete(expected=current):
                raise SessionConflict()

    @staticmethod
    def _entry_location(entry_type: EntryType, current: Optional[ActiveSession], new: Optional[ActiveSession]) -> Location:
        if entry_type == EntryType.OFF:
            return Location.AWAY
        if entry_type == EntryType.CLOCK_IN:
            return new.location
        return current.location
