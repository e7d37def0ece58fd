from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import elapsed
from ..core.enums import Location, SessionType


@dataclass(frozen=True)
class ActiveSession:
    """Domain entity: the single running work or break session of a user.

    A break remembers when the work it interrupted started (work_started_at),
    so ending the break resumes that work session.
    """

    user_id: str
    session_type: SessionType
    start_time: datetime
    location: Location
    work_started_at: Optional[datetime] = None


@dataclass(frozen=True)
class EndedSession:
    session_type: SessionType
    start_time: datetime
    end_time: datetime
    location: Location

    @property
    def duration(self) -> timedelta:
        return elapsed(self.start_time, self.end_time)


@dataclass(frozen=True)
class ClockInResult:
    location: Location
    started_at: datetime
    closed_break: Optional[EndedSession] = None


@dataclass(frozen=True)
class OffResult:
    at: datetime
    closed_work: Optional[EndedSession] = None
