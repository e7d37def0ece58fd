from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.validators import require_positive
from ..core.enums import EntryType, Location
from .model import TimeEntry
from .repository import TimeEntryRepository


class TimeLedger:
    """Write-once, read-many log of session transitions."""

    def __init__(self, entries: TimeEntryRepository):
        self._entries = entries

    def append(
        self,
        user_id: str,
        entry_type: EntryType,
        *,
        location: Location,
        timestamp: datetime,
        notes: Optional[str] = None,
    ) -> int:
        return self._entries.append(
            user_id=str(user_id),
            entry_type=entry_type,
            timestamp=timestamp,
            location=location,
            notes=notes,
        )

    def query(self, user_id: str, since_days: int, *, now: datetime | None = None) -> Sequence[TimeEntry]:
        """Entries of one user within the trailing window, newest first."""
        days = require_positive(since_days, "Days")
        now = now or datetime.now()
        return self._entries.list_between(start=now - timedelta(days=days), user_id=str(user_id), newest_first=True)
