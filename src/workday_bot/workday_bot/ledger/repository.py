from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import EntryType, Location
from .model import TimeEntry


class TimeEntryRepository(Protocol):
    """Append-only store of time ledger entries (no update/delete)."""

    def append(
        self,
        *,
        user_id: str,
        entry_type: EntryType,
        timestamp: datetime,
        location: Location,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start: datetime,
        end: Optional[datetime] = None,
        user_id: Optional[str] = None,
        entry_types: Optional[Iterable[EntryType]] = None,
        newest_first: bool = True,
        limit: Optional[int] = None,
    ) -> Sequence[TimeEntry]:
        """Entries with start <= timestamp (< end when given)."""

        raise NotImplementedError
