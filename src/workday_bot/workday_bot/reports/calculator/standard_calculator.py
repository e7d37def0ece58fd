from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from .base import WorkHoursCalculator
from ...common.datetime_utils import elapsed
from ...core.enums import EntryType
from ...ledger.model import TimeEntry

_CLOSES = (EntryType.PAUZA_START, EntryType.CLOCK_OUT, EntryType.OFF, EntryType.OFF_SICK)


class StandardWorkHoursCalculator(WorkHoursCalculator):
    """Standard rule: sum of worked segments, breaks excluded.

    clock_in and pauza_end open a segment; pauza_start, clock_out, off and
    off_sick close it. A segment still open at the end of the window is not
    counted. A closing entry without an open segment is ignored.
    """

    def worked_minutes(self, entries: Sequence[TimeEntry]) -> int:
        total = timedelta(0)
        opened: Optional[datetime] = None

        for e in entries:
            if e.entry_type == EntryType.CLOCK_IN:
                opened = e.timestamp
            elif e.entry_type == EntryType.PAUZA_END:
                if opened is None:
                    opened = e.timestamp
            elif e.entry_type in _CLOSES and opened is not None:
                total += elapsed(opened, e.timestamp)
                opened = None

        return int(total.total_seconds() // 60)
