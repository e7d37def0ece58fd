from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import EntryType, Location


@dataclass(frozen=True)
class TimeEntry:
    """Immutable record of one observed state transition."""

    entry_id: int
    user_id: str
    entry_type: EntryType
    timestamp: datetime
    location: Location
    notes: Optional[str] = None
