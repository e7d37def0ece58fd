from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import RequestKind, RequestStatus


@dataclass(frozen=True)
class VacationBalance:
    user_id: str
    total_days: int
    used_days: int
    pending_days: int
    carried_over_days: int
    last_updated: Optional[datetime] = None

    @property
    def available_days(self) -> int:
        # Not clamped: a negative value means the books are off and is shown as-is.
        return self.total_days - self.used_days - self.pending_days


@dataclass(frozen=True)
class VacationRequest:
    request_id: int
    user_id: str
    kind: RequestKind
    requested_days: int
    start_date: date
    end_date: date
    reason: Optional[str]
    status: RequestStatus
    created_at: datetime
    pm_approved_by: Optional[str] = None
    pm_approved_at: Optional[datetime] = None
    admin_approved_by: Optional[str] = None
    admin_approved_at: Optional[datetime] = None
    rejected_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
