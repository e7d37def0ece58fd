from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import BalanceOperation, RequestKind, RequestStatus
from .model import VacationBalance, VacationRequest


class BalanceRepository(Protocol):
    def get(self, user_id: str) -> Optional[VacationBalance]:
        raise NotImplementedError

    def list_all(self) -> Sequence[VacationBalance]:
        raise NotImplementedError

    def adjust_total(self, *, user_id: str, operation: BalanceOperation, days: int, at: datetime) -> bool:
        """Apply add/remove/set to total_days.

        remove floors at 0. set creates the row when missing; add/remove
        return False when the user has no balance row.
        """

        raise NotImplementedError

    def reserve(self, *, user_id: str, days: int, at: datetime) -> bool:
        """Atomically add `days` to pending_days only if that many are available."""

        raise NotImplementedError

    def release(self, *, user_id: str, days: int, at: datetime) -> bool:
        """Give back reserved days (pending_days never goes below 0)."""

        raise NotImplementedError

    def consume(self, *, user_id: str, days: int, at: datetime) -> bool:
        """Move reserved days from pending_days to used_days."""

        raise NotImplementedError


class VacationRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: str,
        kind: RequestKind,
        requested_days: int,
        start_date: date,
        end_date: date,
        reason: Optional[str],
        status: RequestStatus,
        created_at: datetime,
        admin_approved_by: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def get(self, *, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_by_status(self, *, status: RequestStatus, limit: int = 200) -> Sequence[VacationRequest]:
        """Oldest first (FIFO approval queue)."""

        raise NotImplementedError

    def list_for_user(self, *, user_id: str, limit: int = 10) -> Sequence[VacationRequest]:
        """Newest first."""

        raise NotImplementedError

    def list_approved_covering(self, *, day: date) -> Sequence[VacationRequest]:
        """admin_approved requests with start_date <= day <= end_date."""

        raise NotImplementedError

    def list_approved_upcoming(self, *, from_day: date, limit: int = 10) -> Sequence[VacationRequest]:
        """admin_approved requests starting on/after from_day, soonest first."""

        raise NotImplementedError

    def transition(
        self,
        *,
        request_id: int,
        expected: RequestStatus,
        status: RequestStatus,
        actor_id: str,
        at: datetime,
        rejection_reason: Optional[str] = None,
    ) -> bool:
        """Compare-and-swap the status; records the actor in the matching columns."""

        raise NotImplementedError
