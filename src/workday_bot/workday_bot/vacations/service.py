from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..audit.service import AuditLog
from ..common.validators import optional_text, require_in_range, require_non_empty, require_non_negative
from ..core.constants import (
    MAX_WORKING_DAYS,
    MIN_WORKING_DAYS,
    RECENT_REQUESTS_LIMIT,
)
from ..core.enums import AuditAction, BalanceOperation, EntryType, Location, RequestKind, RequestStatus
from ..core.exceptions import BalanceNotFound, InsufficientBalance, InvalidTransition, RequestNotFound, ValidationError
from ..ledger.service import TimeLedger
from .model import VacationBalance, VacationRequest
from .repository import BalanceRepository, VacationRequestRepository
from .workflow import ApprovalAction, next_status

logger = logging.getLogger(__name__)


class BalanceLedger:
    """Per-user vacation counters. Only administrators change total_days."""

    def __init__(self, balances: BalanceRepository, audit: Optional[AuditLog] = None):
        self._balances = balances
        self._audit = audit

    def get_balance(self, user_id: str) -> VacationBalance:
        balance = self._balances.get(str(user_id))
        if not balance:
            raise BalanceNotFound(str(user_id))
        return balance

    def list_balances(self) -> Sequence[VacationBalance]:
        return self._balances.list_all()

    def adjust(
        self,
        user_id: str,
        operation: BalanceOperation,
        days: int,
        *,
        actor_id: Optional[str] = None,
        now: datetime | None = None,
    ) -> VacationBalance:
        operation = BalanceOperation(operation)
        days = require_non_negative(days, "Days")

        now = now or datetime.now()
        before = self._balances.get(str(user_id))
        ok = self._balances.adjust_total(user_id=str(user_id), operation=operation, days=days, at=now)
        if not ok:
            raise BalanceNotFound(str(user_id))

        after = self.get_balance(user_id)
        if self._audit:
            self._audit.record(
                actor_id or user_id,
                AuditAction.BALANCE_ADJUSTED,
                {
                    "target_user": str(user_id),
                    "operation": operation.value,
                    "days": days,
                    "total_before": before.total_days if before else None,
                    "total_after": after.total_days,
                },
                now=now,
            )
        logger.info(
            "balance %s user=%s days=%s total=%s by=%s",
            operation.value,
            user_id,
            days,
            after.total_days,
            actor_id,
        )
        return after


class VacationService:
    def __init__(
        self,
        requests: VacationRequestRepository,
        balances: BalanceRepository,
        ledger: TimeLedger,
        audit: Optional[AuditLog] = None,
    ):
        self._requests = requests
        self._balances = balances
        self._ledger = ledger
        self._audit = audit

    @staticmethod
    def _validate_period(start_date: date, end_date: date, requested_days: int) -> int:
        days = require_in_range(requested_days, "Working days", MIN_WORKING_DAYS, MAX_WORKING_DAYS)
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date")
        return days

    def request_leave(
        self,
        *,
        user_id: str,
        start_date: date,
        end_date: date,
        requested_days: int,
        reason: Optional[str] = None,
        now: datetime | None = None,
    ) -> int:
        days = self._validate_period(start_date, end_date, requested_days)
        now = now or datetime.now()

        if not self._balances.reserve(user_id=str(user_id), days=days, at=now):
            balance = self._balances.get(str(user_id))
            if not balance:
                raise BalanceNotFound(str(user_id))
            raise InsufficientBalance(balance.available_days, days)

        try:
            request_id = self._requests.create(
                user_id=str(user_id),
                kind=RequestKind.VACATION,
                requested_days=days,
                start_date=start_date,
                end_date=end_date,
                reason=optional_text(reason),
                status=RequestStatus.PENDING,
                created_at=now,
            )
        except Exception:
            self._balances.release(user_id=str(user_id), days=days, at=now)
            raise

        logger.info("vacation requested id=%s user=%s days=%s", request_id, user_id, days)
        return request_id

    def request_sick_leave(
        self,
        *,
        user_id: str,
        start_date: date,
        end_date: date,
        requested_days: int,
        reason: str,
        now: datetime | None = None,
    ) -> int:
        days = self._validate_period(start_date, end_date, requested_days)
        reason = require_non_empty(reason, "Reason")
        now = now or datetime.now()

        request_id = self._requests.create(
            user_id=str(user_id),
            kind=RequestKind.SICK,
            requested_days=days,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=RequestStatus.ADMIN_APPROVED,
            created_at=now,
            admin_approved_by=str(user_id),
        )
        self._ledger.append(
            user_id,
            EntryType.OFF_SICK,
            location=Location.AWAY,
            timestamp=now,
            notes=f"Sick leave: {reason}",
        )
        logger.info("sick leave recorded id=%s user=%s days=%s", request_id, user_id, days)
        return request_id

    def get_request(self, request_id: int) -> VacationRequest:
        req = self._requests.get(request_id=int(request_id))
        if not req:
            raise RequestNotFound(int(request_id))
        return req

    def list_pending(self) -> Sequence[VacationRequest]:
        return self._requests.list_by_status(status=RequestStatus.PENDING)

    def list_for_user(self, user_id: str, limit: int = RECENT_REQUESTS_LIMIT) -> Sequence[VacationRequest]:
        return self._requests.list_for_user(user_id=str(user_id), limit=int(limit))

    def pm_approve(self, *, request_id: int, approver_id: str, now: datetime | None = None) -> VacationRequest:
        return self._decide(request_id, ApprovalAction.PM_APPROVE, approver_id, None, now)

    def pm_reject(
        self, *, request_id: int, approver_id: str, reason: str, now: datetime | None = None
    ) -> VacationRequest:
        return self._decide(request_id, ApprovalAction.PM_REJECT, approver_id, reason, now)

    def admin_approve(self, *, request_id: int, approver_id: str, now: datetime | None = None) -> VacationRequest:
        return self._decide(request_id, ApprovalAction.ADMIN_APPROVE, approver_id, None, now)

    def admin_reject(
        self, *, request_id: int, approver_id: str, reason: str, now: datetime | None = None
    ) -> VacationRequest:
        return self._decide(request_id, ApprovalAction.ADMIN_REJECT, approver_id, reason, now)

    def _decide(
        self,
        request_id: int,
        action: ApprovalAction,
        actor_id: str,
        reason: Optional[str],
        now: datetime | None,
    ) -> VacationRequest:
        if action.is_rejection:
            reason = require_non_empty(reason, "Reason")
        now = now or datetime.now()

        req = self.get_request(request_id)
        target = next_status(req, action)

        ok = self._requests.transition(
            request_id=req.request_id,
            expected=req.status,
            status=target,
            actor_id=str(actor_id),
            at=now,
            rejection_reason=reason if action.is_rejection else None,
        )
        if not ok:
            current = self.get_request(request_id)
            raise InvalidTransition(current.request_id, current.status.value, action.value)

        if req.kind == RequestKind.VACATION:
            if target == RequestStatus.ADMIN_APPROVED:
                self._balances.consume(user_id=req.user_id, days=req.requested_days, at=now)
            elif target == RequestStatus.REJECTED:
                self._balances.release(user_id=req.user_id, days=req.requested_days, at=now)

        if self._audit:
            self._audit.record(
                actor_id,
                AuditAction.REQUEST_DECIDED,
                {
                    "request_id": req.request_id,
                    "action": action.value,
                    "from": req.status.value,
                    "to": target.value,
                    "reason": reason,
                },
                now=now,
            )
        logger.info("request %s %s -> %s by=%s", req.request_id, req.status.value, target.value, actor_id)
        return self.get_request(req.request_id)
