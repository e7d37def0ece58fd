"""Approval state machine for vacation requests.

    pending --pm_approve--> pm_approved --admin_approve--> admin_approved
    pending / pm_approved --reject--> rejected

admin_approved and rejected are terminal. Sick leave is created directly in
admin_approved and never passes through this table.
"""

from __future__ import annotations

from enum import Enum

from ..core.enums import RequestStatus
from ..core.exceptions import InvalidTransition
from .model import VacationRequest


class ApprovalAction(str, Enum):
    PM_APPROVE = "pm_approve"
    PM_REJECT = "pm_reject"
    ADMIN_APPROVE = "admin_approve"
    ADMIN_REJECT = "admin_reject"

    @property
    def is_rejection(self) -> bool:
        return self in (ApprovalAction.PM_REJECT, ApprovalAction.ADMIN_REJECT)


APPROVAL_TRANSITIONS: dict[tuple[RequestStatus, ApprovalAction], RequestStatus] = {
    (RequestStatus.PENDING, ApprovalAction.PM_APPROVE): RequestStatus.PM_APPROVED,
    (RequestStatus.PENDING, ApprovalAction.PM_REJECT): RequestStatus.REJECTED,
    (RequestStatus.PENDING, ApprovalAction.ADMIN_REJECT): RequestStatus.REJECTED,
    (RequestStatus.PM_APPROVED, ApprovalAction.ADMIN_APPROVE): RequestStatus.ADMIN_APPROVED,
    (RequestStatus.PM_APPROVED, ApprovalAction.ADMIN_REJECT): RequestStatus.REJECTED,
}


def next_status(request: VacationRequest, action: ApprovalAction) -> RequestStatus:
    target = APPROVAL_TRANSITIONS.get((request.status, action))
    if target is None:
        raise InvalidTransition(request.request_id, request.status.value, action.value)
    return target
