from __future__ import annotations

from datetime import date

import pytest

from src.workday_bot.workday_bot.core.enums import AuditAction, EntryType, Location, RequestKind, RequestStatus
from src.workday_bot.workday_bot.core.exceptions import (
    BalanceNotFound,
    InsufficientBalance,
    InvalidTransition,
    RequestNotFound,
    ValidationError,
)
from tests.fakes import FakeStore, at


@pytest.fixture()
def store():
    s = FakeStore()
    s.balances.put("a", total=20, used=5)
    return s


def _request(store, days, *, user="a", now=None):
    return store.container.vacation_service.request_leave(
        user_id=user,
        start_date=date(2026, 4, 1),
        end_date=date(2026, 4, 14),
        requested_days=days,
        reason="trip",
        now=now or at(10),
    )


def test_end_to_end_two_stage_approval(store):
    svc = store.container.vacation_service

    rid = _request(store, 10)
    assert svc.get_request(rid).status == RequestStatus.PENDING
    assert store.balances.get("a").pending_days == 10

    req = svc.pm_approve(request_id=rid, approver_id="pm1", now=at(11))
    assert req.status == RequestStatus.PM_APPROVED
    assert req.pm_approved_by == "pm1"

    req = svc.admin_approve(request_id=rid, approver_id="boss", now=at(12))
    assert req.status == RequestStatus.ADMIN_APPROVED
    assert req.admin_approved_by == "boss"

    balance = store.balances.get("a")
    assert balance.used_days == 15
    assert balance.pending_days == 0
    assert balance.available_days == 5


def test_request_equal_to_available_succeeds(store):
    rid = _request(store, 15)
    assert store.container.vacation_service.get_request(rid).status == RequestStatus.PENDING
    assert store.balances.get("a").available_days == 0


def test_request_above_available_reports_available(store):
    with pytest.raises(InsufficientBalance) as exc:
        _request(store, 16)

    assert exc.value.available == 15
    assert store.requests.rows == {}
    assert store.balances.get("a").pending_days == 0


def test_pending_days_count_against_next_request(store):
    _request(store, 10)
    with pytest.raises(InsufficientBalance) as exc:
        _request(store, 6)
    assert exc.value.available == 5


def test_request_without_balance_row(store):
    with pytest.raises(BalanceNotFound):
        _request(store, 1, user="nobody")


def test_failed_insert_releases_reservation(store):
    store.requests.fail_create = True
    with pytest.raises(RuntimeError):
        _request(store, 3)
    assert store.balances.get("a").pending_days == 0


@pytest.mark.parametrize("days", [0, 366])
def test_working_days_range_is_validated(store, days):
    with pytest.raises(ValidationError):
        _request(store, days)


def test_end_before_start_is_rejected(store):
    with pytest.raises(ValidationError):
        store.container.vacation_service.request_leave(
            user_id="a",
            start_date=date(2026, 4, 10),
            end_date=date(2026, 4, 1),
            requested_days=2,
            now=at(10),
        )


def test_admin_cannot_skip_pm_stage(store):
    rid = _request(store, 2)
    with pytest.raises(InvalidTransition):
        store.container.vacation_service.admin_approve(request_id=rid, approver_id="boss", now=at(11))
    assert store.container.vacation_service.get_request(rid).status == RequestStatus.PENDING


def test_terminal_states_reject_further_actions(store):
    svc = store.container.vacation_service
    rid = _request(store, 2)
    svc.pm_reject(request_id=rid, approver_id="pm1", reason="busy sprint", now=at(11))

    with pytest.raises(InvalidTransition):
        svc.pm_approve(request_id=rid, approver_id="pm1", now=at(12))
    with pytest.raises(InvalidTransition):
        svc.admin_reject(request_id=rid, approver_id="boss", reason="again", now=at(12))


@pytest.mark.parametrize("action,stage", [("pm_reject", None), ("admin_reject", "pm_approve")])
def test_rejection_requires_reason(store, action, stage):
    svc = store.container.vacation_service
    rid = _request(store, 2)
    if stage:
        getattr(svc, stage)(request_id=rid, approver_id="pm1", now=at(11))
    before = svc.get_request(rid).status

    with pytest.raises(ValidationError):
        getattr(svc, action)(request_id=rid, approver_id="boss", reason="  ", now=at(12))
    assert svc.get_request(rid).status == before
    assert store.balances.get("a").pending_days == 2


def test_rejection_releases_pending_days(store):
    svc = store.container.vacation_service
    rid = _request(store, 4)
    svc.pm_approve(request_id=rid, approver_id="pm1", now=at(11))

    req = svc.admin_reject(request_id=rid, approver_id="boss", reason="coverage", now=at(12))

    assert req.status == RequestStatus.REJECTED
    assert req.rejected_by == "boss"
    assert req.rejection_reason == "coverage"
    assert store.balances.get("a").pending_days == 0
    assert store.balances.get("a").used_days == 5


def test_unknown_request(store):
    with pytest.raises(RequestNotFound) as exc:
        store.container.vacation_service.pm_approve(request_id=99, approver_id="pm1", now=at(11))
    assert exc.value.request_id == 99


def test_decisions_are_audited(store):
    rid = _request(store, 1)
    store.container.vacation_service.pm_approve(request_id=rid, approver_id="pm1", now=at(11))

    entry = store.audit.entries[-1]
    assert entry.action == AuditAction.REQUEST_DECIDED
    assert entry.user_id == "pm1"
    assert entry.details["to"] == "pm_approved"


def test_sick_leave_is_auto_approved_without_balance():
    store = FakeStore()
    svc = store.container.vacation_service

    rid = svc.request_sick_leave(
        user_id="s",
        start_date=date(2026, 4, 1),
        end_date=date(2026, 4, 2),
        requested_days=2,
        reason="flu",
        now=at(8),
    )

    req = svc.get_request(rid)
    assert req.kind == RequestKind.SICK
    assert req.status == RequestStatus.ADMIN_APPROVED
    assert req.admin_approved_by == "s"
    assert store.balances.get("s") is None

    [entry] = store.entries.entries
    assert entry.entry_type == EntryType.OFF_SICK
    assert entry.location == Location.AWAY
    assert entry.notes == "Sick leave: flu"


def test_sick_leave_requires_reason(store):
    with pytest.raises(ValidationError):
        store.container.vacation_service.request_sick_leave(
            user_id="a",
            start_date=date(2026, 4, 1),
            end_date=date(2026, 4, 1),
            requested_days=1,
            reason="",
            now=at(8),
        )


def test_pending_queue_is_fifo(store):
    store.balances.put("b", total=10)
    first = _request(store, 1, now=at(9))
    second = _request(store, 1, user="b", now=at(10))
    third = _request(store, 1, now=at(11))
    store.container.vacation_service.pm_approve(request_id=second, approver_id="pm1", now=at(12))

    pending = store.container.vacation_service.list_pending()

    assert [r.request_id for r in pending] == [first, third]


def test_list_for_user_is_newest_first(store):
    first = _request(store, 1, now=at(9))
    second = _request(store, 1, now=at(10))

    recent = store.container.vacation_service.list_for_user("a")

    assert [r.request_id for r in recent] == [second, first]
