from __future__ import annotations

import pytest

from src.workday_bot.workday_bot.core.enums import AuditAction, BalanceOperation
from src.workday_bot.workday_bot.core.exceptions import BalanceNotFound, ValidationError
from tests.fakes import FakeStore, at


def test_get_balance_missing_row():
    store = FakeStore()
    with pytest.raises(BalanceNotFound):
        store.container.balance_ledger.get_balance("ghost")


def test_available_is_total_minus_used_and_pending():
    store = FakeStore()
    store.balances.put("a", total=20, used=5, pending=3)
    assert store.container.balance_ledger.get_balance("a").available_days == 12


def test_remove_floors_at_zero():
    store = FakeStore()
    store.balances.put("a", total=10)

    balance = store.container.balance_ledger.adjust("a", BalanceOperation.REMOVE, 15, actor_id="boss", now=at(9))

    assert balance.total_days == 0


def test_add_and_set():
    store = FakeStore()
    ledger = store.container.balance_ledger
    store.balances.put("a", total=10)

    assert ledger.adjust("a", BalanceOperation.ADD, 5, now=at(9)).total_days == 15
    assert ledger.adjust("a", BalanceOperation.SET, 22, now=at(9)).total_days == 22


def test_set_creates_missing_balance():
    store = FakeStore()

    balance = store.container.balance_ledger.adjust("new", BalanceOperation.SET, 20, actor_id="boss", now=at(9))

    assert balance.total_days == 20
    assert balance.used_days == 0


def test_add_on_missing_balance_fails():
    store = FakeStore()
    with pytest.raises(BalanceNotFound):
        store.container.balance_ledger.adjust("ghost", BalanceOperation.ADD, 5, now=at(9))
    assert store.audit.entries == []


def test_remove_more_than_total_floors_large_balance():
    store = FakeStore()
    store.balances.put("a", total=120)

    balance = store.container.balance_ledger.adjust("a", BalanceOperation.REMOVE, 125, actor_id="boss", now=at(9))

    assert balance.total_days == 0


@pytest.mark.parametrize("operation", [BalanceOperation.ADD, BalanceOperation.REMOVE, BalanceOperation.SET])
def test_negative_days_are_rejected(operation):
    store = FakeStore()
    store.balances.put("a", total=10)
    with pytest.raises(ValidationError):
        store.container.balance_ledger.adjust("a", operation, -1, now=at(9))
    assert store.balances.get("a").total_days == 10


def test_adjustment_is_audited_with_actor():
    store = FakeStore()
    store.balances.put("a", total=10)

    store.container.balance_ledger.adjust("a", BalanceOperation.ADD, 2, actor_id="boss", now=at(9))

    [entry] = store.audit.entries
    assert entry.user_id == "boss"
    assert entry.action == AuditAction.BALANCE_ADJUSTED
    assert entry.details == {
        "target_user": "a",
        "operation": "add",
        "days": 2,
        "total_before": 10,
        "total_after": 12,
    }
