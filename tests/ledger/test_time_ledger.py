from __future__ import annotations

import pytest

from src.workday_bot.workday_bot.core.enums import EntryType, Location
from src.workday_bot.workday_bot.core.exceptions import ValidationError
from tests.fakes import FakeStore, at


def test_query_returns_window_newest_first():
    store = FakeStore()
    ledger = store.container.time_ledger
    ledger.append("u1", EntryType.CLOCK_IN, location=Location.OFFICE, timestamp=at(9, day=1))
    ledger.append("u1", EntryType.CLOCK_OUT, location=Location.OFFICE, timestamp=at(17, day=1))
    ledger.append("u1", EntryType.CLOCK_IN, location=Location.HOME, timestamp=at(9, day=20))
    ledger.append("u2", EntryType.CLOCK_IN, location=Location.HOME, timestamp=at(9, day=20))

    entries = ledger.query("u1", 7, now=at(12, day=20))

    assert [(e.entry_type, e.timestamp) for e in entries] == [(EntryType.CLOCK_IN, at(9, day=20))]

    entries = ledger.query("u1", 30, now=at(12, day=20))
    assert [e.entry_type for e in entries] == [EntryType.CLOCK_IN, EntryType.CLOCK_OUT, EntryType.CLOCK_IN]
    assert entries[0].timestamp > entries[1].timestamp > entries[2].timestamp


def test_query_window_must_be_positive():
    with pytest.raises(ValidationError):
        FakeStore().container.time_ledger.query("u1", 0, now=at(12))


def test_query_accepts_long_windows():
    store = FakeStore()
    ledger = store.container.time_ledger
    ledger.append("u1", EntryType.CLOCK_IN, location=Location.OFFICE, timestamp=at(9, day=1))

    entries = ledger.query("u1", 60, now=at(12, day=20))

    assert [e.entry_type for e in entries] == [EntryType.CLOCK_IN]
