from datetime import datetime

from src.workday_bot.workday_bot.core.enums import EntryType, Location
from src.workday_bot.workday_bot.ledger.model import TimeEntry
from src.workday_bot.workday_bot.reports.calculator.standard_calculator import StandardWorkHoursCalculator


def _entries(*items):
    return [
        TimeEntry(
            entry_id=i,
            user_id="u1",
            entry_type=kind,
            timestamp=datetime(2026, 3, 2, h, m),
            location=Location.OFFICE,
        )
        for i, (kind, h, m) in enumerate(items, start=1)
    ]


def test_standard_calculator_subtracts_breaks():
    entries = _entries(
        (EntryType.CLOCK_IN, 8, 0),
        (EntryType.PAUZA_START, 12, 0),
        (EntryType.PAUZA_END, 12, 45),
        (EntryType.CLOCK_OUT, 17, 0),
    )
    assert StandardWorkHoursCalculator().worked_minutes(entries) == 8 * 60 + 15


def test_open_segment_is_not_counted():
    entries = _entries(
        (EntryType.CLOCK_IN, 8, 0),
        (EntryType.CLOCK_OUT, 10, 0),
        (EntryType.CLOCK_IN, 11, 0),
    )
    assert StandardWorkHoursCalculator().worked_minutes(entries) == 120


def test_clock_in_from_break_starts_new_segment():
    entries = _entries(
        (EntryType.CLOCK_IN, 8, 0),
        (EntryType.PAUZA_START, 10, 0),
        (EntryType.CLOCK_IN, 10, 30),
        (EntryType.OFF, 12, 0),
    )
    assert StandardWorkHoursCalculator().worked_minutes(entries) == 210
